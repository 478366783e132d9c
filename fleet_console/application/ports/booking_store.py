from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from fleet_console.domain.entities.booking import Booking, BookingKind, BookingStatus
from fleet_console.domain.entities.viewer import Viewer


class BookingStorePort(ABC):
    """Client-side contract of the remote record store that owns bookings."""

    @abstractmethod
    def list_bookings(
        self,
        viewer: Viewer,
        kind: BookingKind,
        status: BookingStatus | None = None,
    ) -> list[Booking]:
        """Bookings of `kind` visible to `viewer`. Raises BookingStoreError."""
        raise NotImplementedError

    @abstractmethod
    def accept(self, viewer: Viewer, kind: BookingKind, booking_id: str) -> Booking:
        """Pending -> Accepted. Raises StaleTransition or TransitionFailed."""
        raise NotImplementedError

    @abstractmethod
    def decline(self, viewer: Viewer, kind: BookingKind, booking_id: str) -> Booking:
        """Pending -> Declined. Raises StaleTransition or TransitionFailed."""
        raise NotImplementedError

    @abstractmethod
    def create_booking(self, viewer: Viewer, kind: BookingKind, payload: dict[str, Any]) -> Booking:
        """Create a Pending booking from a validated payload. Raises BookingStoreError."""
        raise NotImplementedError

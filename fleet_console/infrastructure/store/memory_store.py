from __future__ import annotations

import logging
import threading
from dataclasses import replace
from datetime import datetime, timezone
from typing import Any

from fleet_console.application.exceptions import StaleTransition, TransitionFailed
from fleet_console.application.ports.booking_store import BookingStorePort
from fleet_console.application.utils.ordering import order_by_schedule
from fleet_console.domain.entities.booking import (
    ActorRef,
    Booking,
    BookingKind,
    BookingStatus,
    InspectionDetails,
    VesselRef,
    VoyageDetails,
)
from fleet_console.domain.entities.viewer import Role, Viewer


class MemoryBookingStore(BookingStorePort):
    """In-process record store with the same rules the remote store applies."""

    def __init__(self, bookings: list[Booking] | None = None) -> None:
        self._bookings: dict[tuple[BookingKind, str], Booking] = {}
        self._lock = threading.Lock()  # guards read-check-write of a record
        self._logger = logging.getLogger(__name__)
        self.calls: list[tuple[str, str | None]] = []
        for booking in bookings or []:
            self.add(booking)

    def add(self, booking: Booking) -> Booking:
        self._bookings[(booking.kind, booking.id)] = booking
        return booking

    def get(self, kind: BookingKind, booking_id: str) -> Booking | None:
        return self._bookings.get((kind, booking_id))

    def list_bookings(
        self,
        viewer: Viewer,
        kind: BookingKind,
        status: BookingStatus | None = None,
    ) -> list[Booking]:
        self.calls.append(("list", kind.value))
        visible = [
            booking
            for (booking_kind, _), booking in self._bookings.items()
            if booking_kind is kind and _is_visible(booking, viewer)
        ]
        if status is not None:
            visible = [booking for booking in visible if booking.status is status]
        return order_by_schedule(visible)

    def accept(self, viewer: Viewer, kind: BookingKind, booking_id: str) -> Booking:
        self.calls.append(("accept", booking_id))
        return self._respond(viewer, kind, booking_id, BookingStatus.ACCEPTED)

    def decline(self, viewer: Viewer, kind: BookingKind, booking_id: str) -> Booking:
        self.calls.append(("decline", booking_id))
        return self._respond(viewer, kind, booking_id, BookingStatus.DECLINED)

    def create_booking(self, viewer: Viewer, kind: BookingKind, payload: dict[str, Any]) -> Booking:
        self.calls.append(("create", None))
        with self._lock:
            booking_id = f"mock_booking_{len(self._bookings) + 1}"
            booking = self._new_booking(booking_id, viewer, kind, payload)
            self.add(booking)
        self._logger.info(
            "Mock booking created",
            extra={"booking_id": booking_id, "kind": kind.value, "actor_id": viewer.actor_id},
        )
        return booking

    def _new_booking(self, booking_id: str, viewer: Viewer, kind: BookingKind, payload: dict[str, Any]) -> Booking:
        return Booking(
            id=booking_id,
            kind=kind,
            vessel=VesselRef(name=payload["vessel_name"], id=payload.get("vessel_id")),
            requester=ActorRef(id=viewer.actor_id),
            scheduled_date=str(payload["scheduled_date"]),
            status=BookingStatus.PENDING,
            scheduled_time=payload.get("scheduled_time"),
            counterpart=ActorRef(id=str(payload["counterpart_id"])),
            details=_details_from_payload(kind, payload),
            notes=payload.get("notes") or "",
            special_requirements=payload.get("special_requirements") or "",
            created_at=datetime.now(timezone.utc),
        )

    def _respond(
        self,
        viewer: Viewer,
        kind: BookingKind,
        booking_id: str,
        target: BookingStatus,
    ) -> Booking:
        with self._lock:
            return self._apply(viewer, kind, booking_id, target)

    def _apply(
        self,
        viewer: Viewer,
        kind: BookingKind,
        booking_id: str,
        target: BookingStatus,
    ) -> Booking:
        verb = "accept" if target is BookingStatus.ACCEPTED else "decline"
        booking = self.get(kind, booking_id)
        if booking is None:
            raise TransitionFailed("Booking not found")
        if not viewer.is_assignee_for(kind):
            raise TransitionFailed(f"Not authorized to {verb} bookings")
        if booking.counterpart is None or booking.counterpart.id != viewer.actor_id:
            raise TransitionFailed(f"Not authorized to {verb} this booking")
        if booking.status is not BookingStatus.PENDING:
            raise StaleTransition("Booking is not pending")

        now = datetime.now(timezone.utc)
        if target is BookingStatus.ACCEPTED:
            updated = replace(booking, status=target, accepted_at=now)
        else:
            updated = replace(booking, status=target, declined_at=now)
        self.add(updated)
        return updated


def _is_visible(booking: Booking, viewer: Viewer) -> bool:
    if viewer.role in (Role.SURVEYOR, Role.CARGO_MANAGER):
        return booking.counterpart is not None and booking.counterpart.id == viewer.actor_id
    if viewer.role is Role.SHIP_MANAGEMENT:
        return booking.requester.id == viewer.actor_id
    return True


def _details_from_payload(kind: BookingKind, payload: dict[str, Any]) -> InspectionDetails | VoyageDetails:
    if kind is BookingKind.INSPECTION:
        return InspectionDetails(
            survey_type=payload["survey_type"],
            location=payload["location"],
            ship_type=payload.get("ship_type"),
            estimated_duration_hours=payload.get("estimated_duration") or 4,
        )
    return VoyageDetails(
        cargo_type=payload["cargo_type"],
        departure_port=payload["departure_port"],
        destination_port=payload["destination_port"],
        ship_type=payload.get("ship_type"),
        estimated_duration_days=payload.get("estimated_duration") or 7,
        cargo_weight=payload.get("cargo_weight"),
        cargo_units=payload.get("cargo_units"),
    )

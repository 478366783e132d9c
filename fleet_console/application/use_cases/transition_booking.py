from __future__ import annotations

import logging
from dataclasses import dataclass

from fleet_console.application.exceptions import (
    BookingStoreError,
    BookingTransitionError,
    ResyncFailed,
    StaleTransition,
    TransitionFailed,
)
from fleet_console.application.ports.booking_store import BookingStorePort
from fleet_console.domain.entities.booking import Booking, BookingKind, BookingStatus
from fleet_console.domain.entities.viewer import Viewer


@dataclass(frozen=True)
class TransitionResult:
    booking: Booking
    bookings: list[Booking]  # full resynced collection for the viewer


class BookingTransitionManager:
    """Accept or decline a booking, then re-read everything the viewer can see.

    The record store is the source of truth: the manager never edits its own
    copy of a booking. One mutation call, then on success one resync per
    visible booking kind. No retries.
    """

    def __init__(self, store: BookingStorePort, viewer: Viewer) -> None:
        self._store = store
        self._viewer = viewer
        self._logger = logging.getLogger(__name__)

    def accept(self, booking_id: str, kind: BookingKind) -> TransitionResult:
        return self._transition(booking_id, kind, BookingStatus.ACCEPTED)

    def decline(self, booking_id: str, kind: BookingKind) -> TransitionResult:
        return self._transition(booking_id, kind, BookingStatus.DECLINED)

    def resync(self) -> list[Booking]:
        bookings: list[Booking] = []
        for kind in self._viewer.role.visible_kinds:
            bookings.extend(self._store.list_bookings(self._viewer, kind))
        return bookings

    def _transition(self, booking_id: str, kind: BookingKind, target: BookingStatus) -> TransitionResult:
        log_extra = {
            "booking_id": booking_id,
            "kind": kind.value,
            "actor_id": self._viewer.actor_id,
            "status": target.value,
        }
        mutate = self._store.accept if target is BookingStatus.ACCEPTED else self._store.decline
        try:
            booking = mutate(self._viewer, kind, booking_id)
        except StaleTransition as e:
            self._logger.warning("Stale booking transition", extra={**log_extra, "reason": e.reason})
            raise
        except BookingTransitionError as e:
            self._logger.error("Booking transition failed", extra={**log_extra, "reason": e.reason})
            raise
        except Exception as e:
            self._logger.exception("Booking transition failed", extra={**log_extra, "error": str(e)})
            raise TransitionFailed(None) from e

        self._logger.info("Booking transition applied", extra=log_extra)

        try:
            bookings = self.resync()
        except BookingStoreError as e:
            self._logger.error("Resync after transition failed", extra={**log_extra, "error": str(e)})
            raise ResyncFailed(booking, str(e) or None) from e
        except Exception as e:
            self._logger.exception("Resync after transition failed", extra={**log_extra, "error": str(e)})
            raise ResyncFailed(booking) from e

        return TransitionResult(booking=booking, bookings=bookings)

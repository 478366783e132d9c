from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from datetime import datetime, tzinfo

from fleet_console.application.exceptions import ResyncFailed, TransitionInProgress
from fleet_console.application.ports.booking_store import BookingStorePort
from fleet_console.application.use_cases.transition_booking import BookingTransitionManager
from fleet_console.application.utils.classifier import classify
from fleet_console.application.utils.countdown import compute_countdown
from fleet_console.application.utils.datetime_resolver import resolve
from fleet_console.application.utils.ordering import order_by_schedule
from fleet_console.domain.entities.booking import Booking, BookingKind, BookingStatus
from fleet_console.domain.entities.schedule import Classification, Countdown
from fleet_console.domain.entities.viewer import Role, Viewer

SUCCESS_MESSAGES = {
    BookingStatus.ACCEPTED: "Booking accepted successfully!",
    BookingStatus.DECLINED: "Booking declined successfully!",
}


@dataclass(frozen=True)
class BookingRow:
    booking: Booking
    classification: Classification
    countdown: Countdown | None = None


@dataclass(frozen=True)
class BoardView:
    viewer: Viewer
    generated_at: datetime
    pending: list[BookingRow] = field(default_factory=list)
    active: list[BookingRow] = field(default_factory=list)
    upcoming: list[BookingRow] = field(default_factory=list)
    counts: dict[str, int] = field(default_factory=dict)


@dataclass(frozen=True)
class ResponseOutcome:
    booking: Booking
    message: str
    refreshed: bool = True


class BookingBoardUseCase:
    """Holds one viewer's booking collection and derives the dashboard from it.

    The collection is only ever swapped as a whole, after a full read from
    the record store. At most one response per booking may be outstanding.
    """

    def __init__(self, store: BookingStorePort, viewer: Viewer, timezone: tzinfo) -> None:
        self._viewer = viewer
        self._timezone = timezone
        self._manager = BookingTransitionManager(store=store, viewer=viewer)
        self._bookings: tuple[Booking, ...] = ()
        self._in_flight: set[tuple[BookingKind, str]] = set()
        self._lock = threading.Lock()
        self._logger = logging.getLogger(__name__)

    @property
    def viewer(self) -> Viewer:
        return self._viewer

    @property
    def include_pending_upcoming(self) -> bool:
        # Cargo managers see Pending requests in their upcoming list; everyone else does not.
        return self._viewer.role is Role.CARGO_MANAGER

    @property
    def bookings(self) -> tuple[Booking, ...]:
        return self._bookings

    def load(self) -> tuple[Booking, ...]:
        self._replace(self._manager.resync())
        self._logger.info(
            "Bookings loaded",
            extra={"role": self._viewer.role.value, "actor_id": self._viewer.actor_id, "count": len(self._bookings)},
        )
        return self._bookings

    def find(self, kind: BookingKind, booking_id: str) -> Booking | None:
        for booking in self._bookings:
            if booking.kind is kind and booking.id == booking_id:
                return booking
        return None

    def respond(self, booking_id: str, kind: BookingKind, decision: BookingStatus) -> ResponseOutcome:
        key = (kind, booking_id)
        with self._lock:
            if key in self._in_flight:
                raise TransitionInProgress()
            self._in_flight.add(key)

        try:
            if decision is BookingStatus.ACCEPTED:
                result = self._manager.accept(booking_id, kind)
            elif decision is BookingStatus.DECLINED:
                result = self._manager.decline(booking_id, kind)
            else:
                raise ValueError(f"Unsupported decision: {decision.value}")
        except ResyncFailed as e:
            return ResponseOutcome(booking=e.booking, message=e.message, refreshed=False)
        finally:
            with self._lock:
                self._in_flight.discard(key)

        self._replace(result.bookings)
        return ResponseOutcome(booking=result.booking, message=SUCCESS_MESSAGES[decision])

    def view(self, now: datetime) -> BoardView:
        bookings = self._bookings
        include_pending = self.include_pending_upcoming

        pending: list[BookingRow] = []
        active: list[BookingRow] = []
        upcoming: list[BookingRow] = []
        for booking in bookings:
            instant = resolve(booking.scheduled_date, booking.scheduled_time, self._timezone).instant
            classification = classify(booking.status, instant, now, include_pending=include_pending)

            if booking.is_pending:
                pending.append(BookingRow(booking=booking, classification=classification))
            if classification is Classification.ACTIVE:
                active.append(BookingRow(booking=booking, classification=classification))
            elif classification is Classification.UPCOMING and instant is not None:
                countdown = compute_countdown(instant, now, booking.kind.event_noun)
                upcoming.append(BookingRow(booking=booking, classification=classification, countdown=countdown))

        return BoardView(
            viewer=self._viewer,
            generated_at=now,
            pending=pending,
            active=active,
            upcoming=upcoming,
            counts=_counts(bookings),
        )

    def _replace(self, bookings: list[Booking]) -> None:
        self._bookings = tuple(order_by_schedule(bookings))


def _counts(bookings: tuple[Booking, ...]) -> dict[str, int]:
    counts = {"total": len(bookings)}
    for status in BookingStatus:
        counts[status.value.lower()] = sum(1 for booking in bookings if booking.status is status)
    return counts

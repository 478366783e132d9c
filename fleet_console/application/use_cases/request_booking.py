from __future__ import annotations

import logging
from typing import Any

from fleet_console.application.exceptions import BookingRequestInvalid, InvalidDate, InvalidTime
from fleet_console.application.ports.booking_store import BookingStorePort
from fleet_console.application.utils.datetime_resolver import parse_calendar_date, parse_time_text
from fleet_console.domain.entities.booking import Booking, BookingKind
from fleet_console.domain.entities.viewer import Viewer

SURVEY_TYPES = ("Annual", "Intermediate", "Drydock", "Special", "Renewal")
CARGO_TYPES = ("Container", "Bulk", "Liquid", "Break Bulk", "RoRo", "Other")

REQUIRED_FIELDS = {
    BookingKind.INSPECTION: (
        "counterpart_id",
        "scheduled_date",
        "scheduled_time",
        "survey_type",
        "location",
        "vessel_name",
    ),
    BookingKind.VOYAGE: (
        "counterpart_id",
        "scheduled_date",
        "scheduled_time",
        "cargo_type",
        "departure_port",
        "destination_port",
        "vessel_name",
    ),
}

DEFAULT_DURATION = {
    BookingKind.INSPECTION: 4,  # hours
    BookingKind.VOYAGE: 7,  # days
}


class RequestBookingUseCase:
    def __init__(self, store: BookingStorePort) -> None:
        self._store = store
        self._logger = logging.getLogger(__name__)

    def execute(self, viewer: Viewer, kind: BookingKind, payload: dict[str, Any]) -> Booking:
        """Validate a booking request and hand it to the record store as Pending."""
        if not viewer.role.can_request:
            raise BookingRequestInvalid(f"Not authorized to create {kind.value} bookings")

        cleaned = {key: value for key, value in payload.items() if value not in (None, "")}
        missing = [name for name in REQUIRED_FIELDS[kind] if name not in cleaned]
        if missing:
            raise BookingRequestInvalid(f"Please provide all required fields: {', '.join(missing)}")

        if kind is BookingKind.INSPECTION and cleaned["survey_type"] not in SURVEY_TYPES:
            raise BookingRequestInvalid(f"Invalid survey type. Use: {list(SURVEY_TYPES)}")
        if kind is BookingKind.VOYAGE and cleaned["cargo_type"] not in CARGO_TYPES:
            raise BookingRequestInvalid(f"Invalid cargo type. Use: {list(CARGO_TYPES)}")

        try:
            parse_calendar_date(cleaned["scheduled_date"])
            parse_time_text(cleaned["scheduled_time"])
        except (InvalidDate, InvalidTime) as e:
            raise BookingRequestInvalid(str(e)) from e

        cleaned.setdefault("estimated_duration", DEFAULT_DURATION[kind])
        cleaned.pop("status", None)

        booking = self._store.create_booking(viewer, kind, cleaned)
        self._logger.info(
            "Booking requested",
            extra={"booking_id": booking.id, "kind": kind.value, "actor_id": viewer.actor_id},
        )
        return booking

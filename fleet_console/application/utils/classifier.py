from __future__ import annotations

from datetime import datetime, tzinfo

from fleet_console.application.utils.datetime_resolver import resolve
from fleet_console.domain.entities.booking import Booking, BookingStatus
from fleet_console.domain.entities.schedule import Classification


def classify(
    status: BookingStatus,
    instant: datetime | None,
    now: datetime,
    include_pending: bool = False,
) -> Classification:
    """Bucket a booking for display. Pending is never Active; Declined is always Excluded."""
    if instant is None or status is BookingStatus.DECLINED:
        return Classification.EXCLUDED

    if status is BookingStatus.ACCEPTED:
        return Classification.ACTIVE if instant <= now else Classification.UPCOMING

    if status is BookingStatus.PENDING and include_pending and instant > now:
        return Classification.UPCOMING

    return Classification.EXCLUDED


def classify_booking(
    booking: Booking,
    now: datetime,
    tz: tzinfo,
    include_pending: bool = False,
) -> Classification:
    resolution = resolve(booking.scheduled_date, booking.scheduled_time, tz)
    return classify(booking.status, resolution.instant, now, include_pending=include_pending)

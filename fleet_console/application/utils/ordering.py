from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Iterable

from fleet_console.application.exceptions import InvalidDate
from fleet_console.application.utils.datetime_resolver import parse_calendar_date
from fleet_console.domain.entities.booking import Booking

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def _sort_key(booking: Booking) -> tuple[date, datetime]:
    try:
        day = parse_calendar_date(booking.scheduled_date)
    except InvalidDate:
        day = date.min
    created = booking.created_at or _EPOCH
    if created.tzinfo is None:
        created = created.replace(tzinfo=timezone.utc)
    return day, created


def order_by_schedule(bookings: Iterable[Booking]) -> list[Booking]:
    """Newest scheduled date first, then newest created first."""
    return sorted(bookings, key=_sort_key, reverse=True)

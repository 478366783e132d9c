from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date, datetime, time, tzinfo
from typing import Any, Union

from fleet_console.application.exceptions import InvalidDate, InvalidTime

AM_PM_PATTERN = re.compile(r"^(\d{1,2}):(\d{2})\s*([ap]m)$", re.IGNORECASE)
TWENTY_FOUR_HOUR_PATTERN = re.compile(r"^(\d{1,2}):(\d{2})(?::\d{2})?$")


@dataclass(frozen=True)
class AmPmTime:
    hour: int  # 1-12 as written
    minute: int
    meridiem: str  # "AM" | "PM"

    def to_time(self) -> time:
        hour = self.hour
        if self.meridiem == "PM" and hour != 12:
            hour += 12
        elif self.meridiem == "AM" and hour == 12:
            hour = 0
        return time(hour, self.minute)


@dataclass(frozen=True)
class TwentyFourHourTime:
    hour: int
    minute: int

    def to_time(self) -> time:
        return time(self.hour, self.minute)


@dataclass(frozen=True)
class Absent:
    def to_time(self) -> time:
        return time(0, 0)


ABSENT = Absent()

TimeText = Union[AmPmTime, TwentyFourHourTime, Absent]


@dataclass(frozen=True)
class Resolution:
    """Outcome of `resolve`. On InvalidTime the instant is still set, at the start of the day."""

    instant: datetime | None
    time_text: TimeText = ABSENT
    error: InvalidDate | InvalidTime | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def date_only(self) -> bool:
        return isinstance(self.time_text, Absent)


def parse_time_text(text: str | None) -> TimeText:
    """Parse "2:30 PM" / "14:30" into a tagged value. Blank or missing text is ABSENT."""
    if text is None:
        return ABSENT
    normalized = str(text).strip()
    if not normalized:
        return ABSENT

    match = AM_PM_PATTERN.match(normalized)
    if match:
        hour, minute = int(match.group(1)), int(match.group(2))
        if not (1 <= hour <= 12 and 0 <= minute <= 59):
            raise InvalidTime(f"Time out of range: {normalized!r}")
        return AmPmTime(hour=hour, minute=minute, meridiem=match.group(3).upper())

    match = TWENTY_FOUR_HOUR_PATTERN.match(normalized)
    if match:
        hour, minute = int(match.group(1)), int(match.group(2))
        if not (0 <= hour <= 23 and 0 <= minute <= 59):
            raise InvalidTime(f"Time out of range: {normalized!r}")
        return TwentyFourHourTime(hour=hour, minute=minute)

    raise InvalidTime(f"Unrecognized time: {normalized!r}")


def parse_calendar_date(value: Any) -> date:
    """Read a date, datetime or ISO string as a calendar date.

    ISO date-times keep the calendar date they were written with; no zone
    conversion happens, so "2025-03-01T00:00:00.000Z" is March 1st.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not value.strip():
        raise InvalidDate(f"Unsupported date value: {value!r}")

    text = value.strip()
    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
    except ValueError:
        pass
    try:
        return date.fromisoformat(text[:10])
    except ValueError as e:
        raise InvalidDate(f"Unparseable date: {text!r}") from e


def resolve(date_value: Any, time_text: str | None, tz: tzinfo) -> Resolution:
    """Combine a scheduled date and free-text time into one instant in `tz`.

    Never raises: parse failures come back on `Resolution.error`.
    """
    try:
        day = parse_calendar_date(date_value)
    except InvalidDate as e:
        return Resolution(instant=None, error=e)

    try:
        parsed = parse_time_text(time_text)
    except InvalidTime as e:
        return Resolution(instant=datetime.combine(day, time(0, 0), tzinfo=tz), error=e)

    return Resolution(instant=datetime.combine(day, parsed.to_time(), tzinfo=tz), time_text=parsed)

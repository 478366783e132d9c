"""
Tests for combining a scheduled date with free-text time of day.
"""

from __future__ import annotations

from datetime import date, datetime, timezone
from zoneinfo import ZoneInfo

import pytest

from fleet_console.application.exceptions import InvalidDate, InvalidTime
from fleet_console.application.utils.datetime_resolver import (
    ABSENT,
    AmPmTime,
    TwentyFourHourTime,
    parse_calendar_date,
    parse_time_text,
    resolve,
)
UTC = timezone.utc


def test_pm_time_adds_twelve_hours():
    resolution = resolve("2030-06-01", "2:30 PM", UTC)
    assert resolution.ok
    assert (resolution.instant.hour, resolution.instant.minute) == (14, 30)


def test_am_time_keeps_hour():
    resolution = resolve("2030-06-01", "2:30 AM", UTC)
    assert (resolution.instant.hour, resolution.instant.minute) == (2, 30)


def test_twelve_am_and_twelve_pm():
    assert resolve("2030-06-01", "12:15 AM", UTC).instant.hour == 0
    assert resolve("2030-06-01", "12:15 PM", UTC).instant.hour == 12


@pytest.mark.parametrize("text", ["00:00", "09:05", "12:00", "13:45", "23:59"])
def test_twenty_four_hour_time_matches_literal(text):
    hour, minute = (int(part) for part in text.split(":"))
    instant = resolve("2030-06-01", text, UTC).instant
    assert (instant.hour, instant.minute) == (hour, minute)


def test_missing_time_is_local_midnight():
    tz = ZoneInfo("Europe/Amsterdam")
    resolution = resolve("2030-06-01", None, tz)
    assert resolution.ok
    assert resolution.date_only
    assert resolution.instant == datetime(2030, 6, 1, 0, 0, tzinfo=tz)


def test_time_resolves_in_the_given_zone():
    tz = ZoneInfo("America/New_York")
    instant = resolve("2030-01-15", "9:00 AM", tz).instant
    assert instant.tzinfo is tz
    assert instant.astimezone(UTC).hour == 14


def test_zone_must_be_given():
    with pytest.raises(TypeError):
        resolve("2030-06-01", "9:00 AM")


def test_blank_time_is_absent():
    assert parse_time_text("   ") is ABSENT


def test_garbage_time_is_reported_not_raised():
    resolution = resolve("2030-06-01", "garbage", UTC)
    assert not resolution.ok
    assert isinstance(resolution.error, InvalidTime)
    assert resolution.instant == datetime(2030, 6, 1, tzinfo=UTC)


def test_out_of_range_times_are_invalid():
    with pytest.raises(InvalidTime):
        parse_time_text("13:00 PM")
    with pytest.raises(InvalidTime):
        parse_time_text("24:00")
    with pytest.raises(InvalidTime):
        parse_time_text("9:75")


def test_time_text_is_tagged():
    assert parse_time_text("2:30 pm") == AmPmTime(hour=2, minute=30, meridiem="PM")
    assert parse_time_text("14:30") == TwentyFourHourTime(hour=14, minute=30)


def test_iso_datetime_keeps_written_calendar_date():
    assert parse_calendar_date("2030-06-01T00:00:00.000Z") == date(2030, 6, 1)
    assert parse_calendar_date(datetime(2030, 6, 1, 22, 0)) == date(2030, 6, 1)


def test_bad_date_is_reported():
    resolution = resolve("not-a-date", "9:00 AM", UTC)
    assert resolution.instant is None
    assert isinstance(resolution.error, InvalidDate)
    with pytest.raises(InvalidDate):
        parse_calendar_date(None)

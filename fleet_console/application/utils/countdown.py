from __future__ import annotations

from datetime import datetime, tzinfo
from typing import Any

from fleet_console.application.utils.datetime_resolver import resolve
from fleet_console.domain.entities.schedule import Countdown, UrgencyTier

NO_DATE_LABEL = "No date set"
INVALID_LABEL = "Invalid date/time"

SECONDS_PER_MINUTE = 60
SECONDS_PER_HOUR = 60 * SECONDS_PER_MINUTE
SECONDS_PER_DAY = 24 * SECONDS_PER_HOUR

CRITICAL_WITHIN_HOURS = 1
WARNING_WITHIN_HOURS = 24


def format_remaining(total_seconds: float) -> str:
    """Largest applicable unit group, truncated: "1d 1h 1m", "1h 1m 1s", "1m 1s", "5s"."""
    remaining = int(total_seconds)
    days, remaining = divmod(remaining, SECONDS_PER_DAY)
    hours, remaining = divmod(remaining, SECONDS_PER_HOUR)
    minutes, seconds = divmod(remaining, SECONDS_PER_MINUTE)

    if days > 0:
        return f"{days}d {hours}h {minutes}m"
    if hours > 0:
        return f"{hours}h {minutes}m {seconds}s"
    if minutes > 0:
        return f"{minutes}m {seconds}s"
    return f"{seconds}s"


def urgency_for(total_seconds: float) -> UrgencyTier:
    hours_remaining = total_seconds / SECONDS_PER_HOUR
    if hours_remaining <= CRITICAL_WITHIN_HOURS:
        return UrgencyTier.CRITICAL
    if hours_remaining <= WARNING_WITHIN_HOURS:
        return UrgencyTier.WARNING
    return UrgencyTier.NORMAL


def compute_countdown(instant: datetime, now: datetime, event: str) -> Countdown:
    remaining = (instant - now).total_seconds()
    if remaining <= 0:
        return Countdown(label=f"{event} started", urgency=UrgencyTier.NEUTRAL, remaining_seconds=0.0)
    return Countdown(
        label=format_remaining(remaining),
        urgency=urgency_for(remaining),
        remaining_seconds=remaining,
    )


def countdown_for(
    date_value: Any,
    time_text: str | None,
    now: datetime,
    event: str,
    tz: tzinfo,
) -> Countdown:
    """Resolve the raw date/time pair and count down to it.

    A malformed time counts down to the start of the day; only an unreadable
    date produces the invalid label.
    """
    if date_value is None or (isinstance(date_value, str) and not date_value.strip()):
        return Countdown(label=NO_DATE_LABEL, urgency=UrgencyTier.NEUTRAL)

    resolution = resolve(date_value, time_text, tz)
    if resolution.instant is None:
        return Countdown(label=INVALID_LABEL, urgency=UrgencyTier.NEUTRAL)

    return compute_countdown(resolution.instant, now, event)

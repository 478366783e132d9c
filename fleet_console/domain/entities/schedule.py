from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Classification(str, Enum):
    UPCOMING = "upcoming"
    ACTIVE = "active"
    EXCLUDED = "excluded"


class UrgencyTier(str, Enum):
    CRITICAL = "critical"
    WARNING = "warning"
    NORMAL = "normal"
    NEUTRAL = "neutral"


@dataclass(frozen=True)
class Countdown:
    label: str
    urgency: UrgencyTier
    remaining_seconds: float | None = None

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class BookingStatus(str, Enum):
    PENDING = "Pending"
    ACCEPTED = "Accepted"
    DECLINED = "Declined"


class BookingKind(str, Enum):
    INSPECTION = "inspection"
    VOYAGE = "voyage"

    @property
    def event_noun(self) -> str:
        """Verb-ish noun used in countdown labels ("Survey started")."""
        return "Survey" if self is BookingKind.INSPECTION else "Voyage"

    @property
    def assignee_role(self) -> str:
        return "surveyor" if self is BookingKind.INSPECTION else "cargo_manager"


@dataclass(frozen=True)
class ActorRef:
    id: str
    name: str | None = None
    email: str | None = None


@dataclass(frozen=True)
class VesselRef:
    name: str
    imo: str | None = None
    id: str | None = None
    vessel_type: str | None = None


@dataclass(frozen=True)
class InspectionDetails:
    survey_type: str
    location: str
    ship_type: str | None = None
    estimated_duration_hours: float = 4


@dataclass(frozen=True)
class VoyageDetails:
    cargo_type: str
    departure_port: str
    destination_port: str
    ship_type: str | None = None
    estimated_duration_days: float = 7
    cargo_weight: float | None = None
    cargo_units: int | None = None


@dataclass(frozen=True)
class Booking:
    id: str
    kind: BookingKind
    vessel: VesselRef
    requester: ActorRef
    scheduled_date: str  # ISO date or date-time as received
    status: BookingStatus = BookingStatus.PENDING
    scheduled_time: str | None = None  # "2:30 PM" or "14:30"
    counterpart: ActorRef | None = None  # None shows as "Unassigned"
    details: InspectionDetails | VoyageDetails | None = None
    notes: str = ""
    special_requirements: str = ""
    created_at: datetime | None = None
    accepted_at: datetime | None = None
    declined_at: datetime | None = None

    @property
    def counterpart_name(self) -> str:
        if self.counterpart is None:
            return "Unassigned"
        return self.counterpart.name or self.counterpart.id

    @property
    def is_pending(self) -> bool:
        return self.status is BookingStatus.PENDING

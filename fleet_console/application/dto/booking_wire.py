from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from fleet_console.domain.entities.booking import (
    ActorRef,
    Booking,
    BookingKind,
    BookingStatus,
    InspectionDetails,
    VesselRef,
    VoyageDetails,
)


def _actor(value: Any) -> ActorRef | None:
    if value is None:
        return None
    if isinstance(value, dict):
        actor_id = value.get("_id") or value.get("id")
        if not actor_id:
            return None
        return ActorRef(id=str(actor_id), name=value.get("name"), email=value.get("email"))
    return ActorRef(id=str(value))


class BookingWireDTO(BaseModel):
    """A booking as the record store sends it.

    Accepts the generic field names and the per-kind names the store uses
    (`inspectionDate` / `voyageDate`, `surveyor` / `cargoManager`, ...).
    """

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    id: str = Field(validation_alias=AliasChoices("_id", "id"))
    status: BookingStatus
    scheduled_date: str = Field(
        validation_alias=AliasChoices("scheduledDate", "inspectionDate", "voyageDate", "scheduled_date")
    )
    scheduled_time: str | None = Field(
        default=None,
        validation_alias=AliasChoices("scheduledTime", "inspectionTime", "voyageTime", "scheduled_time"),
    )
    vessel: Any = Field(default=None, validation_alias=AliasChoices("vesselRef", "vessel"))
    vessel_name: str | None = Field(default=None, validation_alias=AliasChoices("vesselName", "vessel_name"))
    counterpart: Any = Field(
        default=None, validation_alias=AliasChoices("counterpart", "surveyor", "cargoManager")
    )
    requester: Any = Field(default=None, validation_alias=AliasChoices("requester", "bookedBy"))

    ship_type: str | None = Field(default=None, validation_alias=AliasChoices("shipType", "ship_type"))
    survey_type: str | None = Field(default=None, validation_alias=AliasChoices("surveyType", "survey_type"))
    location: str | None = None
    cargo_type: str | None = Field(default=None, validation_alias=AliasChoices("cargoType", "cargo_type"))
    departure_port: str | None = Field(
        default=None, validation_alias=AliasChoices("departurePort", "departure_port")
    )
    destination_port: str | None = Field(
        default=None, validation_alias=AliasChoices("destinationPort", "destination_port")
    )
    estimated_duration: float | None = Field(
        default=None, validation_alias=AliasChoices("estimatedDuration", "estimated_duration")
    )
    cargo_weight: float | None = Field(default=None, validation_alias=AliasChoices("cargoWeight", "cargo_weight"))
    cargo_units: int | None = Field(default=None, validation_alias=AliasChoices("cargoUnits", "cargo_units"))
    notes: str | None = None
    special_requirements: str | None = Field(
        default=None, validation_alias=AliasChoices("specialRequirements", "special_requirements")
    )

    created_at: datetime | None = Field(default=None, validation_alias=AliasChoices("createdAt", "created_at"))
    accepted_at: datetime | None = Field(default=None, validation_alias=AliasChoices("acceptedAt", "accepted_at"))
    declined_at: datetime | None = Field(default=None, validation_alias=AliasChoices("declinedAt", "declined_at"))

    def to_entity(self, kind: BookingKind) -> Booking:
        return Booking(
            id=self.id,
            kind=kind,
            vessel=self._vessel_ref(),
            requester=_actor(self.requester) or ActorRef(id="unknown"),
            scheduled_date=self.scheduled_date,
            status=self.status,
            scheduled_time=self.scheduled_time,
            counterpart=_actor(self.counterpart),
            details=self._details(kind),
            notes=self.notes or "",
            special_requirements=self.special_requirements or "",
            created_at=self.created_at,
            accepted_at=self.accepted_at,
            declined_at=self.declined_at,
        )

    def _vessel_ref(self) -> VesselRef:
        vessel = self.vessel
        if isinstance(vessel, dict):
            return VesselRef(
                name=vessel.get("name") or self.vessel_name or "Unknown Vessel",
                imo=vessel.get("imo"),
                id=str(vessel.get("_id") or vessel.get("id") or "") or None,
                vessel_type=vessel.get("vesselType"),
            )
        return VesselRef(
            name=self.vessel_name or "Unknown Vessel",
            id=str(vessel) if vessel else None,
        )

    def _details(self, kind: BookingKind) -> InspectionDetails | VoyageDetails:
        if kind is BookingKind.INSPECTION:
            return InspectionDetails(
                survey_type=self.survey_type or "",
                location=self.location or "",
                ship_type=self.ship_type,
                estimated_duration_hours=self.estimated_duration or 4,
            )
        return VoyageDetails(
            cargo_type=self.cargo_type or "",
            departure_port=self.departure_port or "",
            destination_port=self.destination_port or "",
            ship_type=self.ship_type,
            estimated_duration_days=self.estimated_duration or 7,
            cargo_weight=self.cargo_weight,
            cargo_units=self.cargo_units,
        )


def parse_bookings(payload: Any, kind: BookingKind) -> list[Booking]:
    if not isinstance(payload, list):
        return []
    return [BookingWireDTO.model_validate(item).to_entity(kind) for item in payload]

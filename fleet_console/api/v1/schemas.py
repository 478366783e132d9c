from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from fleet_console.application.use_cases.booking_board import BoardView, BookingRow
from fleet_console.domain.entities.booking import Booking, InspectionDetails, VoyageDetails
from fleet_console.domain.entities.schedule import Classification, UrgencyTier


class CountdownSchema(BaseModel):
    label: str
    urgency: UrgencyTier
    remaining_seconds: float | None = None


class BookingSchema(BaseModel):
    id: str
    kind: str
    status: str
    vessel_name: str
    vessel_imo: str | None = None
    counterpart: str
    requester: str
    scheduled_date: str
    scheduled_time: str | None = None
    details: dict[str, Any] = Field(default_factory=dict)
    notes: str = ""
    accepted_at: datetime | None = None
    declined_at: datetime | None = None

    @classmethod
    def from_entity(cls, booking: Booking) -> "BookingSchema":
        details: dict[str, Any] = {}
        if isinstance(booking.details, (InspectionDetails, VoyageDetails)):
            details = dict(vars(booking.details))
        return cls(
            id=booking.id,
            kind=booking.kind.value,
            status=booking.status.value,
            vessel_name=booking.vessel.name,
            vessel_imo=booking.vessel.imo,
            counterpart=booking.counterpart_name,
            requester=booking.requester.name or booking.requester.id,
            scheduled_date=booking.scheduled_date,
            scheduled_time=booking.scheduled_time,
            details=details,
            notes=booking.notes,
            accepted_at=booking.accepted_at,
            declined_at=booking.declined_at,
        )


class BookingRowSchema(BaseModel):
    booking: BookingSchema
    classification: Classification
    countdown: CountdownSchema | None = None

    @classmethod
    def from_row(cls, row: BookingRow) -> "BookingRowSchema":
        countdown = None
        if row.countdown is not None:
            countdown = CountdownSchema(
                label=row.countdown.label,
                urgency=row.countdown.urgency,
                remaining_seconds=row.countdown.remaining_seconds,
            )
        return cls(
            booking=BookingSchema.from_entity(row.booking),
            classification=row.classification,
            countdown=countdown,
        )


class DashboardSchema(BaseModel):
    role: str
    actor_id: str
    generated_at: datetime
    pending: list[BookingRowSchema]
    active: list[BookingRowSchema]
    upcoming: list[BookingRowSchema]
    counts: dict[str, int]

    @classmethod
    def from_view(cls, view: BoardView) -> "DashboardSchema":
        return cls(
            role=view.viewer.role.value,
            actor_id=view.viewer.actor_id,
            generated_at=view.generated_at,
            pending=[BookingRowSchema.from_row(row) for row in view.pending],
            active=[BookingRowSchema.from_row(row) for row in view.active],
            upcoming=[BookingRowSchema.from_row(row) for row in view.upcoming],
            counts=view.counts,
        )


class TransitionResponseSchema(BaseModel):
    message: str
    booking: BookingSchema
    refreshed: bool
    dashboard: DashboardSchema


class BookingRequestSchema(BaseModel):
    counterpart_id: str | None = None
    scheduled_date: str | None = None
    scheduled_time: str | None = None
    vessel_name: str | None = None
    vessel_id: str | None = None
    ship_type: str | None = None
    survey_type: str | None = None
    location: str | None = None
    cargo_type: str | None = None
    departure_port: str | None = None
    destination_port: str | None = None
    cargo_weight: float | None = None
    cargo_units: int | None = None
    estimated_duration: float | None = None
    notes: str | None = None
    special_requirements: str | None = None
    service_request_id: str | None = None

from __future__ import annotations

import logging
from datetime import datetime

from fastapi import APIRouter, HTTPException, Query

from fleet_console.api.v1.schemas import (
    BookingRequestSchema,
    BookingSchema,
    DashboardSchema,
    TransitionResponseSchema,
)
from fleet_console.application.exceptions import (
    BookingRequestInvalid,
    BookingStoreError,
    BookingTransitionError,
    StaleTransition,
    TransitionInProgress,
)
from fleet_console.core.config import settings
from fleet_console.domain.entities.booking import BookingKind, BookingStatus
from fleet_console.domain.entities.viewer import Role, Viewer
from fleet_console.wiring.dependencies import get_board, get_request_booking_use_case

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/dashboard", response_model=DashboardSchema)
def dashboard(role: Role = Query(...), actor_id: str = Query(..., min_length=1)):
    board = get_board(Viewer(role=role, actor_id=actor_id))
    try:
        board.load()
    except BookingStoreError as e:
        raise HTTPException(status_code=502, detail=str(e))
    return DashboardSchema.from_view(board.view(datetime.now(settings.timezone)))


@router.post("/bookings/{kind}", response_model=BookingSchema, status_code=201)
def request_booking(
    kind: BookingKind,
    req: BookingRequestSchema,
    role: Role = Query(...),
    actor_id: str = Query(..., min_length=1),
):
    uc = get_request_booking_use_case()
    try:
        booking = uc.execute(Viewer(role=role, actor_id=actor_id), kind, req.model_dump())
    except BookingRequestInvalid as e:
        raise HTTPException(status_code=400, detail=str(e))
    except BookingStoreError as e:
        raise HTTPException(status_code=502, detail=str(e))
    return BookingSchema.from_entity(booking)


@router.put("/bookings/{kind}/{booking_id}/accept", response_model=TransitionResponseSchema)
def accept_booking(kind: BookingKind, booking_id: str, role: Role = Query(...), actor_id: str = Query(...)):
    return _respond(Viewer(role=role, actor_id=actor_id), kind, booking_id, BookingStatus.ACCEPTED)


@router.put("/bookings/{kind}/{booking_id}/decline", response_model=TransitionResponseSchema)
def decline_booking(kind: BookingKind, booking_id: str, role: Role = Query(...), actor_id: str = Query(...)):
    return _respond(Viewer(role=role, actor_id=actor_id), kind, booking_id, BookingStatus.DECLINED)


def _respond(viewer: Viewer, kind: BookingKind, booking_id: str, decision: BookingStatus) -> TransitionResponseSchema:
    board = get_board(viewer)
    try:
        outcome = board.respond(booking_id, kind, decision)
    except StaleTransition:
        raise HTTPException(status_code=409, detail=StaleTransition.default_message)
    except TransitionInProgress as e:
        raise HTTPException(status_code=409, detail=e.message)
    except BookingTransitionError as e:
        raise HTTPException(status_code=502, detail=e.message)

    return TransitionResponseSchema(
        message=outcome.message,
        booking=BookingSchema.from_entity(outcome.booking),
        refreshed=outcome.refreshed,
        dashboard=DashboardSchema.from_view(board.view(datetime.now(settings.timezone))),
    )

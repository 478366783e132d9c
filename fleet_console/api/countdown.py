from __future__ import annotations

import logging

from fastapi import APIRouter, Query, WebSocket, WebSocketDisconnect
from starlette.concurrency import run_in_threadpool

from fleet_console.application.exceptions import BookingStoreError
from fleet_console.domain.entities.booking import BookingKind
from fleet_console.domain.entities.schedule import Countdown
from fleet_console.domain.entities.viewer import Role, Viewer
from fleet_console.wiring.dependencies import get_board, get_countdown_ticker


router = APIRouter()
logger = logging.getLogger(__name__)


@router.websocket("/ws/countdown/{kind}/{booking_id}")
async def countdown_stream(
    websocket: WebSocket,
    kind: BookingKind,
    booking_id: str,
    role: Role = Query(...),
    actor_id: str = Query(...),
):
    """Push the row's countdown every tick until the client goes away."""
    await websocket.accept()
    board = get_board(Viewer(role=role, actor_id=actor_id))

    booking = board.find(kind, booking_id)
    if booking is None:
        try:
            await run_in_threadpool(board.load)
        except BookingStoreError as e:
            await websocket.send_json({"error": str(e)})
            await websocket.close(code=1011)
            return
        booking = board.find(kind, booking_id)
    if booking is None:
        await websocket.send_json({"error": "Booking not found"})
        await websocket.close(code=1008)
        return

    async def push(countdown: Countdown) -> None:
        await websocket.send_json(
            {
                "booking_id": booking_id,
                "label": countdown.label,
                "urgency": countdown.urgency.value,
                "remaining_seconds": countdown.remaining_seconds,
            }
        )

    ticker = get_countdown_ticker()
    ticker.track((kind, booking_id), booking.scheduled_date, booking.scheduled_time, kind.event_noun, push)
    logger.info("Countdown stream opened", extra={"booking_id": booking_id, "kind": kind.value})
    try:
        while True:
            await websocket.receive_text()
    except WebSocketDisconnect:
        logger.info("Countdown stream closed", extra={"booking_id": booking_id, "kind": kind.value})
    finally:
        ticker.cancel((kind, booking_id))

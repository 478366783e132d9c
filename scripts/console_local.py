#!/usr/bin/env python3
"""
Interactive local booking console (no HTTP, no remote record store).

Usage:
  python3 scripts/console_local.py --role surveyor --actor surveyor-1

What it does:
- Seeds an in-memory record store with a few demo bookings
- Prints the dashboard for the chosen viewer
- Lets you accept/decline bookings and watch a live countdown
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from datetime import date, datetime, timedelta
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from fleet_console.application.exceptions import BookingTransitionError
from fleet_console.application.scheduling.countdown_ticker import CountdownTicker
from fleet_console.application.use_cases.booking_board import BoardView, BookingBoardUseCase
from fleet_console.core.config import settings
from fleet_console.domain.entities.booking import (
    ActorRef,
    Booking,
    BookingKind,
    BookingStatus,
    InspectionDetails,
    VesselRef,
    VoyageDetails,
)
from fleet_console.domain.entities.viewer import Role, Viewer
from fleet_console.infrastructure.store.memory_store import MemoryBookingStore


def _demo_bookings(today: date) -> list[Booking]:
    ship = ActorRef(id="ship-1", name="Ship Management")
    return [
        Booking(
            id="insp-1",
            kind=BookingKind.INSPECTION,
            vessel=VesselRef(name="MV Aurora", imo="9300001"),
            requester=ship,
            scheduled_date=(today + timedelta(days=1)).isoformat(),
            scheduled_time="9:00 AM",
            counterpart=ActorRef(id="surveyor-1", name="Sam Surveyor"),
            details=InspectionDetails(survey_type="Annual", location="Rotterdam"),
        ),
        Booking(
            id="insp-2",
            kind=BookingKind.INSPECTION,
            vessel=VesselRef(name="MV Boreas", imo="9300002"),
            requester=ship,
            scheduled_date=(today - timedelta(days=1)).isoformat(),
            scheduled_time="14:30",
            status=BookingStatus.ACCEPTED,
            counterpart=ActorRef(id="surveyor-1", name="Sam Surveyor"),
            details=InspectionDetails(survey_type="Drydock", location="Hamburg"),
        ),
        Booking(
            id="voy-1",
            kind=BookingKind.VOYAGE,
            vessel=VesselRef(name="MV Calypso", imo="9300003"),
            requester=ship,
            scheduled_date=(today + timedelta(days=3)).isoformat(),
            scheduled_time="6:00 PM",
            counterpart=ActorRef(id="cm-1", name="Casey Cargo"),
            details=VoyageDetails(cargo_type="Container", departure_port="Durban", destination_port="Santos"),
        ),
    ]


def _print_view(view: BoardView) -> None:
    print("-" * 60)
    print(f"{view.viewer.role.value} {view.viewer.actor_id} @ {view.generated_at:%Y-%m-%d %H:%M:%S}")
    print(f"counts: {view.counts}")
    for title, rows in (("Pending", view.pending), ("Active", view.active), ("Upcoming", view.upcoming)):
        print(f"\n{title}:")
        if not rows:
            print("  (none)")
        for row in rows:
            booking = row.booking
            when = f"{booking.scheduled_date} {booking.scheduled_time or ''}".strip()
            line = f"  [{booking.kind.value}] {booking.id} {booking.vessel.name} {when} {booking.status.value}"
            if row.countdown is not None:
                line += f" | {row.countdown.label} ({row.countdown.urgency.value})"
            print(line)
    print("-" * 60)


async def _watch(board: BookingBoardUseCase, booking_id: str, seconds: float) -> None:
    booking = next((b for b in board.bookings if b.id == booking_id), None)
    if booking is None:
        print(f"Unknown booking: {booking_id}")
        return
    ticker = CountdownTicker(timezone=settings.timezone, interval=settings.COUNTDOWN_INTERVAL_SECONDS)
    handle = ticker.track(
        booking_id,
        booking.scheduled_date,
        booking.scheduled_time,
        booking.kind.event_noun,
        lambda countdown: print(f"  {booking_id}: {countdown.label} ({countdown.urgency.value})"),
    )
    await asyncio.sleep(seconds)
    ticker.cancel_all()
    await handle.wait()


def _respond(board: BookingBoardUseCase, booking_id: str, decision: BookingStatus) -> None:
    booking = next((b for b in board.bookings if b.id == booking_id), None)
    if booking is None:
        print(f"Unknown booking: {booking_id}")
        return
    try:
        outcome = board.respond(booking_id, booking.kind, decision)
        print(outcome.message)
    except BookingTransitionError as e:
        print(f"Error: {e.message}")


def main() -> int:
    parser = argparse.ArgumentParser(description="Local booking console")
    parser.add_argument("--role", default=Role.SURVEYOR.value, choices=[role.value for role in Role])
    parser.add_argument("--actor", default="surveyor-1")
    args = parser.parse_args()

    store = MemoryBookingStore(_demo_bookings(datetime.now(settings.timezone).date()))
    board = BookingBoardUseCase(store=store, viewer=Viewer(Role(args.role), args.actor), timezone=settings.timezone)
    board.load()
    _print_view(board.view(datetime.now(settings.timezone)))
    print("Commands: /accept <id>, /decline <id>, /watch <id> [seconds], /view, /quit")

    while True:
        try:
            line = input("> ").strip()
        except (EOFError, KeyboardInterrupt):
            print()
            return 0
        if not line:
            continue
        parts = line.split()
        command, rest = parts[0], parts[1:]

        if command == "/quit":
            return 0
        if command == "/view":
            _print_view(board.view(datetime.now(settings.timezone)))
        elif command in ("/accept", "/decline") and rest:
            decision = BookingStatus.ACCEPTED if command == "/accept" else BookingStatus.DECLINED
            _respond(board, rest[0], decision)
            _print_view(board.view(datetime.now(settings.timezone)))
        elif command == "/watch" and rest:
            seconds = float(rest[1]) if len(rest) > 1 else 5.0
            asyncio.run(_watch(board, rest[0], seconds))
        else:
            print("Unknown command")


if __name__ == "__main__":
    raise SystemExit(main())

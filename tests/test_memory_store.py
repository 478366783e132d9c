"""
Tests for the in-process record store under concurrent responses.
"""

from __future__ import annotations

import threading
import time

from fleet_console.application.exceptions import StaleTransition
from fleet_console.domain.entities.booking import BookingKind, BookingStatus
from fleet_console.domain.entities.viewer import Role, Viewer
from fleet_console.infrastructure.store.memory_store import MemoryBookingStore

from factories import make_booking

SURVEYOR = Viewer(role=Role.SURVEYOR, actor_id="surveyor-1")


class SlowReadStore(MemoryBookingStore):
    def get(self, kind, booking_id):
        booking = super().get(kind, booking_id)
        time.sleep(0.05)
        return booking


def test_concurrent_accepts_only_one_wins():
    store = SlowReadStore([make_booking("b1")])
    outcomes: list[str] = []
    outcomes_lock = threading.Lock()

    def accept() -> None:
        try:
            store.accept(SURVEYOR, BookingKind.INSPECTION, "b1")
            result = "ok"
        except StaleTransition:
            result = "stale"
        with outcomes_lock:
            outcomes.append(result)

    workers = [threading.Thread(target=accept) for _ in range(2)]
    for worker in workers:
        worker.start()
    for worker in workers:
        worker.join(timeout=5)

    assert sorted(outcomes) == ["ok", "stale"]
    assert store.get(BookingKind.INSPECTION, "b1").status is BookingStatus.ACCEPTED


def test_accept_racing_decline_leaves_one_terminal_status():
    store = SlowReadStore([make_booking("b1")])
    outcomes: list[str] = []

    def respond(decline: bool) -> None:
        try:
            if decline:
                store.decline(SURVEYOR, BookingKind.INSPECTION, "b1")
            else:
                store.accept(SURVEYOR, BookingKind.INSPECTION, "b1")
            outcomes.append("ok")
        except StaleTransition:
            outcomes.append("stale")

    workers = [threading.Thread(target=respond, args=(flag,)) for flag in (False, True)]
    for worker in workers:
        worker.start()
    for worker in workers:
        worker.join(timeout=5)

    assert sorted(outcomes) == ["ok", "stale"]
    booking = store.get(BookingKind.INSPECTION, "b1")
    assert (booking.accepted_at is None) != (booking.declined_at is None)


def test_created_ids_are_unique_across_threads():
    store = MemoryBookingStore()
    ship = Viewer(role=Role.SHIP_MANAGEMENT, actor_id="ship-1")
    payload = {
        "counterpart_id": "surveyor-1",
        "scheduled_date": "2030-06-01",
        "scheduled_time": "9:00 AM",
        "survey_type": "Annual",
        "location": "Rotterdam",
        "vessel_name": "MV Aurora",
    }
    workers = [
        threading.Thread(target=store.create_booking, args=(ship, BookingKind.INSPECTION, payload))
        for _ in range(20)
    ]
    for worker in workers:
        worker.start()
    for worker in workers:
        worker.join(timeout=5)

    assert len(store.list_bookings(ship, BookingKind.INSPECTION)) == 20

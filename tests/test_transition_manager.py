"""
Tests for accept/decline with resync-after-write.
"""

from __future__ import annotations

import pytest

from fleet_console.application.exceptions import (
    BookingStoreError,
    ResyncFailed,
    StaleTransition,
    TransitionFailed,
)
from fleet_console.application.use_cases.transition_booking import BookingTransitionManager
from fleet_console.domain.entities.booking import BookingKind, BookingStatus
from fleet_console.domain.entities.viewer import Role, Viewer
from fleet_console.infrastructure.store.memory_store import MemoryBookingStore

from factories import make_booking

SURVEYOR = Viewer(role=Role.SURVEYOR, actor_id="surveyor-1")


class FlakyListStore(MemoryBookingStore):
    def list_bookings(self, viewer, kind, status=None):
        raise BookingStoreError("Failed to load booking data")


class BrokenStore(MemoryBookingStore):
    def accept(self, viewer, kind, booking_id):
        raise ConnectionError("socket closed")


def test_accept_mutates_once_then_resyncs_once():
    store = MemoryBookingStore([make_booking("b1")])
    manager = BookingTransitionManager(store=store, viewer=SURVEYOR)

    result = manager.accept("b1", BookingKind.INSPECTION)

    assert result.booking.status is BookingStatus.ACCEPTED
    assert result.booking.accepted_at is not None
    assert [b.status for b in result.bookings] == [BookingStatus.ACCEPTED]
    assert store.calls == [("accept", "b1"), ("list", "inspection")]


def test_decline_is_terminal():
    store = MemoryBookingStore([make_booking("b1")])
    manager = BookingTransitionManager(store=store, viewer=SURVEYOR)

    manager.decline("b1", BookingKind.INSPECTION)

    with pytest.raises(StaleTransition):
        manager.accept("b1", BookingKind.INSPECTION)
    assert store.get(BookingKind.INSPECTION, "b1").status is BookingStatus.DECLINED


def test_second_accept_is_stale_and_skips_resync():
    store = MemoryBookingStore([make_booking("b1")])
    manager = BookingTransitionManager(store=store, viewer=SURVEYOR)
    manager.accept("b1", BookingKind.INSPECTION)
    store.calls.clear()

    with pytest.raises(StaleTransition) as excinfo:
        manager.accept("b1", BookingKind.INSPECTION)

    assert excinfo.value.message == "Booking is not pending"
    assert store.calls == [("accept", "b1")]


def test_unknown_booking_fails_with_reason():
    manager = BookingTransitionManager(store=MemoryBookingStore(), viewer=SURVEYOR)
    with pytest.raises(TransitionFailed) as excinfo:
        manager.accept("missing", BookingKind.INSPECTION)
    assert excinfo.value.reason == "Booking not found"


def test_only_the_assignee_may_respond():
    store = MemoryBookingStore([make_booking("b1", counterpart_id="surveyor-2")])
    manager = BookingTransitionManager(store=store, viewer=SURVEYOR)
    with pytest.raises(TransitionFailed):
        manager.accept("b1", BookingKind.INSPECTION)

    requester = BookingTransitionManager(store=store, viewer=Viewer(role=Role.SHIP_MANAGEMENT, actor_id="ship-1"))
    with pytest.raises(TransitionFailed):
        requester.decline("b1", BookingKind.INSPECTION)


def test_raw_errors_are_wrapped():
    store = BrokenStore([make_booking("b1")])
    manager = BookingTransitionManager(store=store, viewer=SURVEYOR)
    with pytest.raises(TransitionFailed) as excinfo:
        manager.accept("b1", BookingKind.INSPECTION)
    assert excinfo.value.reason is None
    assert excinfo.value.message == "Failed to update booking"


def test_resync_failure_carries_mutated_booking():
    store = FlakyListStore([make_booking("b1")])
    manager = BookingTransitionManager(store=store, viewer=SURVEYOR)
    with pytest.raises(ResyncFailed) as excinfo:
        manager.accept("b1", BookingKind.INSPECTION)
    assert excinfo.value.booking.status is BookingStatus.ACCEPTED

"""
Tests for the HTTP and WebSocket surface, backed by the in-memory record store.
"""

from __future__ import annotations

from datetime import timezone

from fastapi.testclient import TestClient

from fleet_console.api import countdown as countdown_api
from fleet_console.application.scheduling.countdown_ticker import CountdownTicker
from fleet_console.domain.entities.booking import BookingKind, BookingStatus
from fleet_console.main import app
from fleet_console.wiring import dependencies

from factories import make_booking

SURVEYOR_QUERY = {"role": "surveyor", "actor_id": "surveyor-1"}


def _client_with(*bookings) -> TestClient:
    dependencies.get_booking_store.cache_clear()
    dependencies.reset_boards()
    store = dependencies.get_booking_store()
    for booking in bookings:
        store.add(booking)
    return TestClient(app)


def test_health():
    assert _client_with().get("/health").json() == {"status": "ok"}


def test_dashboard_buckets_bookings():
    client = _client_with(
        make_booking("old", status=BookingStatus.ACCEPTED, scheduled_date="2020-01-01"),
        make_booking("next", status=BookingStatus.ACCEPTED, scheduled_date="2099-01-01", scheduled_time="14:30"),
        make_booking("ask", scheduled_date="2099-02-01"),
    )
    response = client.get("/api/v1/dashboard", params=SURVEYOR_QUERY)

    assert response.status_code == 200
    data = response.json()
    assert [row["booking"]["id"] for row in data["active"]] == ["old"]
    assert [row["booking"]["id"] for row in data["upcoming"]] == ["next"]
    assert data["upcoming"][0]["countdown"]["urgency"] == "normal"
    assert [row["booking"]["id"] for row in data["pending"]] == ["ask"]
    assert data["counts"]["total"] == 3


def test_accept_returns_resynced_dashboard_and_second_accept_conflicts():
    client = _client_with(make_booking("b1", scheduled_date="2099-01-01"))

    first = client.put("/api/v1/bookings/inspection/b1/accept", params=SURVEYOR_QUERY)
    assert first.status_code == 200
    body = first.json()
    assert body["message"] == "Booking accepted successfully!"
    assert body["booking"]["status"] == "Accepted"
    assert [row["booking"]["id"] for row in body["dashboard"]["upcoming"]] == ["b1"]

    second = client.put("/api/v1/bookings/inspection/b1/accept", params=SURVEYOR_QUERY)
    assert second.status_code == 409
    assert second.json()["detail"] == "This booking was already responded to"


def test_decline_by_wrong_actor_is_bad_gateway():
    client = _client_with(make_booking("b1", counterpart_id="surveyor-2"))
    response = client.put("/api/v1/bookings/inspection/b1/decline", params=SURVEYOR_QUERY)
    assert response.status_code == 502
    assert response.json()["detail"] == "Not authorized to decline this booking"


def test_unknown_kind_or_role_is_rejected():
    client = _client_with()
    assert client.put("/api/v1/bookings/parcel/b1/accept", params=SURVEYOR_QUERY).status_code == 422
    assert client.get("/api/v1/dashboard", params={"role": "pirate", "actor_id": "x"}).status_code == 422


def test_request_booking():
    client = _client_with()
    payload = {
        "counterpart_id": "cm-1",
        "scheduled_date": "2099-03-01",
        "scheduled_time": "6:00 PM",
        "cargo_type": "Container",
        "departure_port": "Durban",
        "destination_port": "Santos",
        "vessel_name": "MV Aurora",
    }
    response = client.post(
        "/api/v1/bookings/voyage", params={"role": "ship_management", "actor_id": "ship-1"}, json=payload
    )
    assert response.status_code == 201
    assert response.json()["status"] == "Pending"

    store = dependencies.get_booking_store()
    assert store.get(BookingKind.VOYAGE, response.json()["id"]) is not None

    bad = client.post(
        "/api/v1/bookings/voyage",
        params={"role": "ship_management", "actor_id": "ship-1"},
        json={**payload, "cargo_type": "Pets"},
    )
    assert bad.status_code == 400


def test_countdown_stream_pushes_ticks():
    client = _client_with(make_booking("b1", status=BookingStatus.ACCEPTED, scheduled_date="2099-01-01"))
    with client.websocket_connect("/ws/countdown/inspection/b1?role=surveyor&actor_id=surveyor-1") as ws:
        message = ws.receive_json()
    assert message["booking_id"] == "b1"
    assert message["urgency"] == "normal"
    assert message["label"].endswith("m")


def test_countdown_stream_for_unknown_booking():
    client = _client_with()
    with client.websocket_connect("/ws/countdown/inspection/nope?role=surveyor&actor_id=surveyor-1") as ws:
        assert ws.receive_json() == {"error": "Booking not found"}


class RecordingTicker(CountdownTicker):
    def __init__(self) -> None:
        super().__init__(timezone=timezone.utc, interval=0.01)
        self.handles = []

    def track(self, key, date_value, time_text, event, on_tick):
        handle = super().track(key, date_value, time_text, event, on_tick)
        self.handles.append(handle)
        return handle


def test_closing_countdown_stream_cancels_its_ticker(monkeypatch):
    ticker = RecordingTicker()
    monkeypatch.setattr(countdown_api, "get_countdown_ticker", lambda: ticker)
    client = _client_with(make_booking("b1", status=BookingStatus.ACCEPTED, scheduled_date="2099-01-01"))

    with client.websocket_connect("/ws/countdown/inspection/b1?role=surveyor&actor_id=surveyor-1") as ws:
        ws.receive_json()
        assert ticker.active_keys == [(BookingKind.INSPECTION, "b1")]

    assert ticker.active_keys == []
    assert len(ticker.handles) == 1
    assert all(handle.cancelled for handle in ticker.handles)

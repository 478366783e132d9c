from __future__ import annotations

import logging
from typing import Any

import httpx
from pydantic import ValidationError

from fleet_console.application.dto.booking_wire import BookingWireDTO, parse_bookings
from fleet_console.application.exceptions import BookingStoreError, StaleTransition, TransitionFailed
from fleet_console.application.ports.booking_store import BookingStorePort
from fleet_console.core.config import settings
from fleet_console.domain.entities.booking import Booking, BookingKind, BookingStatus
from fleet_console.domain.entities.viewer import Viewer

RESOURCE_PATHS = {
    BookingKind.INSPECTION: "/surveyor-bookings",
    BookingKind.VOYAGE: "/cargo-manager-bookings",
}

# snake_case payload key -> wire key, per kind
CREATE_FIELDS = {
    BookingKind.INSPECTION: {
        "counterpart_id": "surveyorId",
        "scheduled_date": "inspectionDate",
        "scheduled_time": "inspectionTime",
        "ship_type": "shipType",
        "survey_type": "surveyType",
        "location": "location",
    },
    BookingKind.VOYAGE: {
        "counterpart_id": "cargoManagerId",
        "scheduled_date": "voyageDate",
        "scheduled_time": "voyageTime",
        "ship_type": "shipType",
        "cargo_type": "cargoType",
        "departure_port": "departurePort",
        "destination_port": "destinationPort",
        "cargo_weight": "cargoWeight",
        "cargo_units": "cargoUnits",
    },
}
SHARED_CREATE_FIELDS = {
    "vessel_id": "vesselId",
    "vessel_name": "vesselName",
    "notes": "notes",
    "special_requirements": "specialRequirements",
    "estimated_duration": "estimatedDuration",
    "service_request_id": "serviceRequestId",
}

STALE_MARKERS = ("not pending", "already")


class HttpBookingStore(BookingStorePort):
    def __init__(
        self,
        base_url: str | None = None,
        token: str | None = None,
        timeout: float | None = None,
        client: httpx.Client | None = None,
    ) -> None:
        self._base_url = (base_url or settings.RECORD_STORE_BASE_URL).rstrip("/")
        self._token = token if token is not None else settings.RECORD_STORE_TOKEN
        self._client = client or httpx.Client(timeout=timeout or settings.RECORD_STORE_TIMEOUT_SECONDS)
        self._logger = logging.getLogger(__name__)

    def list_bookings(
        self,
        viewer: Viewer,
        kind: BookingKind,
        status: BookingStatus | None = None,
    ) -> list[Booking]:
        url = f"{self._base_url}{RESOURCE_PATHS[kind]}"
        params = {"role": viewer.role.value, "actorId": viewer.actor_id}
        if status is not None:
            params["status"] = status.value
        try:
            response = self._client.get(url, params=params, headers=self._headers())
            response.raise_for_status()
            return parse_bookings(response.json(), kind)
        except httpx.HTTPStatusError as e:
            reason = _reason(e.response)
            self._logger.error(
                "Error listing bookings",
                extra={"kind": kind.value, "status": e.response.status_code, "reason": reason},
            )
            raise BookingStoreError(reason or "Failed to load booking data") from e
        except (httpx.HTTPError, ValueError, ValidationError) as e:
            self._logger.error("Error listing bookings", extra={"kind": kind.value, "error": str(e)})
            raise BookingStoreError("Failed to load booking data") from e

    def accept(self, viewer: Viewer, kind: BookingKind, booking_id: str) -> Booking:
        return self._transition(kind, booking_id, "accept")

    def decline(self, viewer: Viewer, kind: BookingKind, booking_id: str) -> Booking:
        return self._transition(kind, booking_id, "decline")

    def create_booking(self, viewer: Viewer, kind: BookingKind, payload: dict[str, Any]) -> Booking:
        url = f"{self._base_url}{RESOURCE_PATHS[kind]}"
        body = _create_body(kind, payload)
        try:
            response = self._client.post(url, json=body, headers=self._headers())
            response.raise_for_status()
            booking = BookingWireDTO.model_validate(response.json()).to_entity(kind)
        except httpx.HTTPStatusError as e:
            reason = _reason(e.response)
            self._logger.error(
                "Error creating booking",
                extra={"kind": kind.value, "status": e.response.status_code, "reason": reason},
            )
            raise BookingStoreError(reason or "Failed to create booking") from e
        except (httpx.HTTPError, ValueError, ValidationError) as e:
            self._logger.error("Error creating booking", extra={"kind": kind.value, "error": str(e)})
            raise BookingStoreError("Failed to create booking") from e

        self._logger.info("Booking created", extra={"booking_id": booking.id, "kind": kind.value})
        return booking

    def _transition(self, kind: BookingKind, booking_id: str, action: str) -> Booking:
        url = f"{self._base_url}{RESOURCE_PATHS[kind]}/{booking_id}/{action}"
        try:
            response = self._client.put(url, json={}, headers=self._headers())
        except httpx.HTTPError as e:
            self._logger.error(
                "Record store unreachable",
                extra={"booking_id": booking_id, "kind": kind.value, "error": str(e)},
            )
            raise TransitionFailed(None) from e

        if response.status_code >= 400:
            reason = _reason(response)
            if _is_stale(response.status_code, reason):
                raise StaleTransition(reason)
            raise TransitionFailed(reason)

        try:
            return BookingWireDTO.model_validate(response.json()).to_entity(kind)
        except (ValueError, ValidationError) as e:
            self._logger.error(
                "Unreadable transition response",
                extra={"booking_id": booking_id, "kind": kind.value, "error": str(e)},
            )
            raise TransitionFailed("Unexpected response from record store") from e

    def _headers(self) -> dict[str, str]:
        if not self._token:
            return {}
        return {"Authorization": f"Bearer {self._token}"}


def _reason(response: httpx.Response) -> str | None:
    try:
        data = response.json()
    except ValueError:
        text = response.text.strip()
        return text or None
    if isinstance(data, dict):
        for key in ("msg", "detail", "message", "error"):
            value = data.get(key)
            if isinstance(value, str) and value:
                return value
    return None


def _is_stale(status_code: int, reason: str | None) -> bool:
    if status_code == 409:
        return True
    if status_code != 400 or not reason:
        return False
    lowered = reason.lower()
    return any(marker in lowered for marker in STALE_MARKERS)


def _create_body(kind: BookingKind, payload: dict[str, Any]) -> dict[str, Any]:
    mapping = {**CREATE_FIELDS[kind], **SHARED_CREATE_FIELDS}
    return {wire: payload[key] for key, wire in mapping.items() if payload.get(key) is not None}

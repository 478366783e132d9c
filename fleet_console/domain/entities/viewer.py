from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from fleet_console.domain.entities.booking import BookingKind


class Role(str, Enum):
    OWNER = "owner"
    SHIP_MANAGEMENT = "ship_management"
    SURVEYOR = "surveyor"
    CARGO_MANAGER = "cargo_manager"
    ADMIN = "admin"

    @property
    def visible_kinds(self) -> tuple[BookingKind, ...]:
        if self is Role.SURVEYOR:
            return (BookingKind.INSPECTION,)
        if self is Role.CARGO_MANAGER:
            return (BookingKind.VOYAGE,)
        return (BookingKind.INSPECTION, BookingKind.VOYAGE)

    @property
    def can_request(self) -> bool:
        return self in (Role.SHIP_MANAGEMENT, Role.ADMIN)


@dataclass(frozen=True)
class Viewer:
    role: Role
    actor_id: str

    def is_assignee_for(self, kind: BookingKind) -> bool:
        return self.role.value == kind.assignee_role

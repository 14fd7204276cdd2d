"""Business vocabulary shared across modules.

Values are persisted and shown to end users, so they must never be renamed.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Iterable, TypeVar

EnumType = TypeVar("EnumType", bound=StrEnum)


def enum_values(enum_cls: Iterable[EnumType]) -> list[str]:
    """Return the .value for each enum member (used by SQLAlchemy)."""
    return [member.value for member in enum_cls]


class UserRole(StrEnum):
    ADMIN = "admin"
    ASSISTANT = "assistant"
    PHYSICIAN = "physician"
    PATIENT = "patient"

    @property
    def is_staff(self) -> bool:
        return self in (UserRole.ADMIN, UserRole.ASSISTANT)


class AppointmentStatus(StrEnum):
    SCHEDULED = "scheduled"
    CONFIRMED = "confirmed"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    NO_SHOW = "no_show"


class AppointmentPriority(StrEnum):
    URGENT = "urgent"
    HIGH = "high"
    NORMAL = "normal"
    LOW = "low"


class CancellationReason(StrEnum):
    PATIENT_REQUEST = "patient_request"
    PHYSICIAN_UNAVAILABLE = "physician_unavailable"
    EMERGENCY = "emergency"
    ADMINISTRATIVE = "administrative"
    ADMINISTRATIVE_DECISION = "administrative_decision"
    SCHEDULE_CONFLICT = "schedule_conflict"
    SYSTEM_MAINTENANCE = "system_maintenance"
    FORCE_MAJEURE = "force_majeure"
    OTHER = "other"

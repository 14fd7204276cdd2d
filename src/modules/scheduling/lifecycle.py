"""Appointment status machine."""

from __future__ import annotations

from dataclasses import dataclass

from src.core.exceptions import IllegalTransitionError, MissingCancellationReasonError
from src.shared.enums import AppointmentStatus, CancellationReason

MIN_OTHER_DETAILS_LENGTH = 5

TRANSITIONS: dict[AppointmentStatus, frozenset[AppointmentStatus]] = {
    AppointmentStatus.SCHEDULED: frozenset(
        {
            AppointmentStatus.CONFIRMED,
            AppointmentStatus.COMPLETED,
            AppointmentStatus.CANCELLED,
            AppointmentStatus.NO_SHOW,
        }
    ),
    AppointmentStatus.CONFIRMED: frozenset(
        {
            AppointmentStatus.COMPLETED,
            AppointmentStatus.CANCELLED,
            AppointmentStatus.NO_SHOW,
        }
    ),
    AppointmentStatus.CANCELLED: frozenset({AppointmentStatus.SCHEDULED}),
    AppointmentStatus.NO_SHOW: frozenset({AppointmentStatus.SCHEDULED, AppointmentStatus.COMPLETED}),
    AppointmentStatus.COMPLETED: frozenset(),
}

REACTIVATABLE = frozenset({AppointmentStatus.CANCELLED, AppointmentStatus.NO_SHOW})


@dataclass(frozen=True)
class CancellationInfo:
    reason: CancellationReason | None
    details: str | None = None
    cancelled_by: str | None = None

    @property
    def clean_details(self) -> str | None:
        if self.details is None:
            return None
        stripped = self.details.strip()
        return stripped or None


def allowed_targets(current: AppointmentStatus) -> frozenset[AppointmentStatus]:
    return TRANSITIONS[AppointmentStatus(current)]


def is_transition_allowed(current: AppointmentStatus, target: AppointmentStatus) -> bool:
    return AppointmentStatus(target) in allowed_targets(current)


def is_reactivation(current: AppointmentStatus, target: AppointmentStatus) -> bool:
    return current in REACTIVATABLE and target == AppointmentStatus.SCHEDULED


def check_cancellation(cancellation: CancellationInfo | None) -> None:
    """Reject a cancellation that lacks a reason, or an ``other`` without details."""
    if cancellation is None or cancellation.reason is None:
        raise MissingCancellationReasonError("A cancellation reason is required")
    if cancellation.reason == CancellationReason.OTHER:
        details = cancellation.clean_details or ""
        if len(details) < MIN_OTHER_DETAILS_LENGTH:
            raise MissingCancellationReasonError(
                f"Describe the cancellation reason (at least {MIN_OTHER_DETAILS_LENGTH} characters)"
            )


def check_transition(
    current: AppointmentStatus,
    target: AppointmentStatus,
    cancellation: CancellationInfo | None = None,
) -> None:
    """Raise unless ``current -> target`` is legal and its preconditions hold."""
    if not is_transition_allowed(current, target):
        raise IllegalTransitionError(AppointmentStatus(current).value, AppointmentStatus(target).value)
    if target == AppointmentStatus.CANCELLED:
        check_cancellation(cancellation)

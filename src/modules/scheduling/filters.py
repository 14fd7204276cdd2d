"""Faceted filtering and per-status counts over appointment lists."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from datetime import date
from typing import TypeVar

from src.modules.scheduling.slots import SlotHolder
from src.shared.enums import AppointmentStatus

ItemT = TypeVar("ItemT", bound=SlotHolder)


@dataclass(frozen=True)
class FilterCriteria:
    patient_id: str | None = None
    physician_id: str | None = None
    specialty: str | None = None
    status: AppointmentStatus | None = None
    date_from: date | None = None
    date_to: date | None = None

    @property
    def is_empty(self) -> bool:
        return all(
            value is None
            for value in (
                self.patient_id,
                self.physician_id,
                self.specialty,
                self.status,
                self.date_from,
                self.date_to,
            )
        )


def apply_filters(
    appointments: Iterable[ItemT],
    criteria: FilterCriteria,
    roster: Mapping[str, str] | None = None,
) -> list[ItemT]:
    """Keep the appointments matching every present criterion, in input order.

    ``roster`` maps physician ids to specialties and is required only when
    filtering by specialty.
    """
    if criteria.specialty is not None and roster is None:
        raise ValueError("Filtering by specialty requires a physician roster")

    def matches(item: ItemT) -> bool:
        if criteria.patient_id is not None and item.patient_id != criteria.patient_id:
            return False
        if criteria.physician_id is not None and item.physician_id != criteria.physician_id:
            return False
        if criteria.specialty is not None and roster.get(item.physician_id) != criteria.specialty:
            return False
        if criteria.status is not None and item.status != criteria.status:
            return False
        if criteria.date_from is not None and item.appointment_date < criteria.date_from:
            return False
        if criteria.date_to is not None and item.appointment_date > criteria.date_to:
            return False
        return True

    return [item for item in appointments if matches(item)]


def count_by_status(appointments: Iterable[SlotHolder]) -> dict[str, int]:
    counts = {status.value: 0 for status in AppointmentStatus}
    total = 0
    for item in appointments:
        counts[AppointmentStatus(item.status).value] += 1
        total += 1
    counts["total"] = total
    return counts

"""Month calendar grid with appointments grouped per day."""

from __future__ import annotations

import calendar
from collections import defaultdict
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Generic, TypeVar

from src.modules.scheduling.slots import SlotHolder
from src.shared.enums import AppointmentStatus

DAYS_PER_WEEK = 7
DEFAULT_VISIBLE_CAP = 3

ItemT = TypeVar("ItemT", bound=SlotHolder)


@dataclass
class DayCell(Generic[ItemT]):
    day: int
    iso_date: str
    is_other_month: bool = False
    is_today: bool = False
    appointments: list[ItemT] = field(default_factory=list)
    all_appointments: list[ItemT] = field(default_factory=list)
    total: int = 0
    has_more: bool = False

    def _has_status(self, status: AppointmentStatus) -> bool:
        return any(item.status == status for item in self.all_appointments)

    @property
    def has_scheduled(self) -> bool:
        return self._has_status(AppointmentStatus.SCHEDULED)

    @property
    def has_confirmed(self) -> bool:
        return self._has_status(AppointmentStatus.CONFIRMED)

    @property
    def has_completed(self) -> bool:
        return self._has_status(AppointmentStatus.COMPLETED)

    @property
    def has_cancelled(self) -> bool:
        return self._has_status(AppointmentStatus.CANCELLED)

    @property
    def has_no_show(self) -> bool:
        return self._has_status(AppointmentStatus.NO_SHOW)


def _filler(day: date) -> DayCell:
    return DayCell(day=day.day, iso_date=day.isoformat(), is_other_month=True)


def leading_days(year: int, month: int) -> int:
    """Cells needed before the 1st so that weeks start on Sunday."""
    # date.weekday() is Monday=0; shift so Sunday=0.
    return (date(year, month, 1).weekday() + 1) % DAYS_PER_WEEK


def build_month(
    year: int,
    month: int,
    appointments: Iterable[ItemT],
    today: date,
    visible_cap: int = DEFAULT_VISIBLE_CAP,
) -> list[DayCell[ItemT]]:
    """Lay out ``month`` as whole Sunday-first weeks.

    Cells outside ``month`` only pad the grid and never carry appointments,
    even when the input contains appointments for those dates.
    """
    if not 1 <= month <= 12:
        raise ValueError(f"month {month} out of range")
    if visible_cap < 1:
        raise ValueError("visible_cap must be at least 1")

    first = date(year, month, 1)
    days_in_month = calendar.monthrange(year, month)[1]
    last = first + timedelta(days=days_in_month - 1)
    leading = leading_days(year, month)
    trailing = -(leading + days_in_month) % DAYS_PER_WEEK
    try:
        leading_fill = [_filler(first - timedelta(days=offset)) for offset in range(leading, 0, -1)]
        trailing_fill = [_filler(last + timedelta(days=offset)) for offset in range(1, trailing + 1)]
    except OverflowError as exc:
        raise ValueError(f"{year:04d}-{month:02d} cannot be padded to whole weeks") from exc

    by_day: dict[date, list[ItemT]] = defaultdict(list)
    for item in appointments:
        if first <= item.appointment_date <= last:
            by_day[item.appointment_date].append(item)

    cells: list[DayCell[ItemT]] = list(leading_fill)

    for day_number in range(1, days_in_month + 1):
        current = date(year, month, day_number)
        day_items = sorted(by_day.get(current, []), key=lambda item: item.appointment_time)
        cells.append(
            DayCell(
                day=day_number,
                iso_date=current.isoformat(),
                is_today=current == today,
                appointments=day_items[:visible_cap],
                all_appointments=day_items,
                total=len(day_items),
                has_more=len(day_items) > visible_cap,
            )
        )

    cells.extend(trailing_fill)
    return cells

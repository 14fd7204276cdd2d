"""Slot validation and double-booking detection.

A slot is the ``(physician_id, appointment_date, appointment_time)`` triple.
Both checks are pure: the caller supplies "now" and the appointments to scan.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import date, datetime, time
from enum import StrEnum
from typing import Protocol, TypeVar

from src.shared.enums import AppointmentStatus


class SlotHolder(Protocol):
    appointment_id: str
    patient_id: str
    physician_id: str
    appointment_date: date
    appointment_time: time
    status: AppointmentStatus


HolderT = TypeVar("HolderT", bound=SlotHolder)


class SlotViolation(StrEnum):
    PAST_DATE = "past_date"
    PAST_TIME_TODAY = "past_time_today"


def normalize_time(value: time) -> time:
    """Drop seconds and sub-seconds; slots are compared at minute precision."""
    return value.replace(second=0, microsecond=0, tzinfo=None)


def validate_slot(target_date: date, target_time: time, now: datetime) -> SlotViolation | None:
    """Return why ``target_date``/``target_time`` cannot be booked, or None."""
    today = now.date()
    if target_date < today:
        return SlotViolation.PAST_DATE
    if target_date == today and normalize_time(target_time) <= normalize_time(now.time()):
        return SlotViolation.PAST_TIME_TODAY
    return None


def occupies_slot(appointment: SlotHolder) -> bool:
    return appointment.status != AppointmentStatus.CANCELLED


def find_conflict(
    physician_id: str,
    target_date: date,
    target_time: time,
    appointments: Iterable[HolderT],
    ignore_id: str | None = None,
) -> HolderT | None:
    """Return the appointment already holding the slot, if any.

    Only an exact physician/date/time match counts; other patients or other
    physicians at the same time never conflict.
    """
    wanted_time = normalize_time(target_time)
    for appointment in appointments:
        if ignore_id is not None and appointment.appointment_id == ignore_id:
            continue
        if (
            appointment.physician_id == physician_id
            and appointment.appointment_date == target_date
            and normalize_time(appointment.appointment_time) == wanted_time
            and occupies_slot(appointment)
        ):
            return appointment
    return None

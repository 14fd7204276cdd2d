from datetime import date, datetime, time, timedelta

import pytest

from src.modules.appointments.models import Appointment
from src.modules.scheduling.slots import SlotViolation, find_conflict, validate_slot
from src.shared.enums import AppointmentStatus

NOW = datetime(2025, 8, 1, 9, 30)


def _appt(appointment_id, physician_id, day, at, status=AppointmentStatus.SCHEDULED, patient_id="pat-1"):
    return Appointment(
        appointment_id=appointment_id,
        patient_id=patient_id,
        physician_id=physician_id,
        appointment_date=day,
        appointment_time=at,
        status=status,
    )


@pytest.mark.parametrize("days_back", [1, 2, 30, 365])
def test_past_dates_are_rejected(days_back):
    target = NOW.date() - timedelta(days=days_back)
    assert validate_slot(target, time(23, 59), NOW) == SlotViolation.PAST_DATE


@pytest.mark.parametrize("at", [time(0, 0), time(9, 29), time(9, 30), time(9, 30, 45)])
def test_times_not_after_now_are_rejected_today(at):
    assert validate_slot(NOW.date(), at, NOW) == SlotViolation.PAST_TIME_TODAY


@pytest.mark.parametrize("at", [time(9, 31), time(12, 0), time(23, 59)])
def test_later_times_today_are_accepted(at):
    assert validate_slot(NOW.date(), at, NOW) is None


def test_future_dates_accept_any_time():
    assert validate_slot(date(2025, 8, 2), time(0, 0), NOW) is None


def test_conflict_found_for_same_physician_date_and_time():
    booked = _appt("a1", "doc-1", date(2025, 8, 15), time(10, 0))
    other = _appt("a2", "doc-1", date(2025, 8, 15), time(11, 0))
    assert find_conflict("doc-1", date(2025, 8, 15), time(10, 0), [other, booked]) is booked


def test_cancelled_appointments_do_not_hold_the_slot():
    cancelled = _appt("a1", "doc-1", date(2025, 8, 15), time(10, 0), status=AppointmentStatus.CANCELLED)
    assert find_conflict("doc-1", date(2025, 8, 15), time(10, 0), [cancelled]) is None


@pytest.mark.parametrize(
    "status",
    [AppointmentStatus.CONFIRMED, AppointmentStatus.COMPLETED, AppointmentStatus.NO_SHOW],
)
def test_non_cancelled_statuses_hold_the_slot(status):
    held = _appt("a1", "doc-1", date(2025, 8, 15), time(10, 0), status=status)
    assert find_conflict("doc-1", date(2025, 8, 15), time(10, 0), [held]) is held


def test_different_physician_date_or_time_never_conflicts():
    existing = [
        _appt("a1", "doc-2", date(2025, 8, 15), time(10, 0)),
        _appt("a2", "doc-1", date(2025, 8, 16), time(10, 0)),
        _appt("a3", "doc-1", date(2025, 8, 15), time(10, 30)),
    ]
    assert find_conflict("doc-1", date(2025, 8, 15), time(10, 0), existing) is None


def test_same_patient_with_another_physician_is_not_a_conflict():
    existing = [_appt("a1", "doc-2", date(2025, 8, 15), time(10, 0), patient_id="pat-9")]
    assert find_conflict("doc-1", date(2025, 8, 15), time(10, 0), existing) is None


def test_seconds_are_ignored_when_matching():
    booked = _appt("a1", "doc-1", date(2025, 8, 15), time(10, 0))
    assert find_conflict("doc-1", date(2025, 8, 15), time(10, 0, 30), [booked]) is booked


def test_ignore_id_skips_the_appointment_being_moved():
    booked = _appt("a1", "doc-1", date(2025, 8, 15), time(10, 0))
    assert find_conflict("doc-1", date(2025, 8, 15), time(10, 0), [booked], ignore_id="a1") is None

"""Appointment service layer.

Every actor books, moves and cancels appointments through this class, which
runs the scheduling rules before anything reaches the database.
"""

from __future__ import annotations

import calendar
from collections.abc import Callable
from datetime import date, datetime, time
from zoneinfo import ZoneInfo

import structlog
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from src.core.config import settings
from src.core.exceptions import (
    ForbiddenError,
    NotFoundError,
    PastDateError,
    PastTimeTodayError,
    SlotConflictError,
    ValidationFailedError,
)
from src.modules.appointments.models import Appointment
from src.modules.appointments.schemas import AppointmentCreate, AppointmentUpdate, StatusChange
from src.modules.directory.models import User
from src.modules.directory.service import get_patient, get_physician, load_roster
from src.modules.scheduling.calendar import DayCell, build_month
from src.modules.scheduling.filters import FilterCriteria, apply_filters, count_by_status
from src.modules.scheduling.lifecycle import CancellationInfo, check_transition, is_reactivation
from src.modules.scheduling.slots import SlotViolation, find_conflict, occupies_slot, validate_slot
from src.shared.enums import AppointmentStatus, UserRole

logger = structlog.get_logger(__name__)

VISIBLE_CAP_BY_ROLE = {
    UserRole.ADMIN: 3,
    UserRole.PATIENT: 3,
    UserRole.PHYSICIAN: 2,
    UserRole.ASSISTANT: 2,
}

RESCHEDULABLE = frozenset({AppointmentStatus.SCHEDULED, AppointmentStatus.CONFIRMED})

# Free-text fields; an explicit null clears them.
DETAIL_FIELDS = ("reason", "notes", "medical_notes", "preparation_notes")


class AppointmentService:
    def __init__(self, db: AsyncSession, clock: Callable[[], datetime] | None = None):
        self.db = db
        self.tz = ZoneInfo(settings.clinic_timezone)
        self._clock = clock

    def _now(self) -> datetime:
        """Current clinic wall-clock time, without tzinfo."""
        if self._clock is not None:
            return self._clock()
        return datetime.now(tz=self.tz).replace(tzinfo=None)

    async def create(self, payload: AppointmentCreate, actor: User) -> Appointment:
        patient_id, physician_id = self._resolve_participants(payload, actor)
        self._ensure_bookable(payload.appointment_date, payload.appointment_time)

        if await get_patient(self.db, patient_id) is None:
            raise NotFoundError("Patient not found")
        physician = await get_physician(self.db, physician_id)
        if physician is None:
            raise NotFoundError("Physician not found")
        if not physician.is_active:
            raise ValidationFailedError("Physician is not accepting appointments")

        await self._ensure_slot_free(physician_id, payload.appointment_date, payload.appointment_time)

        appointment = Appointment(
            patient_id=patient_id,
            physician_id=physician_id,
            appointment_date=payload.appointment_date,
            appointment_time=payload.appointment_time,
            status=AppointmentStatus.SCHEDULED,
            priority=payload.priority,
            reason=payload.reason,
            notes=payload.notes,
            medical_notes=payload.medical_notes,
            preparation_notes=payload.preparation_notes,
            created_by_role=actor.role,
        )
        self.db.add(appointment)
        await self._commit()
        logger.info(
            "appointment_created",
            appointment_id=appointment.appointment_id,
            physician_id=physician_id,
            patient_id=patient_id,
            date=appointment.appointment_date.isoformat(),
            time=appointment.appointment_time.strftime("%H:%M"),
            actor_role=actor.role.value,
        )
        return await self._get_by_id(appointment.appointment_id)

    async def transition_status(self, appointment_id: str, change: StatusChange, actor: User) -> Appointment:
        appointment = await self.get_for_actor(appointment_id, actor)
        if actor.role == UserRole.PATIENT and change.status != AppointmentStatus.CANCELLED:
            raise ForbiddenError("Patients can only cancel their appointments")

        current = appointment.status
        target = change.status
        cancellation = None
        if target == AppointmentStatus.CANCELLED:
            cancellation = CancellationInfo(
                reason=change.cancellation_reason,
                details=change.cancellation_details,
                cancelled_by=actor.user_id,
            )
        check_transition(current, target, cancellation)

        if is_reactivation(current, target):
            await self._ensure_slot_free(
                appointment.physician_id,
                appointment.appointment_date,
                appointment.appointment_time,
                ignore_id=appointment.appointment_id,
            )
            appointment.cancellation_reason = None
            appointment.cancellation_details = None
            appointment.cancelled_by = None
            appointment.cancelled_at = None

        if cancellation is not None:
            appointment.cancellation_reason = cancellation.reason
            appointment.cancellation_details = cancellation.clean_details
            appointment.cancelled_by = cancellation.cancelled_by
            appointment.cancelled_at = self._now()

        appointment.status = target
        await self._commit()
        logger.info(
            "appointment_status_changed",
            appointment_id=appointment_id,
            from_status=current.value,
            to_status=target.value,
            actor_role=actor.role.value,
        )
        return await self._get_by_id(appointment_id)

    async def update(self, appointment_id: str, payload: AppointmentUpdate, actor: User) -> Appointment:
        appointment = await self.get_for_actor(appointment_id, actor)
        update_data = payload.model_dump(exclude_unset=True)
        if not update_data:
            return appointment

        new_physician = update_data.get("physician_id") or appointment.physician_id
        new_date = update_data.get("appointment_date") or appointment.appointment_date
        new_time = update_data.get("appointment_time") or appointment.appointment_time
        moved = (new_physician, new_date, new_time) != (
            appointment.physician_id,
            appointment.appointment_date,
            appointment.appointment_time,
        )

        if moved:
            if appointment.status not in RESCHEDULABLE:
                raise ValidationFailedError(f"A {appointment.status.value} appointment cannot be rescheduled")
            if actor.role == UserRole.PHYSICIAN and new_physician != actor.physician_id:
                raise ForbiddenError("Physicians can only schedule their own appointments")
            self._ensure_bookable(new_date, new_time)
            if new_physician != appointment.physician_id:
                physician = await get_physician(self.db, new_physician)
                if physician is None:
                    raise NotFoundError("Physician not found")
                if not physician.is_active:
                    raise ValidationFailedError("Physician is not accepting appointments")
            if occupies_slot(appointment):
                await self._ensure_slot_free(new_physician, new_date, new_time, ignore_id=appointment_id)
            appointment.physician_id = new_physician
            appointment.appointment_date = new_date
            appointment.appointment_time = new_time

        for name in DETAIL_FIELDS:
            if name in update_data:
                setattr(appointment, name, update_data[name])
        if update_data.get("priority") is not None:
            appointment.priority = update_data["priority"]

        await self._commit()
        if moved:
            logger.info(
                "appointment_rescheduled",
                appointment_id=appointment_id,
                physician_id=new_physician,
                date=new_date.isoformat(),
                time=new_time.strftime("%H:%M"),
            )
        return await self._get_by_id(appointment_id)

    async def delete(self, appointment_id: str) -> None:
        appointment = await self._get_by_id(appointment_id)
        await self.db.delete(appointment)
        await self.db.commit()
        logger.info("appointment_deleted", appointment_id=appointment_id)

    async def get_for_actor(self, appointment_id: str, actor: User) -> Appointment:
        appointment = await self._get_by_id(appointment_id)
        patient_id, physician_id = self._scope(actor)
        if patient_id is not None and appointment.patient_id != patient_id:
            raise NotFoundError("Appointment not found")
        if physician_id is not None and appointment.physician_id != physician_id:
            raise NotFoundError("Appointment not found")
        return appointment

    async def search(self, criteria: FilterCriteria, actor: User) -> list[Appointment]:
        criteria = self._scoped_criteria(criteria, actor)
        stmt = self._query().order_by(Appointment.appointment_date, Appointment.appointment_time)
        if criteria.patient_id is not None:
            stmt = stmt.where(Appointment.patient_id == criteria.patient_id)
        if criteria.physician_id is not None:
            stmt = stmt.where(Appointment.physician_id == criteria.physician_id)
        result = await self.db.execute(stmt)
        roster = await load_roster(self.db) if criteria.specialty is not None else None
        return apply_filters(result.scalars().all(), criteria, roster)

    async def stats(self, criteria: FilterCriteria, actor: User) -> dict[str, int]:
        return count_by_status(await self.search(criteria, actor))

    async def month_view(
        self,
        year: int,
        month: int,
        actor: User,
        physician_id: str | None = None,
        patient_id: str | None = None,
        cap: int | None = None,
    ) -> list[DayCell[Appointment]]:
        if not 1 <= month <= 12:
            raise ValidationFailedError("month must be between 1 and 12")
        criteria = self._scoped_criteria(
            FilterCriteria(
                patient_id=patient_id,
                physician_id=physician_id,
                date_from=date(year, month, 1),
                date_to=date(year, month, calendar.monthrange(year, month)[1]),
            ),
            actor,
        )
        stmt = self._query().where(
            Appointment.appointment_date >= criteria.date_from,
            Appointment.appointment_date <= criteria.date_to,
        )
        if criteria.patient_id is not None:
            stmt = stmt.where(Appointment.patient_id == criteria.patient_id)
        if criteria.physician_id is not None:
            stmt = stmt.where(Appointment.physician_id == criteria.physician_id)
        result = await self.db.execute(stmt)
        visible_cap = cap or VISIBLE_CAP_BY_ROLE[actor.role]
        try:
            return build_month(year, month, result.scalars().all(), self._now().date(), visible_cap)
        except ValueError as exc:
            raise ValidationFailedError(str(exc)) from exc

    def _scope(self, actor: User) -> tuple[str | None, str | None]:
        """Return the (patient_id, physician_id) an actor is confined to."""
        if actor.role == UserRole.PATIENT:
            if not actor.patient_id:
                raise ForbiddenError("Account is not linked to a patient record")
            return actor.patient_id, None
        if actor.role == UserRole.PHYSICIAN:
            if not actor.physician_id:
                raise ForbiddenError("Account is not linked to a physician record")
            return None, actor.physician_id
        return None, None

    def _scoped_criteria(self, criteria: FilterCriteria, actor: User) -> FilterCriteria:
        patient_scope, physician_scope = self._scope(actor)
        patient_id = criteria.patient_id
        physician_id = criteria.physician_id
        if patient_scope is not None:
            if patient_id not in (None, patient_scope):
                raise ForbiddenError("Patients can only view their own appointments")
            patient_id = patient_scope
        if physician_scope is not None:
            if physician_id not in (None, physician_scope):
                raise ForbiddenError("Physicians can only view their own appointments")
            physician_id = physician_scope
        return FilterCriteria(
            patient_id=patient_id,
            physician_id=physician_id,
            specialty=criteria.specialty,
            status=criteria.status,
            date_from=criteria.date_from,
            date_to=criteria.date_to,
        )

    def _resolve_participants(self, payload: AppointmentCreate, actor: User) -> tuple[str, str]:
        patient_scope, physician_scope = self._scope(actor)
        patient_id = payload.patient_id
        physician_id = payload.physician_id
        if patient_scope is not None:
            if patient_id not in (None, patient_scope):
                raise ForbiddenError("Patients can only book for themselves")
            patient_id = patient_scope
        if physician_scope is not None:
            if physician_id not in (None, physician_scope):
                raise ForbiddenError("Physicians can only schedule their own appointments")
            physician_id = physician_scope
        if not patient_id or not physician_id:
            raise ValidationFailedError("patient_id and physician_id are required")
        return patient_id, physician_id

    def _ensure_bookable(self, target_date: date, target_time: time) -> None:
        violation = validate_slot(target_date, target_time, self._now())
        if violation == SlotViolation.PAST_DATE:
            raise PastDateError()
        if violation == SlotViolation.PAST_TIME_TODAY:
            raise PastTimeTodayError()

    async def _ensure_slot_free(
        self,
        physician_id: str,
        target_date: date,
        target_time: time,
        ignore_id: str | None = None,
    ) -> None:
        stmt = select(Appointment).where(
            Appointment.physician_id == physician_id,
            Appointment.appointment_date == target_date,
            Appointment.status != AppointmentStatus.CANCELLED,
        )
        existing = (await self.db.execute(stmt)).scalars().all()
        conflict = find_conflict(physician_id, target_date, target_time, existing, ignore_id=ignore_id)
        if conflict is not None:
            logger.info(
                "appointment_slot_conflict",
                physician_id=physician_id,
                date=target_date.isoformat(),
                time=target_time.strftime("%H:%M"),
                conflicting_id=conflict.appointment_id,
            )
            raise SlotConflictError(conflicting_id=conflict.appointment_id)

    async def _commit(self) -> None:
        """Commit, mapping a lost race on the slot index to a slot conflict."""
        try:
            await self.db.commit()
        except IntegrityError as exc:
            await self.db.rollback()
            logger.warning("appointment_slot_conflict", source="unique_index")
            raise SlotConflictError() from exc

    def _query(self):
        return select(Appointment).options(
            selectinload(Appointment.patient),
            selectinload(Appointment.physician),
        )

    async def _get_by_id(self, appointment_id: str) -> Appointment:
        stmt = (
            self._query()
            .where(Appointment.appointment_id == appointment_id)
            .execution_options(populate_existing=True)
        )
        result = await self.db.execute(stmt)
        appointment = result.scalar_one_or_none()
        if appointment is None:
            raise NotFoundError("Appointment not found")
        return appointment

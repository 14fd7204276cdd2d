"""Appointment ORM model."""

from __future__ import annotations

from datetime import date, datetime, time
from typing import TYPE_CHECKING

from sqlalchemy import Computed, Date, DateTime, Enum, ForeignKey, Index, Integer, String, Text, Time
from sqlalchemy.orm import Mapped, mapped_column, relationship

from src.core.database import Base
from src.shared.enums import (
    AppointmentPriority,
    AppointmentStatus,
    CancellationReason,
    UserRole,
    enum_values,
)
from src.shared.models import TimestampMixin
from src.shared.ulid import generate_ulid

if TYPE_CHECKING:  # pragma: no cover
    from src.modules.directory.models import Patient, Physician

# 1 while the row holds its slot, NULL once cancelled. Unique indexes treat
# NULLs as distinct on PostgreSQL, MySQL and SQLite.
ACTIVE_SLOT_EXPRESSION = "CASE WHEN status <> 'cancelled' THEN 1 END"


class Appointment(Base, TimestampMixin):
    __tablename__ = "appointments"
    __table_args__ = (
        Index(
            "uq_appointments_active_slot",
            "physician_id",
            "appointment_date",
            "appointment_time",
            "active_slot",
            unique=True,
        ),
        Index("ix_appointments_patient_date", "patient_id", "appointment_date"),
    )

    appointment_id: Mapped[str] = mapped_column(String(26), primary_key=True, default=generate_ulid)
    patient_id: Mapped[str] = mapped_column(
        String(26),
        ForeignKey("patients.patient_id", ondelete="RESTRICT"),
        nullable=False,
    )
    physician_id: Mapped[str] = mapped_column(
        String(26),
        ForeignKey("physicians.physician_id", ondelete="RESTRICT"),
        nullable=False,
    )
    appointment_date: Mapped[date] = mapped_column(Date, nullable=False)
    appointment_time: Mapped[time] = mapped_column(Time, nullable=False)
    status: Mapped[AppointmentStatus] = mapped_column(
        Enum(
            AppointmentStatus,
            values_callable=enum_values,
            validate_strings=True,
            name="appointmentstatus",
        ),
        nullable=False,
        default=AppointmentStatus.SCHEDULED,
    )
    priority: Mapped[AppointmentPriority] = mapped_column(
        Enum(
            AppointmentPriority,
            values_callable=enum_values,
            validate_strings=True,
            name="appointmentpriority",
        ),
        nullable=False,
        default=AppointmentPriority.NORMAL,
    )
    reason: Mapped[str | None] = mapped_column(Text)
    notes: Mapped[str | None] = mapped_column(Text)
    medical_notes: Mapped[str | None] = mapped_column(Text)
    preparation_notes: Mapped[str | None] = mapped_column(Text)
    created_by_role: Mapped[UserRole] = mapped_column(
        Enum(
            UserRole,
            values_callable=enum_values,
            validate_strings=True,
            name="userrole",
        ),
        nullable=False,
    )

    cancellation_reason: Mapped[CancellationReason | None] = mapped_column(
        Enum(
            CancellationReason,
            values_callable=enum_values,
            validate_strings=True,
            name="cancellationreason",
        ),
    )
    cancellation_details: Mapped[str | None] = mapped_column(Text)
    cancelled_by: Mapped[str | None] = mapped_column(String(26))
    cancelled_at: Mapped[datetime | None] = mapped_column(DateTime)
    active_slot: Mapped[int | None] = mapped_column(
        Integer,
        Computed(ACTIVE_SLOT_EXPRESSION, persisted=True),
    )

    patient: Mapped[Patient] = relationship(back_populates="appointments")
    physician: Mapped[Physician] = relationship(back_populates="appointments")

    @property
    def patient_name(self) -> str | None:
        return self.patient.full_name if self.patient is not None else None

    @property
    def physician_name(self) -> str | None:
        return self.physician.full_name if self.physician is not None else None

    @property
    def specialty(self) -> str | None:
        return self.physician.specialty if self.physician is not None else None


# Late import so the relationship targets are registered with the mapper.
from src.modules.directory.models import Patient, Physician  # noqa: E402

"""ORM models for the people the scheduler refers to."""

from __future__ import annotations

from datetime import date
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, Date, Enum, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from src.core.database import Base
from src.shared.enums import UserRole, enum_values
from src.shared.models import TimestampMixin
from src.shared.ulid import generate_ulid

if TYPE_CHECKING:  # pragma: no cover - typing only
    from src.modules.appointments.models import Appointment


class User(Base, TimestampMixin):
    """An account able to act on the schedule.

    Patients and physicians are linked to their directory record so their
    views can be scoped; admins and assistants have neither link.
    """

    __tablename__ = "users"

    user_id: Mapped[str] = mapped_column(String(26), primary_key=True, default=generate_ulid)
    email: Mapped[str] = mapped_column(String(255), unique=True, index=True)
    role: Mapped[UserRole] = mapped_column(
        Enum(
            UserRole,
            values_callable=enum_values,
            validate_strings=True,
            name="userrole",
        ),
        nullable=False,
    )
    display_name: Mapped[str | None] = mapped_column(String(100))
    patient_id: Mapped[str | None] = mapped_column(
        String(26),
        ForeignKey("patients.patient_id", ondelete="SET NULL"),
    )
    physician_id: Mapped[str | None] = mapped_column(
        String(26),
        ForeignKey("physicians.physician_id", ondelete="SET NULL"),
    )
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)


class Patient(Base, TimestampMixin):
    __tablename__ = "patients"

    patient_id: Mapped[str] = mapped_column(String(26), primary_key=True, default=generate_ulid)
    full_name: Mapped[str] = mapped_column(String(120), nullable=False)
    document_number: Mapped[str | None] = mapped_column(String(32), unique=True)
    phone_number: Mapped[str | None] = mapped_column(String(32))
    email: Mapped[str | None] = mapped_column(String(255))
    birth_date: Mapped[date | None] = mapped_column(Date)

    appointments: Mapped[list[Appointment]] = relationship(back_populates="patient")


class Physician(Base, TimestampMixin):
    __tablename__ = "physicians"

    physician_id: Mapped[str] = mapped_column(String(26), primary_key=True, default=generate_ulid)
    full_name: Mapped[str] = mapped_column(String(120), nullable=False)
    specialty: Mapped[str] = mapped_column(String(80), nullable=False, index=True)
    license_number: Mapped[str | None] = mapped_column(String(40), unique=True)
    phone_number: Mapped[str | None] = mapped_column(String(32))
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    appointments: Mapped[list[Appointment]] = relationship(back_populates="physician")


# Late import so the relationship targets are registered with the mapper.
from src.modules.appointments.models import Appointment  # noqa: E402

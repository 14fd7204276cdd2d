"""Appointments schemas."""

from datetime import date, datetime, time

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_serializer, field_validator

from src.modules.scheduling.slots import normalize_time
from src.shared.enums import AppointmentPriority, AppointmentStatus, CancellationReason, UserRole


def _format_time(value: time) -> str:
    return value.strftime("%H:%M")


class AppointmentPublic(BaseModel):
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    appointment_id: str = Field(
        validation_alias=AliasChoices("appointment_id", "id"),
        serialization_alias="id",
    )
    patient_id: str
    physician_id: str
    appointment_date: date = Field(
        validation_alias=AliasChoices("appointment_date", "date"),
        serialization_alias="date",
    )
    appointment_time: time = Field(
        validation_alias=AliasChoices("appointment_time", "time"),
        serialization_alias="time",
    )
    status: AppointmentStatus
    priority: AppointmentPriority = AppointmentPriority.NORMAL
    reason: str | None = None
    notes: str | None = None
    medical_notes: str | None = None
    preparation_notes: str | None = None
    created_by_role: UserRole
    cancellation_reason: CancellationReason | None = None
    cancellation_details: str | None = None
    cancelled_by: str | None = None
    cancelled_at: datetime | None = None
    patient_name: str | None = None
    physician_name: str | None = None
    specialty: str | None = None

    @field_serializer("appointment_time")
    def _serialize_time(self, value: time) -> str:
        return _format_time(value)


def _minute_precision(value: time | None) -> time | None:
    return normalize_time(value) if value is not None else None


class AppointmentCreate(BaseModel):
    """Booking request.

    ``patient_id`` / ``physician_id`` may be omitted when the acting user is
    that patient or physician.
    """

    model_config = ConfigDict(populate_by_name=True)

    patient_id: str | None = None
    physician_id: str | None = None
    appointment_date: date = Field(validation_alias=AliasChoices("date", "appointment_date"))
    appointment_time: time = Field(validation_alias=AliasChoices("time", "appointment_time"))
    reason: str | None = Field(None, max_length=500)
    priority: AppointmentPriority = AppointmentPriority.NORMAL
    notes: str | None = None
    medical_notes: str | None = None
    preparation_notes: str | None = None

    @field_validator("appointment_time")
    @classmethod
    def _normalize_time(cls, value: time) -> time:
        return _minute_precision(value)


class AppointmentUpdate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    physician_id: str | None = None
    appointment_date: date | None = Field(None, validation_alias=AliasChoices("date", "appointment_date"))
    appointment_time: time | None = Field(None, validation_alias=AliasChoices("time", "appointment_time"))
    reason: str | None = Field(None, max_length=500)
    priority: AppointmentPriority | None = None
    notes: str | None = None
    medical_notes: str | None = None
    preparation_notes: str | None = None

    @field_validator("appointment_time")
    @classmethod
    def _normalize_time(cls, value: time | None) -> time | None:
        return _minute_precision(value)


class StatusChange(BaseModel):
    status: AppointmentStatus
    cancellation_reason: CancellationReason | None = None
    cancellation_details: str | None = Field(None, max_length=1000)


class CancelRequest(BaseModel):
    cancellation_reason: CancellationReason | None = None
    cancellation_details: str | None = Field(None, max_length=1000)


class DayCellPublic(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    day: int
    iso_date: str
    is_other_month: bool
    is_today: bool
    appointments: list[AppointmentPublic]
    all_appointments: list[AppointmentPublic]
    total: int
    has_more: bool
    has_scheduled: bool
    has_confirmed: bool
    has_completed: bool
    has_cancelled: bool
    has_no_show: bool


class StatusCounts(BaseModel):
    total: int
    scheduled: int
    confirmed: int
    completed: int
    cancelled: int
    no_show: int

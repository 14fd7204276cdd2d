"""Appointments API routes."""

from datetime import date

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.database import get_db
from src.core.deps import get_current_user, require_admin, require_clinician
from src.modules.appointments.schemas import (
    AppointmentCreate,
    AppointmentPublic,
    AppointmentUpdate,
    CancelRequest,
    DayCellPublic,
    StatusChange,
    StatusCounts,
)
from src.modules.appointments.service import AppointmentService
from src.modules.directory.models import User
from src.modules.scheduling.filters import FilterCriteria
from src.shared.enums import AppointmentStatus

router = APIRouter(prefix="/api/v1/appointments", tags=["appointments"])


def get_service(db: AsyncSession = Depends(get_db)) -> AppointmentService:
    return AppointmentService(db)


def filter_criteria(
    patient_id: str | None = Query(None),
    physician_id: str | None = Query(None),
    specialty: str | None = Query(None),
    status_value: AppointmentStatus | None = Query(None, alias="status"),
    date_from: date | None = Query(None),
    date_to: date | None = Query(None),
) -> FilterCriteria:
    return FilterCriteria(
        patient_id=patient_id,
        physician_id=physician_id,
        specialty=specialty,
        status=status_value,
        date_from=date_from,
        date_to=date_to,
    )


@router.get("", response_model=list[AppointmentPublic])
async def search_appointments(
    criteria: FilterCriteria = Depends(filter_criteria),
    current_user: User = Depends(get_current_user),
    service: AppointmentService = Depends(get_service),
):
    return await service.search(criteria, current_user)


@router.post("", response_model=AppointmentPublic, status_code=status.HTTP_201_CREATED)
async def create_appointment(
    payload: AppointmentCreate,
    current_user: User = Depends(get_current_user),
    service: AppointmentService = Depends(get_service),
):
    return await service.create(payload, current_user)


@router.get("/calendar", response_model=list[DayCellPublic])
async def month_calendar(
    year: int = Query(..., ge=1, le=9999),
    month: int = Query(..., ge=1, le=12),
    physician_id: str | None = Query(None),
    patient_id: str | None = Query(None),
    cap: int | None = Query(None, ge=1, le=10),
    current_user: User = Depends(get_current_user),
    service: AppointmentService = Depends(get_service),
) -> list[DayCellPublic]:
    cells = await service.month_view(
        year,
        month,
        current_user,
        physician_id=physician_id,
        patient_id=patient_id,
        cap=cap,
    )
    return [DayCellPublic.model_validate(cell) for cell in cells]


@router.get("/stats", response_model=StatusCounts)
async def appointment_stats(
    criteria: FilterCriteria = Depends(filter_criteria),
    current_user: User = Depends(get_current_user),
    service: AppointmentService = Depends(get_service),
) -> StatusCounts:
    return StatusCounts(**await service.stats(criteria, current_user))


@router.get("/{appointment_id}", response_model=AppointmentPublic)
async def get_appointment(
    appointment_id: str,
    current_user: User = Depends(get_current_user),
    service: AppointmentService = Depends(get_service),
):
    return await service.get_for_actor(appointment_id, current_user)


@router.patch("/{appointment_id}", response_model=AppointmentPublic)
async def update_appointment(
    appointment_id: str,
    payload: AppointmentUpdate,
    current_user: User = Depends(require_clinician),
    service: AppointmentService = Depends(get_service),
):
    return await service.update(appointment_id, payload, current_user)


@router.post("/{appointment_id}/status", response_model=AppointmentPublic)
async def change_status(
    appointment_id: str,
    payload: StatusChange,
    current_user: User = Depends(get_current_user),
    service: AppointmentService = Depends(get_service),
):
    return await service.transition_status(appointment_id, payload, current_user)


@router.post("/{appointment_id}/cancel", response_model=AppointmentPublic)
async def cancel_appointment(
    appointment_id: str,
    payload: CancelRequest,
    current_user: User = Depends(get_current_user),
    service: AppointmentService = Depends(get_service),
):
    change = StatusChange(status=AppointmentStatus.CANCELLED, **payload.model_dump())
    return await service.transition_status(appointment_id, change, current_user)


@router.post("/{appointment_id}/reactivate", response_model=AppointmentPublic)
async def reactivate_appointment(
    appointment_id: str,
    current_user: User = Depends(require_clinician),
    service: AppointmentService = Depends(get_service),
):
    change = StatusChange(status=AppointmentStatus.SCHEDULED)
    return await service.transition_status(appointment_id, change, current_user)


@router.delete("/{appointment_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_appointment(
    appointment_id: str,
    _: User = Depends(require_admin),
    service: AppointmentService = Depends(get_service),
) -> None:
    await service.delete(appointment_id)

"""Read-only directory routes (physician roster and patients)."""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.database import get_db
from src.core.deps import get_current_user, require_staff
from src.modules.directory import service
from src.modules.directory.models import Patient, Physician, User
from src.modules.directory.schemas import PatientPublic, PhysicianPublic, SpecialtyCount

router = APIRouter(prefix="/api/v1", tags=["directory"])


@router.get("/physicians", response_model=list[PhysicianPublic])
async def list_physicians(
    specialty: str | None = Query(None),
    _: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> list[Physician]:
    return await service.list_physicians(db, specialty)


@router.get("/physicians/specialties", response_model=list[SpecialtyCount])
async def list_specialties(
    _: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> list[SpecialtyCount]:
    return [SpecialtyCount(specialty=name, count=count) for name, count in await service.specialty_counts(db)]


@router.get("/patients", response_model=list[PatientPublic])
async def list_patients(
    q: str | None = Query(None, min_length=1, max_length=100),
    _: User = Depends(require_staff),
    db: AsyncSession = Depends(get_db),
) -> list[Patient]:
    return await service.list_patients(db, q)

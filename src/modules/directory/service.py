"""Read-side helpers over patients and physicians."""

from __future__ import annotations

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.modules.directory.models import Patient, Physician


async def load_roster(db: AsyncSession) -> dict[str, str]:
    """Map every physician id to its specialty."""
    result = await db.execute(select(Physician.physician_id, Physician.specialty))
    return {physician_id: specialty for physician_id, specialty in result.all()}


async def list_physicians(db: AsyncSession, specialty: str | None = None) -> list[Physician]:
    stmt = select(Physician).where(Physician.is_active.is_(True)).order_by(Physician.full_name)
    if specialty:
        stmt = stmt.where(Physician.specialty == specialty)
    result = await db.execute(stmt)
    return list(result.scalars().all())


async def specialty_counts(db: AsyncSession) -> list[tuple[str, int]]:
    stmt = (
        select(Physician.specialty, func.count(Physician.physician_id))
        .where(Physician.is_active.is_(True))
        .group_by(Physician.specialty)
        .order_by(Physician.specialty)
    )
    result = await db.execute(stmt)
    return [(specialty, count) for specialty, count in result.all()]


async def list_patients(db: AsyncSession, search: str | None = None) -> list[Patient]:
    stmt = select(Patient).order_by(Patient.full_name)
    if search:
        pattern = f"%{search.strip()}%"
        stmt = stmt.where(Patient.full_name.ilike(pattern) | Patient.document_number.ilike(pattern))
    result = await db.execute(stmt)
    return list(result.scalars().all())


async def get_patient(db: AsyncSession, patient_id: str) -> Patient | None:
    result = await db.execute(select(Patient).where(Patient.patient_id == patient_id))
    return result.scalar_one_or_none()


async def get_physician(db: AsyncSession, physician_id: str) -> Physician | None:
    result = await db.execute(select(Physician).where(Physician.physician_id == physician_id))
    return result.scalar_one_or_none()

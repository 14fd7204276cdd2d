import os
import sys
from datetime import datetime
from pathlib import Path
from types import SimpleNamespace

import pytest_asyncio
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("JWT_SECRET", "test-secret")
os.environ.setdefault("LOG_FORMAT", "console")

from src.core.database import Base  # noqa: E402
from src.modules.directory.models import Patient, Physician, User  # noqa: E402
from src.shared.enums import UserRole  # noqa: E402
from src.shared.ulid import generate_ulid  # noqa: E402

# Friday 1 August 2025, 09:30 clinic time.
FIXED_NOW = datetime(2025, 8, 1, 9, 30)


def fixed_clock() -> datetime:
    return FIXED_NOW


@pytest_asyncio.fixture
async def db_session():
    engine = create_async_engine("sqlite+aiosqlite:///:memory:")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    SessionLocal = async_sessionmaker(engine, expire_on_commit=False, autoflush=False)
    async with SessionLocal() as session:
        yield session
    await engine.dispose()


@pytest_asyncio.fixture
async def clinic(db_session):
    cardio = Physician(physician_id=generate_ulid(), full_name="Dr. Elena Ruiz", specialty="cardiology")
    derma = Physician(physician_id=generate_ulid(), full_name="Dr. Tomas Vega", specialty="dermatology")
    retired = Physician(
        physician_id=generate_ulid(),
        full_name="Dr. Ana Mora",
        specialty="cardiology",
        is_active=False,
    )
    ana = Patient(patient_id=generate_ulid(), full_name="Ana Lopez", document_number="1001")
    luis = Patient(patient_id=generate_ulid(), full_name="Luis Perez", document_number="1002")

    admin = User(user_id=generate_ulid(), email="admin@clinic.test", role=UserRole.ADMIN)
    assistant = User(user_id=generate_ulid(), email="front@clinic.test", role=UserRole.ASSISTANT)
    doctor = User(
        user_id=generate_ulid(),
        email="ruiz@clinic.test",
        role=UserRole.PHYSICIAN,
        physician_id=cardio.physician_id,
    )
    patient_user = User(
        user_id=generate_ulid(),
        email="ana@mail.test",
        role=UserRole.PATIENT,
        patient_id=ana.patient_id,
    )
    db_session.add_all([cardio, derma, retired, ana, luis, admin, assistant, doctor, patient_user])
    await db_session.commit()
    return SimpleNamespace(
        cardio=cardio,
        derma=derma,
        retired=retired,
        ana=ana,
        luis=luis,
        admin=admin,
        assistant=assistant,
        doctor=doctor,
        patient_user=patient_user,
    )

import asyncio
import os
import sys

from dotenv import load_dotenv
from sqlalchemy import inspect, text
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import create_async_engine

from src.core.database import resolve_async_database_url

load_dotenv()

DB_LABELS = {
    "postgresql": "PostgreSQL",
    "mysql": "MySQL",
    "sqlite": "SQLite (tests)",
}

HEALTH_QUERIES = {
    "postgresql": "SELECT version();",
    "mysql": "SELECT VERSION();",
}

REQUIRED_TABLES = ("users", "patients", "physicians", "appointments")
SLOT_INDEX = "uq_appointments_active_slot"


def _inspect_schema(sync_conn) -> tuple[set[str], set[str]]:
    inspector = inspect(sync_conn)
    tables = set(inspector.get_table_names())
    indexes: set[str] = set()
    if "appointments" in tables:
        indexes = {index["name"] for index in inspector.get_indexes("appointments")}
    return tables, indexes


async def verify_database() -> bool:
    print("-" * 30)
    db_url = os.getenv("DATABASE_URL")
    if not db_url:
        print("ERROR: DATABASE_URL is not set")
        return False

    try:
        async_url = resolve_async_database_url(db_url)
        url = make_url(async_url)
    except ValueError as exc:
        print(f"ERROR: unsupported database configuration: {exc}")
        return False

    backend = url.get_backend_name()
    label = DB_LABELS.get(backend, backend)
    print(f"Checking {label} connection...")
    print(f"DSN: {url.render_as_string(hide_password=True)}")

    engine = create_async_engine(async_url, echo=False)
    try:
        async with engine.connect() as conn:
            version = (await conn.execute(text(HEALTH_QUERIES.get(backend, "SELECT 1")))).scalar()
            print(f"OK: {label} reachable, server says: {version}")
            tables, indexes = await conn.run_sync(_inspect_schema)
    except Exception as exc:  # noqa: BLE001 - surface connection failure
        print(f"ERROR: {label} connection failed: {exc}")
        return False
    finally:
        await engine.dispose()

    missing = [name for name in REQUIRED_TABLES if name not in tables]
    if missing:
        print(f"WARNING: missing tables {', '.join(missing)}; run the migrations")
        return False
    if SLOT_INDEX not in indexes:
        print(f"WARNING: index {SLOT_INDEX} not found; double bookings are only checked in the application")
        return False
    print("OK: schema and slot index present")
    return True


async def main() -> int:
    print("Verifying environment configuration...")
    db_ok = await verify_database()
    print("-" * 30)
    if db_ok:
        print("All checks passed.")
        return 0
    print("Some checks failed; review .env and the database state.")
    return 1


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))

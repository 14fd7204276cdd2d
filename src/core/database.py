"""Database engine, declarative base and session helpers."""

from collections.abc import AsyncIterator

from sqlalchemy.engine import make_url
from sqlalchemy.engine.url import URL
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from .config import settings

ASYNC_DRIVERS = {
    "postgresql": "postgresql+asyncpg",
    "mysql": "mysql+asyncmy",
    "sqlite": "sqlite+aiosqlite",
}


def resolve_async_database_url(raw_url: str) -> str:
    """Rewrite DATABASE_URL so it always points at an async driver.

    ``postgres://`` (Heroku style) is accepted as an alias of ``postgresql``.
    """
    url = make_url(raw_url)
    backend = url.get_backend_name().lower()
    if backend == "postgres":
        backend = "postgresql"

    target_driver = ASYNC_DRIVERS.get(backend)
    if target_driver is None:
        raise ValueError(
            f"Unsupported database dialect '{url.drivername}'. "
            "Use PostgreSQL (asyncpg), MySQL (asyncmy) or SQLite (aiosqlite)."
        )
    if url.drivername.lower() == target_driver:
        return raw_url

    coerced_url: URL = url.set(drivername=target_driver)
    return coerced_url.render_as_string(hide_password=False)


class Base(DeclarativeBase):
    """Declarative base shared by every ORM model."""


DATABASE_URL = resolve_async_database_url(settings.database_url)

engine = create_async_engine(DATABASE_URL, echo=settings.debug)
AsyncSessionLocal = async_sessionmaker(
    engine,
    expire_on_commit=False,
    autoflush=False,
)


async def get_db() -> AsyncIterator[AsyncSession]:
    """FastAPI dependency that yields one session per request."""
    async with AsyncSessionLocal() as session:
        yield session

"""Async engine and session plumbing shared by every sm_* repository.

Repositories receive an AsyncSession per request and never commit on their
own; the application service that owns the unit of work does.
"""

from collections.abc import AsyncGenerator

from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from config.settings import settings


class Base(DeclarativeBase):
    """Declarative base for the few ORM table mappings (users)."""


engine: AsyncEngine = create_async_engine(
    settings.DATABASE_URL,
    echo=settings.DEBUG,
    pool_size=settings.DB_POOL_SIZE,
    max_overflow=settings.DB_POOL_MAX_OVERFLOW,
    # connections closed by the server while idle are replaced on checkout from the pool
    pool_pre_ping=True,
)

async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency: one session per request, closed afterwards."""
    async with async_session_factory() as session:
        yield session


async def check_database(db_engine: AsyncEngine = engine) -> None:
    """Round-trip a trivial query; raises if PostgreSQL is unreachable."""
    async with db_engine.connect() as conn:
        await conn.execute(text("SELECT 1"))

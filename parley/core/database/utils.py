"""
Engine and session helpers.

Postgres URLs of any spelling are pointed at the asyncpg driver. SQLite is
supported for development and tests; an in-memory SQLite URL gets a single
shared connection so that every session sees the same database.
"""

from __future__ import annotations

import re

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel

_POSTGRES_PREFIX = re.compile(r"^postgres(?:ql)?(?:\+[a-z0-9_]+)?://")


def normalize_url(db_url: str) -> str:
    """Rewrite ``postgres://``, ``postgresql://`` or ``postgresql+psycopg://`` to asyncpg."""
    return _POSTGRES_PREFIX.sub("postgresql+asyncpg://", db_url, count=1)


def is_memory_sqlite(db_url: str) -> bool:
    return db_url.startswith("sqlite") and (":memory:" in db_url or db_url.rstrip("/").endswith("sqlite+aiosqlite:"))


def create_engine(db_url: str) -> AsyncEngine:
    """Create the async engine for a database URL.

    Args:
        db_url: Database connection URL from ``DATABASE_URL``

    Returns:
        AsyncEngine; Postgres engines ping pooled connections before use
    """
    url = normalize_url(db_url)
    if is_memory_sqlite(url):
        return create_async_engine(url, connect_args={"check_same_thread": False}, poolclass=StaticPool)
    if url.startswith("sqlite"):
        return create_async_engine(url, connect_args={"check_same_thread": False})
    return create_async_engine(url, pool_pre_ping=True)


def create_sessionmaker(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Session factory whose objects stay usable after commit."""
    return async_sessionmaker(engine, expire_on_commit=False)


async def create_all(engine: AsyncEngine) -> None:
    """Create missing tables. Production schemas come from the Alembic migration."""
    from . import entities  # noqa: F401  registers tables on the metadata

    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

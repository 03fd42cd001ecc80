"""Test configuration for database unit tests.

This module provides common fixtures and utilities for testing the
database layer with in-memory SQLite and mocked sessions.
"""

from __future__ import annotations

from typing import AsyncGenerator
from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel
from sqlmodel.pool import StaticPool

import parley.core.database.entities  # noqa: F401


@pytest.fixture(scope="function")
async def in_memory_engine() -> AsyncGenerator:
    """Create in-memory SQLite engine for testing."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

    try:
        yield engine
    finally:
        await engine.dispose()


@pytest.fixture(scope="function")
async def in_memory_session(in_memory_engine) -> AsyncGenerator[AsyncSession, None]:
    """Create in-memory SQLite session for testing."""
    async_session = sessionmaker(
        bind=in_memory_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async with async_session() as session:
        yield session


@pytest.fixture
def mock_session():
    """Mock async database session."""
    session = AsyncMock()
    session.add = MagicMock()
    session.add_all = MagicMock()
    session.commit = AsyncMock()
    session.refresh = AsyncMock()
    session.delete = AsyncMock()
    # execute returns the result object directly; its accessors are sync
    mock_result = MagicMock()
    session.execute = AsyncMock(return_value=mock_result)
    return session


@pytest.fixture(scope="function")
def sample_user_data() -> dict:
    """Sample user data for testing."""
    return {
        "username": "alice",
        "email": "alice@example.com",
        "password_hash": "pbkdf2_sha256$1$00$00",
        "status": "Hey there",
    }


@pytest.fixture(scope="function")
def sample_group_data() -> dict:
    """Sample group data for testing."""
    return {
        "name": "Book club",
        "description": "Monthly reads",
        "created_by_id": "user_1",
    }

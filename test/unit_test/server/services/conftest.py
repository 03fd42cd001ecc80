"""Fixtures for service tests."""

from types import SimpleNamespace

import pytest

from parley.core.database.entities import User


@pytest.fixture
async def users(repos):
    """Three stored users: alice, bob and carol."""
    created = {}
    for name in ("alice", "bob", "carol"):
        created[name] = await repos.users.create(User(username=name, email=f"{name}@example.com", password_hash="x"))
    return SimpleNamespace(**created)

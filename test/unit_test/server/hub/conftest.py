"""Fixtures for hub tests: users, a chat and a group stored in the test database."""

from types import SimpleNamespace
from unittest.mock import AsyncMock

import pytest

from parley.core.database.entities import Chat, Group, GroupMember, GroupRole, User


@pytest.fixture
def fake_socket():
    """Stand-in for an accepted WebSocket; only ``send_json`` is used by the manager."""

    def _make():
        socket = AsyncMock()
        socket.send_json = AsyncMock()
        return socket

    return _make


@pytest.fixture
async def world(repos):
    """Alice and Bob sharing a chat and a group, and Mallory outside both."""
    alice = await repos.users.create(User(username="alice", email="alice@example.com", password_hash="x"))
    bob = await repos.users.create(User(username="bob", email="bob@example.com", password_hash="x"))
    mallory = await repos.users.create(User(username="mallory", email="mallory@example.com", password_hash="x"))
    chat = await repos.chats.create(Chat(user1_id=alice.id, user2_id=bob.id))
    group = await repos.groups.create(Group(name="Team", created_by_id=alice.id))
    await repos.group_members.add_many(
        [
            GroupMember(group_id=group.id, user_id=alice.id, role=GroupRole.ADMIN),
            GroupMember(group_id=group.id, user_id=bob.id),
        ]
    )
    return SimpleNamespace(alice=alice, bob=bob, mallory=mallory, chat=chat, group=group)

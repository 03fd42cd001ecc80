"""Unit tests for user and contact entities."""

from __future__ import annotations

import pytest
from sqlalchemy import DateTime
from sqlalchemy.exc import IntegrityError
from sqlmodel import SQLModel

from parley.core.database.base import utc_now
from parley.core.database.entities import Contact, User


class TestUserEntity:
    """Tests for User entity defaults and constraints."""

    def test_defaults(self, sample_user_data):
        user = User(**sample_user_data)

        assert len(user.id) == 32
        assert user.is_online is False
        assert user.last_seen is None
        assert user.profile_picture_url is None
        assert user.created_at.tzinfo is None

    def test_ids_are_unique(self, sample_user_data):
        assert User(**sample_user_data).id != User(**sample_user_data).id

    async def test_username_is_unique(self, in_memory_session, sample_user_data):
        in_memory_session.add(User(**sample_user_data))
        await in_memory_session.commit()

        in_memory_session.add(User(**{**sample_user_data, "email": "other@example.com"}))
        with pytest.raises(IntegrityError):
            await in_memory_session.commit()

    async def test_email_is_unique(self, in_memory_session, sample_user_data):
        in_memory_session.add(User(**sample_user_data))
        await in_memory_session.commit()

        in_memory_session.add(User(**{**sample_user_data, "username": "alice2"}))
        with pytest.raises(IntegrityError):
            await in_memory_session.commit()

    async def test_timestamps_persist_as_naive_utc(self, in_memory_session, sample_user_data):
        user = User(**sample_user_data, last_seen=utc_now())
        in_memory_session.add(user)
        await in_memory_session.commit()
        created_at = user.created_at

        in_memory_session.expunge_all()
        stored = await in_memory_session.get(User, user.id)

        assert stored.created_at == created_at
        assert stored.created_at.tzinfo is None
        assert stored.last_seen.tzinfo is None

    def test_datetime_columns_are_timezone_naive(self):
        columns = [
            column
            for table in SQLModel.metadata.sorted_tables
            for column in table.columns
            if isinstance(column.type, DateTime)
        ]

        assert columns
        assert all(column.type.timezone is False for column in columns)


class TestContactEntity:
    """Tests for Contact entity constraints."""

    async def test_contact_pair_is_unique(self, in_memory_session, sample_user_data):
        alice = User(**sample_user_data)
        bob = User(username="bob", email="bob@example.com", password_hash="x")
        in_memory_session.add_all([alice, bob])
        await in_memory_session.commit()

        in_memory_session.add(Contact(user_id=alice.id, contact_user_id=bob.id))
        await in_memory_session.commit()

        in_memory_session.add(Contact(user_id=alice.id, contact_user_id=bob.id, display_name="Bobby"))
        with pytest.raises(IntegrityError):
            await in_memory_session.commit()

    async def test_contacts_are_directional(self, in_memory_session, sample_user_data):
        alice = User(**sample_user_data)
        bob = User(username="bob", email="bob@example.com", password_hash="x")
        in_memory_session.add_all([alice, bob])
        await in_memory_session.commit()

        in_memory_session.add_all(
            [
                Contact(user_id=alice.id, contact_user_id=bob.id),
                Contact(user_id=bob.id, contact_user_id=alice.id),
            ]
        )
        await in_memory_session.commit()

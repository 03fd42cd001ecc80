"""Unit tests for chat, group and message entities."""

from __future__ import annotations

import pytest
from sqlalchemy.exc import IntegrityError

from parley.core.database.entities import (
    Chat,
    Group,
    GroupMember,
    GroupRole,
    Message,
    MessageReaction,
    MessageRead,
    MessageType,
    User,
)


@pytest.fixture
async def two_users(in_memory_session):
    alice = User(username="alice", email="alice@example.com", password_hash="x")
    bob = User(username="bob", email="bob@example.com", password_hash="x")
    in_memory_session.add_all([alice, bob])
    await in_memory_session.commit()
    return alice, bob


class TestChatEntity:
    """Tests for Chat helpers and constraints."""

    def test_participant_helpers(self):
        chat = Chat(user1_id="a", user2_id="b")

        assert chat.has_participant("a")
        assert chat.has_participant("b")
        assert not chat.has_participant("c")
        assert chat.other_user_id("a") == "b"
        assert chat.other_user_id("b") == "a"

    async def test_pair_is_unique(self, in_memory_session, two_users):
        alice, bob = two_users
        in_memory_session.add(Chat(user1_id=alice.id, user2_id=bob.id))
        await in_memory_session.commit()

        in_memory_session.add(Chat(user1_id=alice.id, user2_id=bob.id))
        with pytest.raises(IntegrityError):
            await in_memory_session.commit()


class TestGroupEntities:
    """Tests for Group and GroupMember."""

    def test_member_defaults_to_member_role(self, sample_group_data):
        group = Group(**sample_group_data)
        member = GroupMember(group_id=group.id, user_id="u")

        assert member.role == GroupRole.MEMBER
        assert group.last_message_at is None

    def test_role_values(self):
        assert GroupRole.ADMIN.value == "Admin"
        assert GroupRole.MEMBER.value == "Member"

    async def test_membership_is_unique(self, in_memory_session, two_users):
        alice, _ = two_users
        group = Group(name="g", created_by_id=alice.id)
        in_memory_session.add(group)
        await in_memory_session.commit()

        in_memory_session.add(GroupMember(group_id=group.id, user_id=alice.id, role=GroupRole.ADMIN))
        await in_memory_session.commit()

        in_memory_session.add(GroupMember(group_id=group.id, user_id=alice.id))
        with pytest.raises(IntegrityError):
            await in_memory_session.commit()


class TestMessageEntities:
    """Tests for Message, MessageReaction and MessageRead."""

    def test_message_defaults(self):
        message = Message(chat_id="c", sender_id="u", content="hi")

        assert message.type == MessageType.TEXT
        assert message.is_deleted is False
        assert message.media_url is None
        assert message.reply_to_message_id is None

    def test_message_type_values(self):
        assert [t.value for t in MessageType] == ["Text", "Image", "Video", "Audio", "Document", "Location"]

    async def test_reaction_is_unique_per_user_and_emoji(self, in_memory_session, two_users):
        alice, bob = two_users
        chat = Chat(user1_id=alice.id, user2_id=bob.id)
        message = Message(chat_id=chat.id, sender_id=alice.id, content="hi")
        in_memory_session.add_all([chat, message])
        await in_memory_session.commit()

        in_memory_session.add_all(
            [
                MessageReaction(message_id=message.id, user_id=bob.id, emoji="👍"),
                MessageReaction(message_id=message.id, user_id=bob.id, emoji="❤️"),
            ]
        )
        await in_memory_session.commit()

        in_memory_session.add(MessageReaction(message_id=message.id, user_id=bob.id, emoji="👍"))
        with pytest.raises(IntegrityError):
            await in_memory_session.commit()

    async def test_read_receipt_is_unique(self, in_memory_session, two_users):
        alice, bob = two_users
        chat = Chat(user1_id=alice.id, user2_id=bob.id)
        message = Message(chat_id=chat.id, sender_id=alice.id, content="hi")
        in_memory_session.add_all([chat, message])
        await in_memory_session.commit()

        in_memory_session.add(MessageRead(message_id=message.id, user_id=bob.id))
        await in_memory_session.commit()

        in_memory_session.add(MessageRead(message_id=message.id, user_id=bob.id))
        with pytest.raises(IntegrityError):
            await in_memory_session.commit()

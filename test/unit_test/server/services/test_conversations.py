"""Service tests for chats, groups and messages."""

from unittest.mock import AsyncMock, patch

import pytest

from parley.core.database.entities import GroupRole, MessageReaction, MessageType
from parley.core.errors import ForbiddenError, InvalidRequestError, NotFoundError
from parley.core.models.io import GroupCreate, MessageCreate
from parley.server.services.chats import ChatService
from parley.server.services.groups import GroupService
from parley.server.services.messages import MediaAttachment, MessageService

pytestmark = pytest.mark.asyncio


class TestChatService:
    async def test_list_orders_by_activity(self, repos, users):
        chats = ChatService(repos)
        messages = MessageService(repos)
        with_bob = await chats.get_or_create_chat(users.alice.id, users.bob.id)
        await chats.get_or_create_chat(users.alice.id, users.carol.id)

        await messages.create_message(users.bob.id, MessageCreate(chat_id=with_bob.id, content="ping"))
        listed = await chats.list_chats(users.alice.id)

        assert [c.other_user.username for c in listed] == ["bob", "carol"]
        assert listed[0].unread_count == 1

    async def test_open_chat_errors(self, repos, users):
        chats = ChatService(repos)

        with pytest.raises(InvalidRequestError):
            await chats.get_or_create_chat(users.alice.id, users.alice.id)
        with pytest.raises(NotFoundError):
            await chats.get_or_create_chat(users.alice.id, "ghost")


class TestGroupService:
    async def test_create_ignores_creator_and_duplicates(self, repos, users):
        group = await GroupService(repos).create_group(
            users.alice.id, GroupCreate(name="g", member_ids=[users.alice.id, users.bob.id, users.bob.id])
        )

        assert sorted((m.user.username, m.role) for m in group.members) == [
            ("alice", GroupRole.ADMIN),
            ("bob", GroupRole.MEMBER),
        ]

    async def test_admin_operations(self, repos, users):
        service = GroupService(repos)
        group = await service.create_group(users.alice.id, GroupCreate(name="g", member_ids=[users.bob.id]))

        with pytest.raises(ForbiddenError):
            await service.add_members(group.id, users.bob.id, [users.carol.id])
        with pytest.raises(ForbiddenError):
            await service.update_member_role(group.id, users.bob.id, users.alice.id, GroupRole.MEMBER)

        updated = await service.add_members(group.id, users.alice.id, [users.carol.id])
        promoted = await service.update_member_role(group.id, users.alice.id, users.carol.id, GroupRole.ADMIN)

        assert len(updated.members) == 3
        assert promoted.role == GroupRole.ADMIN
        assert set(await service.member_ids(group.id)) == {users.alice.id, users.bob.id, users.carol.id}

    async def test_remove_member(self, repos, users):
        service = GroupService(repos)
        group = await service.create_group(
            users.alice.id, GroupCreate(name="g", member_ids=[users.bob.id, users.carol.id])
        )

        with pytest.raises(ForbiddenError):
            await service.remove_member(group.id, users.bob.id, users.carol.id)
        await service.remove_member(group.id, users.bob.id, users.bob.id)
        await service.remove_member(group.id, users.alice.id, users.carol.id)

        assert await service.member_ids(group.id) == [users.alice.id]
        with pytest.raises(ForbiddenError):
            await service.get_group(group.id, users.bob.id)

    async def test_group_not_found(self, repos, users):
        with pytest.raises(NotFoundError):
            await GroupService(repos).get_group("missing", users.alice.id)


class TestMessageService:
    @pytest.fixture
    async def chat(self, repos, users):
        return await ChatService(repos).get_or_create_chat(users.alice.id, users.bob.id)

    async def test_create_updates_chat_activity(self, repos, users, chat):
        message = await MessageService(repos).create_message(
            users.alice.id, MessageCreate(chat_id=chat.id, content="hello")
        )

        stored_chat = await repos.chats.get_by_id(chat.id)
        assert stored_chat.last_message_at is not None
        assert message.sender_name == "alice"

    async def test_media_attachment_allows_empty_caption(self, repos, users, chat):
        media = MediaAttachment(url="/uploads/image/x.png", mime_type="image/png", file_name="x.png", size=3)

        message = await MessageService(repos).create_message(
            users.alice.id, MessageCreate(chat_id=chat.id, type=MessageType.IMAGE), media=media
        )

        assert message.media_url == "/uploads/image/x.png"
        assert message.media_size == 3

    async def test_history_marks_read(self, repos, users, chat):
        service = MessageService(repos)
        for text in ("a", "b"):
            await service.create_message(users.alice.id, MessageCreate(chat_id=chat.id, content=text))

        assert await repos.messages.count_unread(users.bob.id, chat_id=chat.id) == 2
        page = await service.get_chat_messages(chat.id, users.bob.id)

        assert [m.content for m in page] == ["a", "b"]
        assert await repos.messages.count_unread(users.bob.id, chat_id=chat.id) == 0

    async def test_concurrent_reaction_is_treated_as_applied(self, repos, users, chat):
        service = MessageService(repos)
        message = await service.create_message(users.alice.id, MessageCreate(chat_id=chat.id, content="hi"))
        bob_id = users.bob.id
        # a parallel toggle stores the reaction after this one looked for it
        await repos.reactions.create(MessageReaction(message_id=message.id, user_id=bob_id, emoji="👍"))

        with patch.object(repos.reactions, "get_reaction", AsyncMock(return_value=None)):
            shaped = await service.toggle_reaction(message.id, bob_id, "👍")

        assert [(r.user_id, r.user_name, r.emoji) for r in shaped.reactions] == [(bob_id, "bob", "👍")]
        assert len(await repos.reactions.get_message_reactions(message.id)) == 1

    async def test_mark_read_counts_new_receipts(self, repos, users, chat):
        service = MessageService(repos)
        await service.create_message(users.alice.id, MessageCreate(chat_id=chat.id, content="a"))

        assert await service.mark_chat_read(chat.id, users.bob.id) == 1
        assert await service.mark_chat_read(chat.id, users.bob.id) == 0

    async def test_get_message_checks_access(self, repos, users, chat):
        service = MessageService(repos)
        message = await service.create_message(users.alice.id, MessageCreate(chat_id=chat.id, content="secret"))

        assert (await service.get_message(message.id, users.bob.id)).content == "secret"
        with pytest.raises(ForbiddenError):
            await service.get_message(message.id, users.carol.id)

    async def test_deleted_message_is_gone(self, repos, users, chat):
        service = MessageService(repos)
        message = await service.create_message(users.alice.id, MessageCreate(chat_id=chat.id, content="x"))

        deleted = await service.delete_message(message.id, users.alice.id)

        assert deleted.is_deleted is True
        with pytest.raises(NotFoundError):
            await service.toggle_reaction(message.id, users.bob.id, "👍")

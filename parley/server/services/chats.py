"""
One-to-one chat listing and creation.
"""

from __future__ import annotations

import logging
from typing import List

from parley.core.database.entities import Chat, User
from parley.core.database.repositories import SqlRepoBundle
from parley.core.errors import InvalidRequestError, NotFoundError
from parley.core.models.io import ChatRead, UserRead

from .messages import build_message_read

logger = logging.getLogger(__name__)


class ChatService:
    """List and open one-to-one chats."""

    def __init__(self, repos: SqlRepoBundle) -> None:
        self.repos = repos

    async def _chat_read(self, chat: Chat, user_id: str, other: User) -> ChatRead:
        last = await self.repos.messages.get_last_message(chat_id=chat.id)
        return ChatRead(
            id=chat.id,
            other_user=UserRead.model_validate(other),
            last_message=await build_message_read(self.repos, last) if last is not None else None,
            unread_count=await self.repos.messages.count_unread(user_id, chat_id=chat.id),
            created_at=chat.created_at,
        )

    async def list_chats(self, user_id: str) -> List[ChatRead]:
        """List the caller's chats, most recently active first.

        Chats whose other participant no longer exists are left out.
        """
        chats = await self.repos.chats.get_user_chats(user_id)
        others = {u.id: u for u in await self.repos.users.get_many(c.other_user_id(user_id) for c in chats)}
        result = []
        for chat in chats:
            other = others.get(chat.other_user_id(user_id))
            if other is None:
                logger.warning(f"Skipping chat {chat.id}: other participant is gone")
                continue
            result.append(await self._chat_read(chat, user_id, other))
        return result

    async def get_or_create_chat(self, user_id: str, other_user_id: str) -> ChatRead:
        """Return the chat between the caller and another user, opening it if needed.

        Raises:
            InvalidRequestError: If the caller tries to chat with themselves.
            NotFoundError: If the other user does not exist.
        """
        if user_id == other_user_id:
            raise InvalidRequestError("You cannot open a chat with yourself")
        other = await self.repos.users.get_by_id(other_user_id)
        if other is None:
            raise NotFoundError("User", other_user_id)

        chat = await self.repos.chats.get_between(user_id, other_user_id)
        if chat is None:
            chat = await self.repos.chats.create(Chat(user1_id=user_id, user2_id=other_user_id))
            logger.info(f"Opened chat {chat.id} between {user_id} and {other_user_id}")
        return await self._chat_read(chat, user_id, other)

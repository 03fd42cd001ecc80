"""
Message, reaction and read-receipt repositories.

This module provides data access operations for messages posted to chats
and groups, the reactions left on them, and the per-user read receipts
used to compute unread counts.
"""

from __future__ import annotations

from typing import List, Optional, Set

from sqlalchemy import exists, func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from ..entities.messages import Message, MessageReaction, MessageRead
from .base import BaseRepository

MARK_READ_ATTEMPTS = 3


def _unread_clause(user_id: str):
    """Filter matching messages ``user_id`` still has to read.

    Covers non-deleted messages sent by someone else without a read receipt
    for ``user_id``.
    """
    has_receipt = exists().where(MessageRead.message_id == Message.id, MessageRead.user_id == user_id)
    return (Message.is_deleted == False) & (Message.sender_id != user_id) & ~has_receipt  # noqa: E712


def _conversation_clause(chat_id: Optional[str], group_id: Optional[str]):
    if chat_id is not None:
        return Message.chat_id == chat_id
    if group_id is not None:
        return Message.group_id == group_id
    raise ValueError("Either chat_id or group_id is required")


class MessageRepository(BaseRepository[Message]):
    """Repository for message data access operations using SQLModel."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Message)

    async def get_chat_messages(self, chat_id: str, skip: int = 0, take: int = 50) -> List[Message]:
        """Get a page of non-deleted chat messages, newest first.

        Args:
            chat_id: Chat id
            skip: Number of newest messages to skip
            take: Page size

        Returns:
            List of Message instances
        """
        return await self._page(Message.chat_id == chat_id, skip, take)

    async def get_group_messages(self, group_id: str, skip: int = 0, take: int = 50) -> List[Message]:
        """Get a page of non-deleted group messages, newest first."""
        return await self._page(Message.group_id == group_id, skip, take)

    async def _page(self, clause, skip: int, take: int) -> List[Message]:
        stmt = (
            select(Message)
            .where(clause, Message.is_deleted == False)  # noqa: E712
            .order_by(Message.created_at.desc())  # type: ignore
            .offset(skip)
            .limit(take)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_last_message(
        self, *, chat_id: Optional[str] = None, group_id: Optional[str] = None
    ) -> Optional[Message]:
        """Get the newest non-deleted message of a chat or group."""
        stmt = (
            select(Message)
            .where(_conversation_clause(chat_id, group_id), Message.is_deleted == False)  # noqa: E712
            .order_by(Message.created_at.desc())  # type: ignore
            .limit(1)
        )
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def count_unread(
        self, user_id: str, *, chat_id: Optional[str] = None, group_id: Optional[str] = None
    ) -> int:
        """Count messages of a chat or group that ``user_id`` has not read.

        Args:
            user_id: Reading user
            chat_id: Chat to count in
            group_id: Group to count in

        Returns:
            Number of unread messages
        """
        stmt = (
            select(func.count())
            .select_from(Message)
            .where(_conversation_clause(chat_id, group_id), _unread_clause(user_id))
        )
        result = await self.session.execute(stmt)
        return int(result.scalar_one())


class MessageReactionRepository(BaseRepository[MessageReaction]):
    """Repository for message reaction data access operations using SQLModel."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, MessageReaction)

    async def get_message_reactions(self, message_id: str) -> List[MessageReaction]:
        """Get all reactions on a message, oldest first."""
        stmt = (
            select(MessageReaction)
            .where(MessageReaction.message_id == message_id)
            .order_by(MessageReaction.created_at)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_reaction(self, message_id: str, user_id: str, emoji: str) -> Optional[MessageReaction]:
        """Get the reaction ``user_id`` left with ``emoji`` on a message."""
        stmt = select(MessageReaction).where(
            MessageReaction.message_id == message_id,
            MessageReaction.user_id == user_id,
            MessageReaction.emoji == emoji,
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()


class MessageReadRepository(BaseRepository[MessageRead]):
    """Repository for read receipts using SQLModel."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, MessageRead)

    async def mark_chat_read(self, chat_id: str, user_id: str) -> int:
        """Record every unread chat message as read by ``user_id``.

        Returns:
            Number of receipts written
        """
        return await self._mark_read(Message.chat_id == chat_id, user_id)

    async def mark_group_read(self, group_id: str, user_id: str) -> int:
        """Record every unread group message as read by ``user_id``."""
        return await self._mark_read(Message.group_id == group_id, user_id)

    async def _mark_read(self, clause, user_id: str) -> int:
        for _ in range(MARK_READ_ATTEMPTS):
            stmt = select(Message.id).where(clause, _unread_clause(user_id))
            result = await self.session.execute(stmt)
            message_ids = list(result.scalars().all())
            if not message_ids:
                return 0
            self.session.add_all([MessageRead(message_id=message_id, user_id=user_id) for message_id in message_ids])
            try:
                await self.session.commit()
            except IntegrityError:
                # a concurrent read of the same history wrote some receipts first
                await self.session.rollback()
                continue
            return len(message_ids)
        return 0

    async def get_read_message_ids(self, user_id: str, message_ids: List[str]) -> Set[str]:
        """Return the subset of ``message_ids`` that ``user_id`` has read."""
        if not message_ids:
            return set()
        stmt = select(MessageRead.message_id).where(
            MessageRead.user_id == user_id,
            MessageRead.message_id.in_(message_ids),  # type: ignore
        )
        result = await self.session.execute(stmt)
        return set(result.scalars().all())

    async def is_read(self, message_id: str, user_id: str) -> bool:
        stmt = select(MessageRead).where(MessageRead.message_id == message_id, MessageRead.user_id == user_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none() is not None

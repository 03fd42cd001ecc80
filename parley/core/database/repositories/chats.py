"""
One-to-one chat repository.
"""

from __future__ import annotations

from typing import List, Optional

from sqlalchemy import and_, func, or_
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from ..entities.chats import Chat
from .base import BaseRepository


class ChatRepository(BaseRepository[Chat]):
    """Repository for one-to-one chat data access operations using SQLModel."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Chat)

    async def get_between(self, user_id: str, other_user_id: str) -> Optional[Chat]:
        """Get the chat between two users, whichever of them opened it.

        Args:
            user_id: One participant
            other_user_id: The other participant

        Returns:
            Chat instance or None
        """
        stmt = select(Chat).where(
            or_(
                and_(Chat.user1_id == user_id, Chat.user2_id == other_user_id),
                and_(Chat.user1_id == other_user_id, Chat.user2_id == user_id),
            )
        )
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def get_user_chats(self, user_id: str) -> List[Chat]:
        """Get all chats of a user, most recently active first."""
        stmt = (
            select(Chat)
            .where(or_(Chat.user1_id == user_id, Chat.user2_id == user_id))
            .order_by(func.coalesce(Chat.last_message_at, Chat.created_at).desc(), Chat.created_at.desc())  # type: ignore
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    @staticmethod
    def is_participant(chat: Chat, user_id: str) -> bool:
        """Return True if ``user_id`` takes part in ``chat``."""
        return chat.has_participant(user_id)

"""
One-to-one chat entity.

A chat is the conversation between exactly two users. The pair is unique
regardless of which user opened it.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import UniqueConstraint
from sqlmodel import Field

from ..base import Base, new_id, utc_now


class Chat(Base, table=True):
    """Persistent one-to-one chat.

    Table: chats
    """

    __tablename__ = "chats"
    __table_args__ = (UniqueConstraint("user1_id", "user2_id", name="uq_chats_user_pair"),)

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)
    user1_id: str = Field(foreign_key="users.id", index=True, max_length=64)
    user2_id: str = Field(foreign_key="users.id", index=True, max_length=64)

    last_message_at: Optional[datetime] = Field(default=None, index=True)
    created_at: datetime = Field(default_factory=utc_now)

    def has_participant(self, user_id: str) -> bool:
        """Return True if ``user_id`` is one of the two chat participants."""
        return user_id in (self.user1_id, self.user2_id)

    def other_user_id(self, user_id: str) -> str:
        """Return the id of the participant that is not ``user_id``."""
        return self.user2_id if self.user1_id == user_id else self.user1_id

    def __repr__(self) -> str:
        return f"Chat(id={self.id}, user1_id={self.user1_id}, user2_id={self.user2_id})"

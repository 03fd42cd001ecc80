"""
Message entity models.

This module contains the message entity together with the per-user
reaction and read-receipt tables. A message belongs to exactly one chat or
one group; deleted messages are kept with ``is_deleted`` set.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Optional

from sqlalchemy import BigInteger, Column, Text, UniqueConstraint
from sqlmodel import Field

from ..base import Base, new_id, utc_now


class MessageType(str, Enum):
    """Kind of content carried by a message."""

    TEXT = "Text"
    IMAGE = "Image"
    VIDEO = "Video"
    AUDIO = "Audio"
    DOCUMENT = "Document"
    LOCATION = "Location"


class Message(Base, table=True):
    """A message posted to a chat or a group.

    Table: messages
    """

    __tablename__ = "messages"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)
    chat_id: Optional[str] = Field(default=None, foreign_key="chats.id", index=True, max_length=64)
    group_id: Optional[str] = Field(default=None, foreign_key="chat_groups.id", index=True, max_length=64)
    sender_id: str = Field(foreign_key="users.id", index=True, max_length=64)

    content: str = Field(default="", sa_column=Column(Text, nullable=False))
    type: MessageType = Field(default=MessageType.TEXT)

    media_url: Optional[str] = Field(default=None, max_length=1024)
    media_type: Optional[str] = Field(default=None, max_length=255)
    media_file_name: Optional[str] = Field(default=None, max_length=255)
    media_size: Optional[int] = Field(default=None, sa_column=Column(BigInteger, nullable=True))

    reply_to_message_id: Optional[str] = Field(default=None, max_length=64)
    is_deleted: bool = Field(default=False)

    created_at: datetime = Field(default_factory=utc_now, index=True)

    def __repr__(self) -> str:
        return f"Message(id={self.id}, sender_id={self.sender_id}, type={self.type})"


class MessageReaction(Base, table=True):
    """An emoji reaction left by a user on a message.

    Table: message_reactions
    """

    __tablename__ = "message_reactions"
    __table_args__ = (
        UniqueConstraint("message_id", "user_id", "emoji", name="uq_message_reactions_message_user_emoji"),
    )

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)
    message_id: str = Field(foreign_key="messages.id", index=True, max_length=64)
    user_id: str = Field(foreign_key="users.id", max_length=64)
    emoji: str = Field(max_length=32)
    created_at: datetime = Field(default_factory=utc_now)


class MessageRead(Base, table=True):
    """Read receipt: ``user_id`` has seen ``message_id``.

    Table: message_reads
    """

    __tablename__ = "message_reads"
    __table_args__ = (UniqueConstraint("message_id", "user_id", name="uq_message_reads_message_user"),)

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)
    message_id: str = Field(foreign_key="messages.id", index=True, max_length=64)
    user_id: str = Field(foreign_key="users.id", index=True, max_length=64)
    read_at: datetime = Field(default_factory=utc_now)

"""
Message I/O models for API requests and responses.

This module contains Pydantic-based I/O schemas for messages, reactions and
the reply-to preview embedded in a message.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from parley.core.database.entities.messages import MessageType


class ReactionRead(BaseModel):
    """Schema for reading a reaction from the API."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    user_name: str = Field(default="", description="Username of the reacting user")
    emoji: str


class ReactionCreate(BaseModel):
    """Schema for toggling a reaction on a message."""

    emoji: str = Field(min_length=1, max_length=32)


class MessageRead(BaseModel):
    """Schema for reading a message from the API and the hub."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    chat_id: Optional[str] = None
    group_id: Optional[str] = None
    sender_id: str
    sender_name: str = Field(default="", description="Username of the sender")
    sender_profile_picture: Optional[str] = Field(default=None, description="Avatar URL of the sender")
    content: str = ""
    type: MessageType = MessageType.TEXT
    media_url: Optional[str] = None
    media_type: Optional[str] = None
    media_file_name: Optional[str] = None
    media_size: Optional[int] = None
    reply_to_message_id: Optional[str] = None
    reply_to_message: Optional[MessageRead] = Field(default=None, description="One level of the replied message")
    reactions: List[ReactionRead] = Field(default_factory=list)
    created_at: datetime


class MessageCreate(BaseModel):
    """Schema for posting a message.

    Exactly one of ``chat_id`` or ``group_id`` names the target
    conversation; the service rejects anything else.
    """

    chat_id: Optional[str] = None
    group_id: Optional[str] = None
    content: str = Field(default="", max_length=10000)
    type: MessageType = MessageType.TEXT
    reply_to_message_id: Optional[str] = None


MessageRead.model_rebuild()

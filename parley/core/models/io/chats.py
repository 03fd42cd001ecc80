"""
One-to-one chat I/O models.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from .messages import MessageRead
from .users import UserRead


class ChatRead(BaseModel):
    """Schema for a chat as listed for one participant."""

    id: str
    other_user: UserRead = Field(description="The participant that is not the caller")
    last_message: Optional[MessageRead] = None
    unread_count: int = Field(default=0, ge=0)
    created_at: datetime

"""
Group I/O models for API requests and responses.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from parley.core.database.entities.groups import GroupRole

from .messages import MessageRead
from .users import UserRead


class GroupMemberRead(BaseModel):
    """Schema for reading a group member."""

    id: str
    user: UserRead
    role: GroupRole
    joined_at: datetime


class GroupRead(BaseModel):
    """Schema for a group as listed for one member."""

    id: str
    name: str
    description: Optional[str] = None
    profile_picture_url: Optional[str] = None
    members: List[GroupMemberRead] = Field(default_factory=list)
    last_message: Optional[MessageRead] = None
    unread_count: int = Field(default=0, ge=0)
    created_at: datetime


class GroupCreate(BaseModel):
    """Schema for creating a group.

    The creator joins as admin and does not need to be listed in
    ``member_ids``.
    """

    name: str = Field(max_length=100)
    description: Optional[str] = Field(default=None, max_length=500)
    member_ids: List[str] = Field(default_factory=list)

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Group name must not be blank")
        return value


class GroupMembersAdd(BaseModel):
    """Schema for adding members to a group."""

    member_ids: List[str] = Field(min_length=1)


class GroupRoleUpdate(BaseModel):
    """Schema for changing the role of a group member."""

    role: GroupRole

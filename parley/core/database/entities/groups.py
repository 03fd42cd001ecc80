"""
Group conversation entity models.

This module contains the group entity and its membership table. Each member
holds a role; admins can add, remove and promote members.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Optional

from sqlalchemy import UniqueConstraint
from sqlmodel import Field

from ..base import Base, new_id, utc_now


class GroupRole(str, Enum):
    """Role of a member inside a group."""

    MEMBER = "Member"
    ADMIN = "Admin"


class GroupBase(Base):
    """Base fields for group entity."""

    name: str = Field(max_length=100, description="Group display name")
    description: Optional[str] = Field(default=None, max_length=500, description="Group description")
    profile_picture_url: Optional[str] = Field(default=None, max_length=1024)


class Group(GroupBase, table=True):
    """Persistent group conversation.

    Table: chat_groups
    """

    __tablename__ = "chat_groups"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)
    created_by_id: str = Field(foreign_key="users.id", max_length=64)
    last_message_at: Optional[datetime] = Field(default=None, index=True)
    created_at: datetime = Field(default_factory=utc_now)

    def __repr__(self) -> str:
        return f"Group(id={self.id}, name={self.name})"


class GroupMember(Base, table=True):
    """Membership of a user in a group.

    Table: group_members
    """

    __tablename__ = "group_members"
    __table_args__ = (UniqueConstraint("group_id", "user_id", name="uq_group_members_group_user"),)

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)
    group_id: str = Field(foreign_key="chat_groups.id", index=True, max_length=64)
    user_id: str = Field(foreign_key="users.id", index=True, max_length=64)
    role: GroupRole = Field(default=GroupRole.MEMBER)
    joined_at: datetime = Field(default_factory=utc_now)

    def __repr__(self) -> str:
        return f"GroupMember(group_id={self.group_id}, user_id={self.user_id}, role={self.role})"

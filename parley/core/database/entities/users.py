"""
User and contact entity models.

This module contains the database entities for registered users and the
per-user contact list.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import UniqueConstraint
from sqlmodel import Field

from ..base import Base, new_id, utc_now


class UserBase(Base):
    """Base fields for user entity."""

    username: str = Field(max_length=50, description="Unique public handle")
    email: str = Field(max_length=255, description="Unique login email")
    profile_picture_url: Optional[str] = Field(default=None, max_length=1024)
    status: Optional[str] = Field(default=None, max_length=255, description="Free-form status line")


class User(UserBase, table=True):
    """Registered user.

    Table: users
    """

    __tablename__ = "users"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)
    username: str = Field(max_length=50, unique=True, index=True)
    email: str = Field(max_length=255, unique=True, index=True)
    password_hash: str = Field(max_length=255)

    is_online: bool = Field(default=False)
    last_seen: Optional[datetime] = Field(default=None)

    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now, sa_column_kwargs={"onupdate": utc_now})

    def __repr__(self) -> str:
        return f"User(id={self.id}, username={self.username})"


class Contact(Base, table=True):
    """One entry in a user's contact list.

    Contacts are directional: ``user_id`` saved ``contact_user_id``.

    Table: contacts
    """

    __tablename__ = "contacts"
    __table_args__ = (UniqueConstraint("user_id", "contact_user_id", name="uq_contacts_user_contact"),)

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)
    user_id: str = Field(foreign_key="users.id", index=True, max_length=64)
    contact_user_id: str = Field(foreign_key="users.id", max_length=64)
    display_name: Optional[str] = Field(default=None, max_length=100)
    created_at: datetime = Field(default_factory=utc_now)

    def __repr__(self) -> str:
        return f"Contact(user_id={self.user_id}, contact_user_id={self.contact_user_id})"

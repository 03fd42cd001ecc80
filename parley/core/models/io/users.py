"""
User I/O models for API requests and responses.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class UserRead(BaseModel):
    """Schema for reading a user from the API."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    username: str = Field(description="Public handle")
    email: str = Field(description="Login email")
    profile_picture_url: Optional[str] = Field(default=None, description="Avatar URL")
    status: Optional[str] = Field(default=None, description="Free-form status line")
    is_online: bool = Field(default=False, description="Whether the user holds a hub connection")
    last_seen: Optional[datetime] = Field(default=None, description="Last time the user was seen online")


class UserStatusUpdate(BaseModel):
    """Schema for updating the status line of the current user."""

    status: Optional[str] = Field(default=None, max_length=255)


class UserProfileUpdate(BaseModel):
    """Schema for updating the profile of the current user.

    Fields left out keep their current value.
    """

    username: Optional[str] = Field(default=None, min_length=3, max_length=50)
    profile_picture_url: Optional[str] = Field(default=None, max_length=1024)

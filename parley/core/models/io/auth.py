"""
Authentication I/O models for API requests and responses.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from .users import UserRead

EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"


class RegisterRequest(BaseModel):
    """Schema for registering a new account."""

    username: str = Field(min_length=3, max_length=50, description="Unique public handle")
    email: str = Field(pattern=EMAIL_PATTERN, max_length=255, description="Unique login email")
    password: str = Field(min_length=6, max_length=128, description="Plain-text password")


class LoginRequest(BaseModel):
    """Schema for logging in with email and password."""

    email: str = Field(min_length=1, description="Login email")
    password: str = Field(min_length=1, description="Plain-text password")


class AuthResponse(BaseModel):
    """Bearer token issued on register or login, with the user it belongs to."""

    token: str = Field(description="Signed JWT access token")
    user: UserRead

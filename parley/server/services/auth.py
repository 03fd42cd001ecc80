"""
Account registration and login.
"""

from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy.exc import IntegrityError

from parley.core.database.base import utc_now
from parley.core.database.entities import User
from parley.core.database.repositories import SqlRepoBundle
from parley.core.errors import AuthenticationError, ConflictError
from parley.core.models.io import AuthResponse, LoginRequest, RegisterRequest, UserRead
from parley.core.security import create_access_token, hash_password, verify_password
from parley.server.core.config import JWTConfig

logger = logging.getLogger(__name__)


class AuthService:
    """Create accounts and exchange credentials for access tokens."""

    def __init__(self, repos: SqlRepoBundle, jwt_config: Optional[JWTConfig] = None) -> None:
        self.repos = repos
        self.jwt_config = jwt_config

    def _auth_response(self, user: User) -> AuthResponse:
        token = create_access_token(user.id, user.username, user.email, config=self.jwt_config)
        return AuthResponse(token=token, user=UserRead.model_validate(user))

    async def register(self, request: RegisterRequest) -> AuthResponse:
        """Register a new account and log it in.

        Raises:
            ConflictError: If the email or the username is already in use.
        """
        if await self.repos.users.get_by_email(request.email) is not None:
            raise ConflictError("Email is already registered")
        if await self.repos.users.get_by_username(request.username) is not None:
            raise ConflictError(f"Username '{request.username}' is already taken")

        user = User(
            username=request.username,
            email=request.email,
            password_hash=hash_password(request.password),
        )
        try:
            user = await self.repos.users.create(user)
        except IntegrityError as e:
            await self.repos.users.session.rollback()
            raise ConflictError("Email or username is already in use") from e

        logger.info(f"Registered user {user.id} ({user.username})")
        return self._auth_response(user)

    async def login(self, request: LoginRequest) -> AuthResponse:
        """Check credentials, mark the user online and issue a token.

        Raises:
            AuthenticationError: If the email is unknown or the password is wrong.
        """
        user = await self.repos.users.get_by_email(request.email)
        if user is None or not verify_password(request.password, user.password_hash):
            logger.info("Rejected login attempt")
            raise AuthenticationError("Invalid email or password")

        user.is_online = True
        user.last_seen = utc_now()
        user = await self.repos.users.update(user)
        logger.info(f"User {user.id} logged in")
        return self._auth_response(user)

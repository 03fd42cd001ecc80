"""
User profile and presence service.
"""

from __future__ import annotations

import logging
from typing import Optional

from parley.core.database.base import utc_now
from parley.core.database.entities import User
from parley.core.database.repositories import SqlRepoBundle
from parley.core.errors import ConflictError, NotFoundError
from parley.core.models.io import UserProfileUpdate, UserRead, UserStatusUpdate

logger = logging.getLogger(__name__)


class UserService:
    """Read and update user profiles and online presence."""

    def __init__(self, repos: SqlRepoBundle) -> None:
        self.repos = repos

    async def _require_user(self, user_id: str) -> User:
        user = await self.repos.users.get_by_id(user_id)
        if user is None:
            raise NotFoundError("User", user_id)
        return user

    async def get_user(self, user_id: str) -> UserRead:
        """Get the public profile of a user.

        Raises:
            NotFoundError: If the user does not exist.
        """
        return UserRead.model_validate(await self._require_user(user_id))

    async def update_status(self, user_id: str, update: UserStatusUpdate) -> UserRead:
        """Replace the status line of a user."""
        user = await self._require_user(user_id)
        user.status = update.status
        user = await self.repos.users.update(user)
        return UserRead.model_validate(user)

    async def update_profile(self, user_id: str, update: UserProfileUpdate) -> UserRead:
        """Apply a partial profile update.

        Raises:
            ConflictError: If the requested username belongs to someone else.
        """
        user = await self._require_user(user_id)
        if update.username is not None and update.username != user.username:
            taken = await self.repos.users.get_by_username(update.username)
            if taken is not None and taken.id != user.id:
                raise ConflictError(f"Username '{update.username}' is already taken")
            user.username = update.username
        if update.profile_picture_url is not None:
            user.profile_picture_url = update.profile_picture_url
        user = await self.repos.users.update(user)
        logger.info(f"Updated profile of user {user.id}")
        return UserRead.model_validate(user)

    async def set_online(self, user_id: str, is_online: bool) -> Optional[User]:
        """Flip the presence flag of a user and stamp ``last_seen``.

        Returns:
            The updated user, or None if the user no longer exists.
        """
        user = await self.repos.users.get_by_id(user_id)
        if user is None:
            logger.warning(f"Presence update for unknown user {user_id}")
            return None
        user.is_online = is_online
        user.last_seen = utc_now()
        return await self.repos.users.update(user)

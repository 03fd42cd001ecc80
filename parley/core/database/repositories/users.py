"""
User and contact repositories.

This module provides data access operations for registered users, user
search and per-user contact lists.
"""

from __future__ import annotations

from typing import Iterable, List, Optional

from sqlalchemy import func, or_
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from ..base import utc_now
from ..entities.users import Contact, User
from .base import BaseRepository

LIKE_ESCAPE = "\\"


def _escape_like(term: str) -> str:
    """Make LIKE wildcards in a search term match literally."""
    for char in (LIKE_ESCAPE, "%", "_"):
        term = term.replace(char, LIKE_ESCAPE + char)
    return term


class UserRepository(BaseRepository[User]):
    """Repository for user data access operations using SQLModel."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, User)

    async def update(self, user: User) -> User:
        """Persist user changes, stamping ``updated_at``."""
        user.updated_at = utc_now()
        return await super().update(user)

    async def get_by_email(self, email: str) -> Optional[User]:
        """Get a user by email address (case-insensitive).

        Args:
            email: Email address

        Returns:
            User instance or None
        """
        stmt = select(User).where(func.lower(User.email) == email.lower())
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_username(self, username: str) -> Optional[User]:
        """Get a user by exact username."""
        stmt = select(User).where(User.username == username)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def search(self, term: str, exclude_user_id: Optional[str] = None, limit: int = 50) -> List[User]:
        """Search users by username or email substring.

        The match is case-insensitive and ``%``, ``_`` and ``\\`` in the term
        match literally. The searching user is excluded from the results.

        Args:
            term: Substring to look for
            exclude_user_id: User id to leave out of the results
            limit: Maximum number of users returned

        Returns:
            Matching users ordered by username
        """
        pattern = f"%{_escape_like(term.lower())}%"
        stmt = select(User).where(
            or_(
                func.lower(User.username).like(pattern, escape=LIKE_ESCAPE),
                func.lower(User.email).like(pattern, escape=LIKE_ESCAPE),
            )
        )
        if exclude_user_id:
            stmt = stmt.where(User.id != exclude_user_id)
        stmt = stmt.order_by(User.username).limit(limit)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_many(self, user_ids: Iterable[str]) -> List[User]:
        """Get all users whose id is in ``user_ids``."""
        ids = list(set(user_ids))
        if not ids:
            return []
        stmt = select(User).where(User.id.in_(ids))  # type: ignore
        result = await self.session.execute(stmt)
        return list(result.scalars().all())


class ContactRepository(BaseRepository[Contact]):
    """Repository for contact list data access operations using SQLModel."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Contact)

    async def get_user_contacts(self, user_id: str) -> List[Contact]:
        """Get every contact saved by ``user_id``, oldest first."""
        stmt = select(Contact).where(Contact.user_id == user_id).order_by(Contact.created_at)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_contact(self, user_id: str, contact_user_id: str) -> Optional[Contact]:
        """Get the contact entry ``user_id`` holds for ``contact_user_id``."""
        stmt = select(Contact).where(Contact.user_id == user_id, Contact.contact_user_id == contact_user_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

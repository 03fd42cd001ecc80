"""
Contact list and user search.
"""

from __future__ import annotations

import logging
from typing import List, Optional

from parley.core.database.entities import Contact
from parley.core.database.repositories import SqlRepoBundle
from parley.core.errors import ConflictError, InvalidRequestError, NotFoundError
from parley.core.models.io import UserRead

logger = logging.getLogger(__name__)


class ContactService:
    """Manage the contact list of a user."""

    def __init__(self, repos: SqlRepoBundle) -> None:
        self.repos = repos

    async def list_contacts(self, user_id: str) -> List[UserRead]:
        """List the users saved as contacts, in the order they were added."""
        contacts = await self.repos.contacts.get_user_contacts(user_id)
        users = {u.id: u for u in await self.repos.users.get_many(c.contact_user_id for c in contacts)}
        return [UserRead.model_validate(users[c.contact_user_id]) for c in contacts if c.contact_user_id in users]

    async def add_contact(self, user_id: str, contact_user_id: str, display_name: Optional[str] = None) -> UserRead:
        """Save another user as a contact.

        Raises:
            InvalidRequestError: If the target is the caller or does not exist.
            ConflictError: If the contact is already saved.
        """
        if contact_user_id == user_id:
            raise InvalidRequestError("You cannot add yourself as a contact")
        other = await self.repos.users.get_by_id(contact_user_id)
        if other is None:
            raise InvalidRequestError(f"User '{contact_user_id}' does not exist")
        if await self.repos.contacts.get_contact(user_id, contact_user_id) is not None:
            raise ConflictError("Contact already exists")

        await self.repos.contacts.create(
            Contact(user_id=user_id, contact_user_id=contact_user_id, display_name=display_name)
        )
        logger.debug(f"User {user_id} added contact {contact_user_id}")
        return UserRead.model_validate(other)

    async def remove_contact(self, user_id: str, contact_user_id: str) -> None:
        """Remove a saved contact.

        Raises:
            NotFoundError: If the contact is not in the list.
        """
        contact = await self.repos.contacts.get_contact(user_id, contact_user_id)
        if contact is None:
            raise NotFoundError("Contact", contact_user_id)
        await self.repos.contacts.delete(contact.id)

    async def search_users(self, user_id: str, query: str, limit: int = 50) -> List[UserRead]:
        """Find other users whose username or email contains ``query``.

        A blank query matches nothing.
        """
        query = query.strip()
        if not query:
            return []
        users = await self.repos.users.search(query, exclude_user_id=user_id, limit=limit)
        return [UserRead.model_validate(u) for u in users]

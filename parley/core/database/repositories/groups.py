"""
Group and group membership repositories.

This module provides data access operations for group conversations and
the role-carrying membership rows that decide who may read, post and
administer a group.
"""

from __future__ import annotations

from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from ..entities.groups import Group, GroupMember, GroupRole
from .base import BaseRepository


class GroupRepository(BaseRepository[Group]):
    """Repository for group data access operations using SQLModel."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Group)

    async def get_user_groups(self, user_id: str) -> List[Group]:
        """Get all groups ``user_id`` belongs to, most recently active first.

        Args:
            user_id: Member user id

        Returns:
            List of Group instances
        """
        stmt = (
            select(Group)
            .join(GroupMember, GroupMember.group_id == Group.id)  # type: ignore
            .where(GroupMember.user_id == user_id)
            .order_by(func.coalesce(Group.last_message_at, Group.created_at).desc(), Group.created_at.desc())  # type: ignore
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())


class GroupMemberRepository(BaseRepository[GroupMember]):
    """Repository for group membership data access operations using SQLModel."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, GroupMember)

    async def add_many(self, members: List[GroupMember]) -> List[GroupMember]:
        """Insert several memberships in one transaction."""
        self.session.add_all(members)
        await self.session.commit()
        for member in members:
            await self.session.refresh(member)
        return members

    async def get_member(self, group_id: str, user_id: str) -> Optional[GroupMember]:
        """Get the membership of ``user_id`` in ``group_id``."""
        stmt = select(GroupMember).where(GroupMember.group_id == group_id, GroupMember.user_id == user_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_group_members(self, group_id: str) -> List[GroupMember]:
        """Get all memberships of a group in join order."""
        stmt = select(GroupMember).where(GroupMember.group_id == group_id).order_by(GroupMember.joined_at)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def is_member(self, group_id: str, user_id: str) -> bool:
        return await self.get_member(group_id, user_id) is not None

    async def is_admin(self, group_id: str, user_id: str) -> bool:
        member = await self.get_member(group_id, user_id)
        return member is not None and member.role == GroupRole.ADMIN

"""
Group creation, listing and membership administration.

Only admins may add members or change roles. Members may remove
themselves; admins may remove anyone.
"""

from __future__ import annotations

import logging
from typing import Iterable, List

from parley.core.database.entities import Group, GroupMember, GroupRole
from parley.core.database.repositories import SqlRepoBundle
from parley.core.errors import ForbiddenError, NotFoundError
from parley.core.models.io import GroupCreate, GroupMemberRead, GroupRead, UserRead

from .access import load_group_for_member
from .messages import build_message_read

logger = logging.getLogger(__name__)


class GroupService:
    """Create groups and administer their members."""

    def __init__(self, repos: SqlRepoBundle) -> None:
        self.repos = repos

    async def _member_reads(self, members: List[GroupMember]) -> List[GroupMemberRead]:
        users = {u.id: u for u in await self.repos.users.get_many(m.user_id for m in members)}
        return [
            GroupMemberRead(id=m.id, user=UserRead.model_validate(users[m.user_id]), role=m.role, joined_at=m.joined_at)
            for m in members
            if m.user_id in users
        ]

    async def _group_read(self, group: Group, user_id: str) -> GroupRead:
        members = await self.repos.group_members.get_group_members(group.id)
        last = await self.repos.messages.get_last_message(group_id=group.id)
        return GroupRead(
            id=group.id,
            name=group.name,
            description=group.description,
            profile_picture_url=group.profile_picture_url,
            members=await self._member_reads(members),
            last_message=await build_message_read(self.repos, last) if last is not None else None,
            unread_count=await self.repos.messages.count_unread(user_id, group_id=group.id),
            created_at=group.created_at,
        )

    async def _require_existing_users(self, user_ids: Iterable[str]) -> List[str]:
        wanted = list(dict.fromkeys(user_ids))
        found = {u.id for u in await self.repos.users.get_many(wanted)}
        for user_id in wanted:
            if user_id not in found:
                raise NotFoundError("User", user_id)
        return wanted

    async def _require_admin(self, group_id: str, user_id: str) -> Group:
        group = await load_group_for_member(self.repos, group_id, user_id)
        if not await self.repos.group_members.is_admin(group_id, user_id):
            raise ForbiddenError("Only group admins can do this")
        return group

    async def list_groups(self, user_id: str) -> List[GroupRead]:
        """List the caller's groups, most recently active first."""
        groups = await self.repos.groups.get_user_groups(user_id)
        return [await self._group_read(g, user_id) for g in groups]

    async def get_group(self, group_id: str, user_id: str) -> GroupRead:
        group = await load_group_for_member(self.repos, group_id, user_id)
        return await self._group_read(group, user_id)

    async def create_group(self, user_id: str, request: GroupCreate) -> GroupRead:
        """Create a group with the caller as its admin.

        The caller's own id and duplicates in ``member_ids`` are ignored.

        Raises:
            NotFoundError: If a listed member does not exist.
        """
        member_ids = await self._require_existing_users(m for m in request.member_ids if m != user_id)
        group = await self.repos.groups.create(
            Group(name=request.name, description=request.description, created_by_id=user_id)
        )
        members = [GroupMember(group_id=group.id, user_id=user_id, role=GroupRole.ADMIN)]
        members += [GroupMember(group_id=group.id, user_id=m, role=GroupRole.MEMBER) for m in member_ids]
        await self.repos.group_members.add_many(members)
        logger.info(f"User {user_id} created group {group.id} with {len(members)} members")
        return await self._group_read(group, user_id)

    async def add_members(self, group_id: str, user_id: str, member_ids: List[str]) -> GroupRead:
        """Add users to a group as plain members; existing members are skipped.

        Raises:
            ForbiddenError: If the caller is not an admin of the group.
            NotFoundError: If the group or a listed user does not exist.
        """
        group = await self._require_admin(group_id, user_id)
        wanted = await self._require_existing_users(member_ids)
        current = {m.user_id for m in await self.repos.group_members.get_group_members(group_id)}
        new_members = [
            GroupMember(group_id=group_id, user_id=m, role=GroupRole.MEMBER) for m in wanted if m not in current
        ]
        if new_members:
            await self.repos.group_members.add_many(new_members)
            logger.info(f"Added {len(new_members)} members to group {group_id}")
        return await self._group_read(group, user_id)

    async def remove_member(self, group_id: str, user_id: str, member_user_id: str) -> None:
        """Remove a member from a group.

        Raises:
            ForbiddenError: If the caller is neither an admin nor the member itself.
            NotFoundError: If the group or the membership does not exist.
        """
        await load_group_for_member(self.repos, group_id, user_id)
        if member_user_id != user_id and not await self.repos.group_members.is_admin(group_id, user_id):
            raise ForbiddenError("Only group admins can remove other members")
        member = await self.repos.group_members.get_member(group_id, member_user_id)
        if member is None:
            raise NotFoundError("GroupMember", member_user_id)
        await self.repos.group_members.delete(member.id)
        logger.info(f"User {member_user_id} removed from group {group_id} by {user_id}")

    async def update_member_role(
        self, group_id: str, user_id: str, member_user_id: str, role: GroupRole
    ) -> GroupMemberRead:
        """Change the role of a group member.

        Raises:
            ForbiddenError: If the caller is not an admin of the group.
            NotFoundError: If the membership does not exist.
        """
        await self._require_admin(group_id, user_id)
        member = await self.repos.group_members.get_member(group_id, member_user_id)
        if member is None:
            raise NotFoundError("GroupMember", member_user_id)
        member.role = role
        member = await self.repos.group_members.update(member)
        return (await self._member_reads([member]))[0]

    async def member_ids(self, group_id: str) -> List[str]:
        """Ids of every member of a group."""
        return [m.user_id for m in await self.repos.group_members.get_group_members(group_id)]

"""
Group Endpoints.

Group creation, listing and membership administration. Membership changes
are pushed to connected members through the hub.
"""

from __future__ import annotations

from typing import List

from fastapi import APIRouter, Response, status

from parley.core.logging_config import get_logger
from parley.core.models.io import GroupCreate, GroupMemberRead, GroupMembersAdd, GroupRead, GroupRoleUpdate
from parley.server.services.deps import CurrentUserIdDep, GroupServiceDep, NotifierDep

logger = get_logger(__name__)

router = APIRouter(tags=["groups"])


@router.get(
    "",
    response_model=List[GroupRead],
    summary="List Groups",
    description="List the groups the authenticated user belongs to, most recently active first.",
)
async def list_groups(user_id: CurrentUserIdDep, service: GroupServiceDep) -> List[GroupRead]:
    """List groups with members, last message and unread count."""
    return await service.list_groups(user_id)


@router.post(
    "",
    response_model=GroupRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create Group",
    description="Create a group with the caller as admin. Every connected member receives a GroupCreated event.",
    responses={
        201: {"description": "Group created"},
        404: {"description": "A listed member does not exist"},
        422: {"description": "Blank group name"},
    },
)
async def create_group(
    request: GroupCreate, user_id: CurrentUserIdDep, service: GroupServiceDep, notifier: NotifierDep
) -> GroupRead:
    """
    Create a group.

    - **name**: Group name, must not be blank.
    - **description**: Optional description.
    - **member_ids**: Users to add as members. The caller is added as admin automatically.
    """
    group = await service.create_group(user_id, request)
    await notifier.group_created(group)
    return group


@router.post(
    "/{group_id}/members",
    response_model=GroupRead,
    summary="Add Members",
    description="Add users to a group. Only admins may add members; existing members are skipped.",
    responses={
        200: {"description": "Members added"},
        403: {"description": "Caller is not an admin of the group"},
        404: {"description": "Group or user not found"},
    },
)
async def add_members(
    group_id: str, request: GroupMembersAdd, user_id: CurrentUserIdDep, service: GroupServiceDep
) -> GroupRead:
    """
    Add members to a group.

    - **member_ids**: Users to add.
    """
    return await service.add_members(group_id, user_id, request.member_ids)


@router.delete(
    "/{group_id}/members/{member_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Remove Member",
    description=(
        "Remove a member from a group. Admins may remove anyone, members may remove themselves. "
        "The removed user and the other members receive a GroupMemberRemoved event."
    ),
    responses={
        204: {"description": "Member removed"},
        403: {"description": "Caller may not remove this member"},
        404: {"description": "Group or membership not found"},
    },
)
async def remove_member(
    group_id: str, member_id: str, user_id: CurrentUserIdDep, service: GroupServiceDep, notifier: NotifierDep
) -> Response:
    """
    Remove a group member.

    - **member_id**: User id of the member to remove.
    """
    await service.remove_member(group_id, user_id, member_id)
    remaining = await service.member_ids(group_id)
    await notifier.group_member_removed(group_id, member_id, [member_id, *remaining])
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.put(
    "/{group_id}/members/{member_id}/role",
    response_model=GroupMemberRead,
    summary="Update Member Role",
    description="Promote or demote a group member. Only admins may change roles.",
    responses={
        200: {"description": "Role updated"},
        403: {"description": "Caller is not an admin of the group"},
        404: {"description": "Group or membership not found"},
    },
)
async def update_member_role(
    group_id: str, member_id: str, request: GroupRoleUpdate, user_id: CurrentUserIdDep, service: GroupServiceDep
) -> GroupMemberRead:
    """
    Change a member's role.

    - **role**: `Admin` or `Member`.
    """
    return await service.update_member_role(group_id, user_id, member_id, request.role)

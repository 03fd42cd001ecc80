"""
User Endpoints.

Profile, status, user search and contact list of the authenticated user.
"""

from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Query, Response, status

from parley.core.logging_config import get_logger
from parley.core.models.io import UserProfileUpdate, UserRead, UserStatusUpdate
from parley.server.services.deps import ContactServiceDep, CurrentUserIdDep, UserServiceDep

logger = get_logger(__name__)

router = APIRouter(tags=["users"])


@router.get(
    "/me",
    response_model=UserRead,
    summary="Get Current User",
    description="Retrieve the profile of the authenticated user.",
    responses={
        200: {"description": "Current user"},
        401: {"description": "Missing or invalid bearer token"},
        404: {"description": "The token's user no longer exists"},
    },
)
async def get_me(user_id: CurrentUserIdDep, service: UserServiceDep) -> UserRead:
    """Get the profile of the authenticated user."""
    return await service.get_user(user_id)


@router.put(
    "/me/status",
    response_model=UserRead,
    summary="Update Status",
    description="Replace the free-form status line of the authenticated user.",
)
async def update_status(update: UserStatusUpdate, user_id: CurrentUserIdDep, service: UserServiceDep) -> UserRead:
    """
    Update the status line.

    - **status**: New status text, or null to clear it.
    """
    return await service.update_status(user_id, update)


@router.put(
    "/me/profile",
    response_model=UserRead,
    summary="Update Profile",
    description="Change the username and/or profile picture of the authenticated user.",
    responses={
        200: {"description": "Profile updated"},
        409: {"description": "Username already taken"},
    },
)
async def update_profile(
    update: UserProfileUpdate, user_id: CurrentUserIdDep, service: UserServiceDep
) -> UserRead:
    """
    Update the profile.

    - **username**: New unique username (optional).
    - **profile_picture_url**: New avatar URL (optional).
    """
    return await service.update_profile(user_id, update)


@router.get(
    "/search",
    response_model=List[UserRead],
    summary="Search Users",
    description="Find other users whose username or email contains the query, case-insensitively.",
)
async def search_users(
    user_id: CurrentUserIdDep,
    service: ContactServiceDep,
    query: str = Query(default="", max_length=100, description="Substring to search for"),
) -> List[UserRead]:
    """
    Search users.

    The authenticated user is never part of the results. A blank query returns an empty list.
    """
    return await service.search_users(user_id, query)


@router.get(
    "/contacts",
    response_model=List[UserRead],
    summary="List Contacts",
    description="List the users saved in the contact list of the authenticated user.",
)
async def list_contacts(user_id: CurrentUserIdDep, service: ContactServiceDep) -> List[UserRead]:
    """List contacts in the order they were added."""
    return await service.list_contacts(user_id)


@router.post(
    "/contacts/{contact_user_id}",
    response_model=UserRead,
    status_code=status.HTTP_201_CREATED,
    summary="Add Contact",
    description="Save another user in the contact list.",
    responses={
        201: {"description": "Contact added"},
        400: {"description": "Cannot add yourself or a missing user"},
        409: {"description": "Contact already exists"},
    },
)
async def add_contact(
    contact_user_id: str,
    user_id: CurrentUserIdDep,
    service: ContactServiceDep,
    display_name: Optional[str] = Query(default=None, max_length=100),
) -> UserRead:
    """
    Add a contact.

    - **contact_user_id**: Id of the user to save.
    - **display_name**: Optional local nickname for the contact.
    """
    return await service.add_contact(user_id, contact_user_id, display_name)


@router.delete(
    "/contacts/{contact_user_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Remove Contact",
    description="Remove a user from the contact list.",
    responses={
        204: {"description": "Contact removed"},
        404: {"description": "Contact not in the list"},
    },
)
async def remove_contact(contact_user_id: str, user_id: CurrentUserIdDep, service: ContactServiceDep) -> Response:
    """Remove a contact."""
    await service.remove_contact(user_id, contact_user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

"""
Chat Endpoints.

One-to-one chats of the authenticated user.
"""

from __future__ import annotations

from typing import List

from fastapi import APIRouter

from parley.core.logging_config import get_logger
from parley.core.models.io import ChatRead
from parley.server.services.deps import ChatServiceDep, CurrentUserIdDep

logger = get_logger(__name__)

router = APIRouter(tags=["chats"])


@router.get(
    "",
    response_model=List[ChatRead],
    summary="List Chats",
    description="List the one-to-one chats of the authenticated user, most recently active first.",
    response_description="Chats with the other participant, last message and unread count.",
)
async def list_chats(user_id: CurrentUserIdDep, service: ChatServiceDep) -> List[ChatRead]:
    """
    List chats.

    Each entry carries the other participant, the newest message and the number of
    messages the caller has not read yet.
    """
    return await service.list_chats(user_id)


@router.post(
    "/with/{other_user_id}",
    response_model=ChatRead,
    summary="Open Chat",
    description="Return the chat with another user, creating it on first contact.",
    responses={
        200: {"description": "Existing or newly created chat"},
        400: {"description": "Cannot chat with yourself"},
        404: {"description": "Other user not found"},
    },
)
async def get_or_create_chat(other_user_id: str, user_id: CurrentUserIdDep, service: ChatServiceDep) -> ChatRead:
    """
    Open a chat.

    - **other_user_id**: Id of the user to chat with.
    """
    return await service.get_or_create_chat(user_id, other_user_id)

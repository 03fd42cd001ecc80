"""
Message Endpoints.

Conversation history, posting, reactions and deletion. Every change is
broadcast to the conversation's hub room.
"""

from __future__ import annotations

from typing import List

from fastapi import APIRouter, Query, Response, status

from parley.core.logging_config import get_logger
from parley.core.models.io import MessageCreate, MessageRead, ReactionCreate
from parley.server.services.deps import CurrentUserIdDep, MessageServiceDep, NotifierDep

logger = get_logger(__name__)

router = APIRouter(tags=["messages"])


@router.get(
    "/chat/{chat_id}",
    response_model=List[MessageRead],
    summary="Get Chat Messages",
    description="Page through a chat's history. Marks the chat read for the caller.",
    responses={
        200: {"description": "A page of messages, oldest first"},
        403: {"description": "Caller is not a participant"},
        404: {"description": "Chat not found"},
    },
)
async def get_chat_messages(
    chat_id: str,
    user_id: CurrentUserIdDep,
    service: MessageServiceDep,
    skip: int = Query(default=0, ge=0, description="Number of newest messages to skip"),
    take: int = Query(default=50, ge=1, le=200, description="Page size"),
) -> List[MessageRead]:
    """
    Get chat messages.

    Pages count back from the newest message; each page is returned oldest first.
    """
    return await service.get_chat_messages(chat_id, user_id, skip, take)


@router.get(
    "/group/{group_id}",
    response_model=List[MessageRead],
    summary="Get Group Messages",
    description="Page through a group's history. Marks the group read for the caller.",
    responses={
        200: {"description": "A page of messages, oldest first"},
        403: {"description": "Caller is not a member"},
        404: {"description": "Group not found"},
    },
)
async def get_group_messages(
    group_id: str,
    user_id: CurrentUserIdDep,
    service: MessageServiceDep,
    skip: int = Query(default=0, ge=0),
    take: int = Query(default=50, ge=1, le=200),
) -> List[MessageRead]:
    """Get group messages, paged like chat messages."""
    return await service.get_group_messages(group_id, user_id, skip, take)


@router.post(
    "",
    response_model=MessageRead,
    status_code=status.HTTP_201_CREATED,
    summary="Send Message",
    description="Post a message to a chat or a group and broadcast it to the conversation's room.",
    responses={
        201: {"description": "Message created"},
        400: {"description": "Missing or ambiguous target, or empty text"},
        403: {"description": "Caller may not post in the conversation"},
        404: {"description": "Conversation or replied message not found"},
    },
)
async def send_message(
    request: MessageCreate, user_id: CurrentUserIdDep, service: MessageServiceDep, notifier: NotifierDep
) -> MessageRead:
    """
    Send a message.

    - **chat_id** / **group_id**: Exactly one target conversation.
    - **content**: Message text.
    - **type**: Message type, `Text` by default.
    - **reply_to_message_id**: Optional message being replied to.
    """
    message = await service.create_message(user_id, request)
    await notifier.message_created(message)
    return message


@router.post(
    "/{message_id}/reaction",
    response_model=MessageRead,
    summary="Toggle Reaction",
    description="Add an emoji reaction, or remove it if the caller already reacted with the same emoji.",
)
async def toggle_reaction(
    message_id: str,
    request: ReactionCreate,
    user_id: CurrentUserIdDep,
    service: MessageServiceDep,
    notifier: NotifierDep,
) -> MessageRead:
    """
    Toggle a reaction.

    - **emoji**: The reaction emoji.
    """
    message = await service.toggle_reaction(message_id, user_id, request.emoji)
    await notifier.reaction_updated(message)
    return message


@router.delete(
    "/{message_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete Message",
    description="Soft-delete a message. Only its sender may delete it.",
    responses={
        204: {"description": "Message deleted"},
        403: {"description": "Caller is not the sender"},
        404: {"description": "Message not found"},
    },
)
async def delete_message(
    message_id: str, user_id: CurrentUserIdDep, service: MessageServiceDep, notifier: NotifierDep
) -> Response:
    """Delete a message and broadcast MessageDeleted to its room."""
    message = await service.delete_message(message_id, user_id)
    await notifier.message_deleted(message.id, message.chat_id, message.group_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

"""
Media Endpoints.

Multipart file upload posted as a media message.
"""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, File, Form, UploadFile, status

from parley.core.logging_config import get_logger
from parley.core.models.io import MessageRead
from parley.server.services.deps import CurrentUserIdDep, MediaServiceDep, NotifierDep

logger = get_logger(__name__)

router = APIRouter(tags=["media"])


@router.post(
    "/upload",
    response_model=MessageRead,
    status_code=status.HTTP_201_CREATED,
    summary="Upload Media",
    description=(
        "Upload a file to a chat or group. The file type decides the message type "
        "(image, video, audio, otherwise document). The message is broadcast to the conversation's room."
    ),
    responses={
        201: {"description": "File stored and message created"},
        400: {"description": "Empty or oversized file, or missing/ambiguous target"},
        403: {"description": "Caller may not post in the conversation"},
    },
)
async def upload_media(
    user_id: CurrentUserIdDep,
    service: MediaServiceDep,
    notifier: NotifierDep,
    file: UploadFile = File(..., description="File to upload"),
    chat_id: Optional[str] = Form(default=None),
    group_id: Optional[str] = Form(default=None),
    reply_to_message_id: Optional[str] = Form(default=None),
) -> MessageRead:
    """
    Upload a media file.

    - **file**: The file.
    - **chat_id** / **group_id**: Exactly one target conversation.
    - **reply_to_message_id**: Optional message being replied to.
    """
    try:
        message = await service.store_upload(
            user_id,
            file.file,
            file_name=file.filename,
            content_type=file.content_type,
            chat_id=chat_id or None,
            group_id=group_id or None,
            reply_to_message_id=reply_to_message_id or None,
        )
    finally:
        await file.close()
    await notifier.message_created(message)
    return message

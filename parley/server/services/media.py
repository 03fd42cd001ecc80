"""
Media upload storage.

Uploaded files are written under ``MEDIA_ROOT/<kind>/`` and posted as a
message whose content is the original file name. The files are served by
the application under ``/uploads``.
"""

from __future__ import annotations

import logging
import re
import shutil
import uuid
from pathlib import Path
from typing import BinaryIO, Optional

from parley.core.database.entities import MessageType
from parley.core.errors import InvalidRequestError
from parley.core.models.io import MessageCreate, MessageRead
from parley.server.core.config import MediaConfig
from parley.server.core.constant import UPLOADS_URL_PATH

from .messages import MediaAttachment, MessageService

logger = logging.getLogger(__name__)

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]+")


def classify_media(content_type: Optional[str]) -> MessageType:
    """Map a MIME type to the message type it is posted as."""
    mt = (content_type or "").lower()
    if mt.startswith("image/"):
        return MessageType.IMAGE
    if mt.startswith("video/"):
        return MessageType.VIDEO
    if mt.startswith("audio/"):
        return MessageType.AUDIO
    return MessageType.DOCUMENT


def safe_file_name(file_name: Optional[str]) -> str:
    """Reduce a client-supplied file name to a safe basename."""
    name = Path(file_name or "").name
    name = _UNSAFE_CHARS.sub("_", name).strip("._")
    return name or "file"


class MediaService:
    """Store uploaded files and post them as messages."""

    def __init__(self, messages: MessageService, config: MediaConfig) -> None:
        self.messages = messages
        self.config = config

    async def store_upload(
        self,
        user_id: str,
        stream: BinaryIO,
        *,
        file_name: Optional[str],
        content_type: Optional[str],
        chat_id: Optional[str] = None,
        group_id: Optional[str] = None,
        reply_to_message_id: Optional[str] = None,
    ) -> MessageRead:
        """Write an uploaded file to disk and post it to a conversation.

        Args:
            user_id: Uploading user
            stream: Readable binary file object
            file_name: Original client file name
            content_type: Declared MIME type
            chat_id: Target chat
            group_id: Target group
            reply_to_message_id: Optional replied message

        Returns:
            The created message

        Raises:
            InvalidRequestError: If the file is empty or too large, or the
                target conversation is missing or ambiguous.
        """
        if (chat_id is None) == (group_id is None):
            raise InvalidRequestError("Exactly one of chat_id or group_id is required")

        message_type = classify_media(content_type)
        kind = message_type.value.lower()
        original_name = Path(file_name or "").name or "file"
        stored_name = f"{uuid.uuid4().hex}_{safe_file_name(file_name)}"
        target_dir = Path(self.config.root) / kind
        target_dir.mkdir(parents=True, exist_ok=True)
        dest = target_dir / stored_name

        with dest.open("wb") as out:
            shutil.copyfileobj(stream, out)
        size = dest.stat().st_size

        try:
            if size == 0:
                raise InvalidRequestError("Uploaded file is empty")
            if size > self.config.max_file_size:
                raise InvalidRequestError(
                    f"Uploaded file exceeds the maximum size of {self.config.max_file_size} bytes"
                )
            media = MediaAttachment(
                url=f"{UPLOADS_URL_PATH}/{kind}/{stored_name}",
                mime_type=content_type or "application/octet-stream",
                file_name=original_name,
                size=size,
            )
            request = MessageCreate(
                chat_id=chat_id,
                group_id=group_id,
                content=original_name,
                type=message_type,
                reply_to_message_id=reply_to_message_id,
            )
            message = await self.messages.create_message(user_id, request, media=media)
        except Exception:
            dest.unlink(missing_ok=True)
            raise

        logger.info(f"Stored {kind} upload {stored_name} ({size} bytes) for user {user_id}")
        return message

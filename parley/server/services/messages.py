"""
Message posting, history, reactions and read receipts.

Messages are shaped into ``MessageRead`` with the sender's name and
picture, the reactions with their users' names and one level of the
replied message. The same shape is broadcast over the hub.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional

from sqlalchemy.exc import IntegrityError

from parley.core.database.base import utc_now
from parley.core.database.entities import Message, MessageReaction, MessageType
from parley.core.database.repositories import SqlRepoBundle
from parley.core.errors import ForbiddenError, InvalidRequestError, NotFoundError
from parley.core.models.io import MessageCreate, MessageRead, ReactionRead

from .access import load_chat_for_user, load_group_for_member

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MediaAttachment:
    """Stored file attached to a message."""

    url: str
    mime_type: str
    file_name: str
    size: int


async def build_message_read(repos: SqlRepoBundle, message: Message, *, include_reply: bool = True) -> MessageRead:
    """Shape a message entity for the API and the hub.

    Args:
        repos: Repository bundle used to resolve users and reactions
        message: Message entity
        include_reply: Whether to embed the replied message

    Returns:
        MessageRead with sender, reactions and reply resolved
    """
    reactions = await repos.reactions.get_message_reactions(message.id)
    user_ids = {message.sender_id} | {r.user_id for r in reactions}
    users = {u.id: u for u in await repos.users.get_many(user_ids)}
    sender = users.get(message.sender_id)

    reply_to: Optional[MessageRead] = None
    if include_reply and message.reply_to_message_id:
        replied = await repos.messages.get_by_id(message.reply_to_message_id)
        if replied is not None:
            reply_to = await build_message_read(repos, replied, include_reply=False)

    return MessageRead(
        id=message.id,
        chat_id=message.chat_id,
        group_id=message.group_id,
        sender_id=message.sender_id,
        sender_name=sender.username if sender else "",
        sender_profile_picture=sender.profile_picture_url if sender else None,
        content=message.content,
        type=message.type,
        media_url=message.media_url,
        media_type=message.media_type,
        media_file_name=message.media_file_name,
        media_size=message.media_size,
        reply_to_message_id=message.reply_to_message_id,
        reply_to_message=reply_to,
        reactions=[
            ReactionRead(
                id=r.id,
                user_id=r.user_id,
                user_name=users[r.user_id].username if r.user_id in users else "",
                emoji=r.emoji,
            )
            for r in reactions
        ],
        created_at=message.created_at,
    )


class MessageService:
    """Post and read messages in chats and groups."""

    def __init__(self, repos: SqlRepoBundle) -> None:
        self.repos = repos

    async def _check_access(self, message: Message, user_id: str) -> None:
        if message.chat_id is not None:
            await load_chat_for_user(self.repos, message.chat_id, user_id)
        elif message.group_id is not None:
            await load_group_for_member(self.repos, message.group_id, user_id)

    async def _require_message(self, message_id: str) -> Message:
        message = await self.repos.messages.get_by_id(message_id)
        if message is None or message.is_deleted:
            raise NotFoundError("Message", message_id)
        return message

    async def _shape_page(self, messages: List[Message]) -> List[MessageRead]:
        # repositories page newest first; clients render oldest first
        return [await build_message_read(self.repos, m) for m in reversed(messages)]

    async def get_chat_messages(self, chat_id: str, user_id: str, skip: int = 0, take: int = 50) -> List[MessageRead]:
        """Get a page of chat history and mark the chat read for the caller.

        Args:
            chat_id: Chat id
            user_id: Calling user
            skip: Number of newest messages to skip
            take: Page size

        Returns:
            The page, oldest message first

        Raises:
            NotFoundError: If the chat does not exist.
            ForbiddenError: If the caller is not a participant.
        """
        await load_chat_for_user(self.repos, chat_id, user_id)
        page = await self._shape_page(await self.repos.messages.get_chat_messages(chat_id, skip, take))
        await self.repos.reads.mark_chat_read(chat_id, user_id)
        return page

    async def get_group_messages(
        self, group_id: str, user_id: str, skip: int = 0, take: int = 50
    ) -> List[MessageRead]:
        """Get a page of group history and mark the group read for the caller."""
        await load_group_for_member(self.repos, group_id, user_id)
        page = await self._shape_page(await self.repos.messages.get_group_messages(group_id, skip, take))
        await self.repos.reads.mark_group_read(group_id, user_id)
        return page

    async def create_message(
        self, user_id: str, request: MessageCreate, media: Optional[MediaAttachment] = None
    ) -> MessageRead:
        """Post a message to a chat or a group.

        Raises:
            InvalidRequestError: If the target is missing or ambiguous, a text
                message is blank, or the replied message is in another
                conversation.
            NotFoundError: If the conversation or replied message does not exist.
            ForbiddenError: If the caller may not post there.
        """
        if (request.chat_id is None) == (request.group_id is None):
            raise InvalidRequestError("Exactly one of chat_id or group_id is required")
        if media is None and request.type == MessageType.TEXT and not request.content.strip():
            raise InvalidRequestError("Message content must not be empty")

        if request.chat_id is not None:
            conversation = await load_chat_for_user(self.repos, request.chat_id, user_id)
        else:
            conversation = await load_group_for_member(self.repos, request.group_id, user_id)

        if request.reply_to_message_id:
            replied = await self._require_message(request.reply_to_message_id)
            if replied.chat_id != request.chat_id or replied.group_id != request.group_id:
                raise InvalidRequestError("Replied message belongs to another conversation")

        message = Message(
            chat_id=request.chat_id,
            group_id=request.group_id,
            sender_id=user_id,
            content=request.content,
            type=request.type,
            reply_to_message_id=request.reply_to_message_id,
        )
        if media is not None:
            message.media_url = media.url
            message.media_type = media.mime_type
            message.media_file_name = media.file_name
            message.media_size = media.size
        message = await self.repos.messages.create(message)

        conversation.last_message_at = message.created_at
        if request.chat_id is not None:
            await self.repos.chats.update(conversation)
        else:
            await self.repos.groups.update(conversation)

        logger.debug(f"User {user_id} posted message {message.id}")
        return await build_message_read(self.repos, message)

    async def get_message(self, message_id: str, user_id: str) -> MessageRead:
        """Get one message the caller may see."""
        message = await self._require_message(message_id)
        await self._check_access(message, user_id)
        return await build_message_read(self.repos, message)

    async def toggle_reaction(self, message_id: str, user_id: str, emoji: str) -> MessageRead:
        """Add a reaction, or remove it if the caller already left the same emoji.

        Returns:
            The message with its updated reactions
        """
        message = await self._require_message(message_id)
        await self._check_access(message, user_id)

        existing = await self.repos.reactions.get_reaction(message_id, user_id, emoji)
        if existing is not None:
            await self.repos.reactions.delete(existing.id)
        else:
            try:
                await self.repos.reactions.create(MessageReaction(message_id=message_id, user_id=user_id, emoji=emoji))
            except IntegrityError:
                # a concurrent toggle stored the same reaction first
                await self.repos.reactions.session.rollback()
                logger.debug(f"Reaction {emoji!r} by {user_id} on {message_id} already stored")
                message = await self._require_message(message_id)
        return await build_message_read(self.repos, message)

    async def delete_message(self, message_id: str, user_id: str) -> Message:
        """Soft-delete a message posted by the caller.

        Returns:
            The deleted message entity, so callers can address its room

        Raises:
            NotFoundError: If the message does not exist or is already deleted.
            ForbiddenError: If the caller is not the sender.
        """
        message = await self._require_message(message_id)
        if message.sender_id != user_id:
            raise ForbiddenError("Only the sender can delete a message")
        message.is_deleted = True
        message = await self.repos.messages.update(message)
        logger.info(f"User {user_id} deleted message {message_id}")
        return message

    async def mark_chat_read(self, chat_id: str, user_id: str) -> int:
        await load_chat_for_user(self.repos, chat_id, user_id)
        return await self.repos.reads.mark_chat_read(chat_id, user_id)

    async def mark_group_read(self, group_id: str, user_id: str) -> int:
        await load_group_for_member(self.repos, group_id, user_id)
        return await self.repos.reads.mark_group_read(group_id, user_id)


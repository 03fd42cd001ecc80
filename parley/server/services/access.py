"""
Conversation access checks shared by the chat, group and message services
and by the hub.
"""

from __future__ import annotations

from parley.core.database.entities import Chat, Group
from parley.core.database.repositories import SqlRepoBundle
from parley.core.errors import ForbiddenError, NotFoundError


async def load_chat_for_user(repos: SqlRepoBundle, chat_id: str, user_id: str) -> Chat:
    """Load a chat the user takes part in.

    Raises:
        NotFoundError: If the chat does not exist.
        ForbiddenError: If the user is not one of its participants.
    """
    chat = await repos.chats.get_by_id(chat_id)
    if chat is None:
        raise NotFoundError("Chat", chat_id)
    if not repos.chats.is_participant(chat, user_id):
        raise ForbiddenError("You are not a participant of this chat")
    return chat


async def load_group_for_member(repos: SqlRepoBundle, group_id: str, user_id: str) -> Group:
    """Load a group the user is a member of.

    Raises:
        NotFoundError: If the group does not exist.
        ForbiddenError: If the user is not a member.
    """
    group = await repos.groups.get_by_id(group_id)
    if group is None:
        raise NotFoundError("Group", group_id)
    if not await repos.group_members.is_member(group_id, user_id):
        raise ForbiddenError("You are not a member of this group")
    return group

"""
Broadcast facade used by the HTTP routes.
"""

from __future__ import annotations

import logging
from typing import Iterable, Optional

from fastapi import Depends

from parley.core.models.io import GroupRead, MessageRead

from . import events
from .manager import ConnectionManager, get_connection_manager

logger = logging.getLogger(__name__)


def conversation_room(chat_id: Optional[str], group_id: Optional[str]) -> Optional[str]:
    """Room a message of a chat or group is broadcast to."""
    if chat_id is not None:
        return events.chat_room(chat_id)
    if group_id is not None:
        return events.group_room(group_id)
    return None


class HubNotifier:
    """Translate domain changes into hub events."""

    def __init__(self, manager: ConnectionManager) -> None:
        self.manager = manager

    async def message_created(self, message: MessageRead) -> int:
        if message.chat_id is not None:
            return await self.manager.send_to_room(events.chat_room(message.chat_id), events.NEW_MESSAGE, message)
        if message.group_id is not None:
            return await self.manager.send_to_room(
                events.group_room(message.group_id), events.NEW_GROUP_MESSAGE, message
            )
        return 0

    async def reaction_updated(self, message: MessageRead) -> int:
        room = conversation_room(message.chat_id, message.group_id)
        if room is None:
            return 0
        return await self.manager.send_to_room(room, events.MESSAGE_REACTION_UPDATED, message)

    async def message_deleted(self, message_id: str, chat_id: Optional[str], group_id: Optional[str]) -> int:
        room = conversation_room(chat_id, group_id)
        if room is None:
            return 0
        return await self.manager.send_to_room(room, events.MESSAGE_DELETED, message_id)

    async def group_created(self, group: GroupRead) -> int:
        reached = await self.manager.send_to_users((m.user.id for m in group.members), events.GROUP_CREATED, group)
        logger.debug(f"GroupCreated for {group.id} reached {reached} members")
        return reached

    async def group_member_removed(self, group_id: str, member_id: str, notify_user_ids: Iterable[str]) -> int:
        """Tell the group a member left and stop routing its events to that user."""
        reached = await self.manager.send_to_users(notify_user_ids, events.GROUP_MEMBER_REMOVED, group_id, member_id)
        self.manager.remove_user_from_room(member_id, events.group_room(group_id))
        return reached

    async def user_online(self, user_id: str) -> int:
        return await self.manager.send_to_all(events.USER_ONLINE, user_id)

    async def user_offline(self, user_id: str) -> int:
        return await self.manager.send_to_all(events.USER_OFFLINE, user_id)


def get_hub_notifier(manager: ConnectionManager = Depends(get_connection_manager)) -> HubNotifier:
    """FastAPI dependency building a notifier over the connection manager."""
    return HubNotifier(manager)

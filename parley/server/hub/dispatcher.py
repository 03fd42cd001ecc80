"""
Per-connection handler for client hub frames.

Each client frame ``{"method": name, "args": [...]}`` is routed to the
matching hub method. Failures are reported back to the caller as an
``Error`` event instead of closing the socket.
"""

from __future__ import annotations

import logging
from typing import Any, Awaitable, Callable, Dict

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from parley.core.database.repositories import build_sql_repos_from_session
from parley.core.errors import InvalidRequestError, ParleyError
from parley.server.services.access import load_chat_for_user, load_group_for_member

from . import events
from .manager import ConnectionManager

logger = logging.getLogger(__name__)


def _require_id(value: Any, name: str) -> str:
    if not isinstance(value, str) or not value:
        raise InvalidRequestError(f"'{name}' must be a non-empty string")
    return value


class ChatHub:
    """Hub methods invoked by one connected client."""

    def __init__(
        self,
        manager: ConnectionManager,
        connection_id: str,
        user_id: str,
        session_factory: async_sessionmaker[AsyncSession],
    ) -> None:
        self.manager = manager
        self.connection_id = connection_id
        self.user_id = user_id
        self.session_factory = session_factory
        self._methods: Dict[str, Callable[..., Awaitable[None]]] = {
            events.JOIN_CHAT: self.join_chat,
            events.LEAVE_CHAT: self.leave_chat,
            events.JOIN_GROUP: self.join_group,
            events.LEAVE_GROUP: self.leave_group,
            events.SEND_TYPING: self.send_typing,
            events.SEND_GROUP_TYPING: self.send_group_typing,
        }

    async def dispatch(self, frame: Any) -> None:
        """Route one decoded client frame to its hub method."""
        if not isinstance(frame, dict) or not isinstance(frame.get("method"), str):
            await self._error("Frame must be an object with a 'method' string")
            return
        method_name = frame["method"]
        args = frame.get("args") or []
        if not isinstance(args, list):
            await self._error("'args' must be a list")
            return

        method = self._methods.get(method_name)
        if method is None:
            await self._error(f"Unknown hub method '{method_name}'")
            return
        try:
            await method(*args)
        except TypeError as e:
            await self._error(f"Bad arguments for '{method_name}': {e}")
        except ParleyError as e:
            await self._error(e.message)
        except SQLAlchemyError:
            logger.exception(f"Database error in hub method '{method_name}' for connection {self.connection_id}")
            await self._error(f"'{method_name}' failed")

    async def _error(self, message: str) -> None:
        logger.debug(f"Hub error for connection {self.connection_id}: {message}")
        await self.manager.send_to_connection(self.connection_id, events.ERROR, message)

    async def _username_if_chat_participant(self, chat_id: str) -> str:
        chat_id = _require_id(chat_id, "chat_id")
        async with self.session_factory() as session:
            repos = build_sql_repos_from_session(session=session)
            await load_chat_for_user(repos, chat_id, self.user_id)
            user = await repos.users.get_by_id(self.user_id)
        return user.username if user else ""

    async def _username_if_group_member(self, group_id: str) -> str:
        group_id = _require_id(group_id, "group_id")
        async with self.session_factory() as session:
            repos = build_sql_repos_from_session(session=session)
            await load_group_for_member(repos, group_id, self.user_id)
            user = await repos.users.get_by_id(self.user_id)
        return user.username if user else ""

    async def join_chat(self, chat_id: str) -> None:
        await self._username_if_chat_participant(chat_id)
        self.manager.add_to_room(self.connection_id, events.chat_room(chat_id))

    async def leave_chat(self, chat_id: str) -> None:
        self.manager.remove_from_room(self.connection_id, events.chat_room(_require_id(chat_id, "chat_id")))

    async def join_group(self, group_id: str) -> None:
        await self._username_if_group_member(group_id)
        self.manager.add_to_room(self.connection_id, events.group_room(group_id))

    async def leave_group(self, group_id: str) -> None:
        self.manager.remove_from_room(self.connection_id, events.group_room(_require_id(group_id, "group_id")))

    async def send_typing(self, chat_id: str, is_typing: bool) -> None:
        """Tell the other chat participant that the caller is typing.

        The caller is joined to the chat room first.
        """
        username = await self._username_if_chat_participant(chat_id)
        room = events.chat_room(chat_id)
        self.manager.add_to_room(self.connection_id, room)
        await self.manager.send_to_room(
            room, events.USER_TYPING, chat_id, self.user_id, username, bool(is_typing), exclude=self.connection_id
        )

    async def send_group_typing(self, group_id: str, is_typing: bool) -> None:
        """Tell the other group members that the caller is typing."""
        username = await self._username_if_group_member(group_id)
        room = events.group_room(group_id)
        self.manager.add_to_room(self.connection_id, room)
        await self.manager.send_to_room(
            room,
            events.USER_TYPING_GROUP,
            group_id,
            self.user_id,
            username,
            bool(is_typing),
            exclude=self.connection_id,
        )

"""
In-memory connection registry for the real-time hub.

The registry maps connection ids to sockets, users to their open
connections and room names to member connections. It lives in one process
and is neither persisted nor shared between workers.
"""

from __future__ import annotations

import logging
import uuid
from collections import defaultdict
from typing import Any, Dict, Iterable, List, Optional, Set

from fastapi import WebSocket
from fastapi.encoders import jsonable_encoder

logger = logging.getLogger(__name__)


class ConnectionManager:
    """Track open hub connections and fan frames out to them."""

    def __init__(self) -> None:
        self._sockets: Dict[str, WebSocket] = {}
        self._connection_users: Dict[str, str] = {}
        # newest connection last
        self._user_connections: Dict[str, List[str]] = defaultdict(list)
        self._rooms: Dict[str, Set[str]] = defaultdict(set)

    def connect(self, user_id: str, websocket: WebSocket) -> str:
        """Register an accepted socket for a user.

        Returns:
            The new connection id
        """
        connection_id = uuid.uuid4().hex
        self._sockets[connection_id] = websocket
        self._connection_users[connection_id] = user_id
        self._user_connections[user_id].append(connection_id)
        logger.debug(f"Hub connection {connection_id} opened for user {user_id}")
        return connection_id

    def disconnect(self, connection_id: str) -> Optional[str]:
        """Forget a connection and its room memberships.

        Returns:
            The user id that owned the connection, or None if it was unknown
        """
        self._sockets.pop(connection_id, None)
        user_id = self._connection_users.pop(connection_id, None)
        if user_id is not None:
            connections = self._user_connections.get(user_id, [])
            if connection_id in connections:
                connections.remove(connection_id)
            if not connections:
                self._user_connections.pop(user_id, None)
        for room in list(self._rooms):
            self._rooms[room].discard(connection_id)
            if not self._rooms[room]:
                del self._rooms[room]
        if user_id is not None:
            logger.debug(f"Hub connection {connection_id} closed for user {user_id}")
        return user_id

    def get_connection_id(self, user_id: str) -> Optional[str]:
        """Latest open connection of a user, if any."""
        connections = self._user_connections.get(user_id)
        return connections[-1] if connections else None

    def get_user_id(self, connection_id: str) -> Optional[str]:
        return self._connection_users.get(connection_id)

    def is_connected(self, user_id: str) -> bool:
        return self.get_connection_id(user_id) is not None

    def add_to_room(self, connection_id: str, room: str) -> None:
        if connection_id in self._sockets:
            self._rooms[room].add(connection_id)

    def remove_from_room(self, connection_id: str, room: str) -> None:
        members = self._rooms.get(room)
        if members is None:
            return
        members.discard(connection_id)
        if not members:
            del self._rooms[room]

    def remove_user_from_room(self, user_id: str, room: str) -> int:
        """Drop every connection of a user from a room.

        Returns:
            Number of connections removed
        """
        removed = 0
        for connection_id in list(self._user_connections.get(user_id, ())):
            if connection_id in self._rooms.get(room, ()):
                self.remove_from_room(connection_id, room)
                removed += 1
        return removed

    def room_members(self, room: str) -> Set[str]:
        return set(self._rooms.get(room, ()))

    @property
    def connection_count(self) -> int:
        return len(self._sockets)

    async def send_to_connection(self, connection_id: str, event: str, *args: Any) -> bool:
        """Send one event frame to one connection.

        A connection whose send fails is dropped from the registry.

        Returns:
            True if the frame was handed to the socket
        """
        websocket = self._sockets.get(connection_id)
        if websocket is None:
            return False
        frame = jsonable_encoder({"event": event, "args": list(args)})
        try:
            await websocket.send_json(frame)
        except Exception as e:
            logger.warning(f"Dropping hub connection {connection_id} after failed send of {event}: {e}")
            self.disconnect(connection_id)
            return False
        return True

    async def send_to_user(self, user_id: str, event: str, *args: Any) -> bool:
        """Send an event to the latest connection of a user."""
        connection_id = self.get_connection_id(user_id)
        if connection_id is None:
            return False
        return await self.send_to_connection(connection_id, event, *args)

    async def send_to_users(self, user_ids: Iterable[str], event: str, *args: Any) -> int:
        """Send an event to each listed user that is connected.

        Returns:
            Number of users reached
        """
        reached = 0
        for user_id in dict.fromkeys(user_ids):
            if await self.send_to_user(user_id, event, *args):
                reached += 1
        return reached

    async def send_to_room(self, room: str, event: str, *args: Any, exclude: Optional[str] = None) -> int:
        """Send an event to every connection in a room.

        Args:
            room: Room name
            event: Event name
            *args: Event arguments
            exclude: Connection id to skip, usually the sender

        Returns:
            Number of connections reached
        """
        reached = 0
        for connection_id in self.room_members(room):
            if connection_id == exclude:
                continue
            if await self.send_to_connection(connection_id, event, *args):
                reached += 1
        return reached

    async def send_to_all(self, event: str, *args: Any) -> int:
        reached = 0
        for connection_id in list(self._sockets):
            if await self.send_to_connection(connection_id, event, *args):
                reached += 1
        return reached


connection_manager = ConnectionManager()


def get_connection_manager() -> ConnectionManager:
    """FastAPI dependency returning the process-wide connection manager."""
    return connection_manager

"""
Real-time hub.

A WebSocket endpoint with a per-process connection registry and named rooms
(``Chat_<id>``, ``Group_<id>``) used to push messages, reactions, presence
and typing indicators to connected clients.
"""

from .manager import ConnectionManager, connection_manager, get_connection_manager
from .notifier import HubNotifier, get_hub_notifier

__all__ = [
    "ConnectionManager",
    "HubNotifier",
    "connection_manager",
    "get_connection_manager",
    "get_hub_notifier",
]

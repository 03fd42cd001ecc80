"""
WebSocket endpoint of the real-time hub.

Clients connect to ``/chathub?access_token=<jwt>``. Connections without a
valid token are closed with policy-violation code 1008 before the
handshake completes.
"""

from __future__ import annotations

import json
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, WebSocket, WebSocketDisconnect, status
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from parley.core.database.repositories import build_sql_repos_from_session
from parley.core.database.session import get_session_factory
from parley.core.errors import AuthenticationError
from parley.core.logging_config import reset_correlation_id, set_correlation_id
from parley.core.security import decode_access_token
from parley.server.core.constant import HUB_PATH
from parley.server.services.users import UserService

from . import events
from .dispatcher import ChatHub
from .manager import ConnectionManager, get_connection_manager
from .notifier import HubNotifier

logger = logging.getLogger(__name__)

router = APIRouter()


async def _set_presence(session_factory: async_sessionmaker[AsyncSession], user_id: str, is_online: bool) -> None:
    async with session_factory() as session:
        await UserService(build_sql_repos_from_session(session=session)).set_online(user_id, is_online)


@router.websocket(HUB_PATH)
async def chat_hub(
    websocket: WebSocket,
    access_token: Optional[str] = Query(default=None),
    manager: ConnectionManager = Depends(get_connection_manager),
    session_factory: async_sessionmaker[AsyncSession] = Depends(get_session_factory),
):
    """Serve one hub connection until the client goes away."""
    try:
        claims = decode_access_token(access_token or "")
    except AuthenticationError as e:
        logger.info(f"Rejected hub connection: {e.message}")
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return

    await websocket.accept()
    user_id = claims.user_id
    connection_id = manager.connect(user_id, websocket)
    log_token = set_correlation_id(f"hub-{connection_id}")
    notifier = HubNotifier(manager)
    hub = ChatHub(manager, connection_id, user_id, session_factory)

    try:
        await _set_presence(session_factory, user_id, True)
        await notifier.user_online(user_id)
        logger.info(f"User {user_id} connected to hub ({manager.connection_count} open connections)")

        while True:
            message = await websocket.receive()
            if message["type"] == "websocket.disconnect":
                raise WebSocketDisconnect(message.get("code", status.WS_1000_NORMAL_CLOSURE))
            try:
                # binary frames carry no "text" key
                frame = json.loads(message.get("text") or "")
            except json.JSONDecodeError:
                await manager.send_to_connection(connection_id, events.ERROR, "Frame is not valid JSON")
                continue
            await hub.dispatch(frame)
    except WebSocketDisconnect:
        pass
    finally:
        manager.disconnect(connection_id)
        if not manager.is_connected(user_id):
            await _set_presence(session_factory, user_id, False)
            await notifier.user_offline(user_id)
        logger.info(f"User {user_id} disconnected from hub")
        reset_correlation_id(log_token)

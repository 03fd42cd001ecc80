"""Tests for the hub WebSocket endpoint."""

from unittest.mock import AsyncMock, patch

import pytest
from starlette.testclient import TestClient
from starlette.websockets import WebSocketDisconnect

from parley.core.security import create_access_token
from parley.server.hub.manager import get_connection_manager
from parley.server.main import app


@pytest.fixture
def hub_client(hub_manager):
    app.dependency_overrides[get_connection_manager] = lambda: hub_manager
    with patch("parley.server.hub.router._set_presence", new=AsyncMock()) as presence:
        yield TestClient(app), presence
    app.dependency_overrides.clear()


@pytest.mark.parametrize("query", ["", "?access_token=", "?access_token=not-a-jwt"])
def test_rejects_missing_or_invalid_token(hub_client, query):
    client, presence = hub_client

    with pytest.raises(WebSocketDisconnect) as exc_info:
        with client.websocket_connect(f"/chathub{query}"):
            pass

    assert exc_info.value.code == 1008
    presence.assert_not_awaited()


def test_connected_client_gets_presence_and_errors(hub_client, hub_manager):
    client, presence = hub_client
    token = create_access_token("user-1", "alice")

    with client.websocket_connect(f"/chathub?access_token={token}") as ws:
        assert ws.receive_json() == {"event": "UserOnline", "args": ["user-1"]}
        presence.assert_awaited_once()
        assert presence.await_args.args[1:] == ("user-1", True)
        assert hub_manager.is_connected("user-1")

        ws.send_text("{not json")
        assert ws.receive_json() == {"event": "Error", "args": ["Frame is not valid JSON"]}

        ws.send_bytes(b"\x00\x01")
        assert ws.receive_json() == {"event": "Error", "args": ["Frame is not valid JSON"]}

        ws.send_json({"method": "Dance", "args": []})
        assert ws.receive_json() == {"event": "Error", "args": ["Unknown hub method 'Dance'"]}

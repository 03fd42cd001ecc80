"""API tests for one-to-one chats."""

import pytest
from httpx import AsyncClient

pytestmark = pytest.mark.asyncio


async def test_open_chat_is_idempotent(client: AsyncClient, register):
    alice = await register("alice")
    bob = await register("bob")

    first = await client.post(f"/api/v1/chats/with/{bob['user']['id']}", headers=alice["headers"])
    second = await client.post(f"/api/v1/chats/with/{alice['user']['id']}", headers=bob["headers"])

    assert first.status_code == 200
    assert first.json()["id"] == second.json()["id"]
    assert first.json()["other_user"]["username"] == "bob"
    assert second.json()["other_user"]["username"] == "alice"
    assert first.json()["unread_count"] == 0
    assert first.json()["last_message"] is None


async def test_open_chat_with_self(client: AsyncClient, register):
    alice = await register("alice")

    response = await client.post(f"/api/v1/chats/with/{alice['user']['id']}", headers=alice["headers"])

    assert response.status_code == 400


async def test_open_chat_with_unknown_user(client: AsyncClient, register):
    alice = await register("alice")

    response = await client.post("/api/v1/chats/with/nobody", headers=alice["headers"])

    assert response.status_code == 404
    assert response.json()["detail"] == "User 'nobody' not found"


async def test_list_chats_with_last_message_and_unread(client: AsyncClient, register):
    alice = await register("alice")
    bob = await register("bob")
    chat = (await client.post(f"/api/v1/chats/with/{bob['user']['id']}", headers=alice["headers"])).json()

    for text in ("hi", "are you there?"):
        sent = await client.post("/api/v1/messages", json={"chat_id": chat["id"], "content": text}, headers=alice["headers"])
        assert sent.status_code == 201

    chats = (await client.get("/api/v1/chats", headers=bob["headers"])).json()

    assert len(chats) == 1
    assert chats[0]["unread_count"] == 2
    assert chats[0]["last_message"]["content"] == "are you there?"
    assert chats[0]["other_user"]["id"] == alice["user"]["id"]

    await client.get(f"/api/v1/messages/chat/{chat['id']}", headers=bob["headers"])
    chats = (await client.get("/api/v1/chats", headers=bob["headers"])).json()
    assert chats[0]["unread_count"] == 0

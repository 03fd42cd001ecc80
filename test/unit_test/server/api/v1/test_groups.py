"""API tests for groups and group membership."""

from unittest.mock import AsyncMock

import pytest
from httpx import AsyncClient

from parley.server.hub.events import group_room

pytestmark = pytest.mark.asyncio


async def _create_group(client, owner, *members, name="Book club"):
    response = await client.post(
        "/api/v1/groups",
        json={"name": name, "member_ids": [m["user"]["id"] for m in members]},
        headers=owner["headers"],
    )
    assert response.status_code == 201, response.text
    return response.json()


async def test_create_group_roles(client: AsyncClient, register):
    alice = await register("alice")
    bob = await register("bob")

    group = await _create_group(client, alice, bob, alice)

    roles = {m["user"]["username"]: m["role"] for m in group["members"]}
    assert roles == {"alice": "Admin", "bob": "Member"}


async def test_create_group_blank_name(client: AsyncClient, register):
    alice = await register("alice")

    response = await client.post("/api/v1/groups", json={"name": "   "}, headers=alice["headers"])

    assert response.status_code == 422


async def test_create_group_unknown_member(client: AsyncClient, register):
    alice = await register("alice")

    response = await client.post(
        "/api/v1/groups", json={"name": "g", "member_ids": ["ghost"]}, headers=alice["headers"]
    )

    assert response.status_code == 404


async def test_create_group_notifies_connected_members(client: AsyncClient, register, hub_manager):
    alice = await register("alice")
    bob = await register("bob")
    carol = await register("carol")
    bob_socket = AsyncMock()
    hub_manager.connect(bob["user"]["id"], bob_socket)

    group = await _create_group(client, alice, bob, carol)

    bob_socket.send_json.assert_awaited_once()
    frame = bob_socket.send_json.await_args.args[0]
    assert frame["event"] == "GroupCreated"
    assert frame["args"][0]["id"] == group["id"]


async def test_list_groups(client: AsyncClient, register):
    alice = await register("alice")
    bob = await register("bob")
    await _create_group(client, alice, bob, name="First")
    await _create_group(client, alice, name="Second")

    bob_groups = (await client.get("/api/v1/groups", headers=bob["headers"])).json()
    alice_groups = (await client.get("/api/v1/groups", headers=alice["headers"])).json()

    assert [g["name"] for g in bob_groups] == ["First"]
    assert {g["name"] for g in alice_groups} == {"First", "Second"}


async def test_add_members_admin_only(client: AsyncClient, register):
    alice = await register("alice")
    bob = await register("bob")
    carol = await register("carol")
    group = await _create_group(client, alice, bob)

    forbidden = await client.post(
        f"/api/v1/groups/{group['id']}/members",
        json={"member_ids": [carol["user"]["id"]]},
        headers=bob["headers"],
    )
    assert forbidden.status_code == 403

    added = await client.post(
        f"/api/v1/groups/{group['id']}/members",
        json={"member_ids": [carol["user"]["id"], bob["user"]["id"]]},
        headers=alice["headers"],
    )
    assert added.status_code == 200
    assert len(added.json()["members"]) == 3


async def test_remove_member_notifies_removed_and_remaining(client: AsyncClient, register, hub_manager):
    alice = await register("alice")
    bob = await register("bob")
    carol = await register("carol")
    group = await _create_group(client, alice, bob, carol)
    bob_socket, carol_socket = AsyncMock(), AsyncMock()
    hub_manager.connect(bob["user"]["id"], bob_socket)
    hub_manager.connect(carol["user"]["id"], carol_socket)

    response = await client.delete(
        f"/api/v1/groups/{group['id']}/members/{bob['user']['id']}", headers=alice["headers"]
    )

    assert response.status_code == 204
    for socket in (bob_socket, carol_socket):
        socket.send_json.assert_awaited_once_with(
            {"event": "GroupMemberRemoved", "args": [group["id"], bob["user"]["id"]]}
        )


async def test_member_can_leave_but_not_remove_others(client: AsyncClient, register):
    alice = await register("alice")
    bob = await register("bob")
    carol = await register("carol")
    group = await _create_group(client, alice, bob, carol)

    forbidden = await client.delete(
        f"/api/v1/groups/{group['id']}/members/{carol['user']['id']}", headers=bob["headers"]
    )
    left = await client.delete(f"/api/v1/groups/{group['id']}/members/{bob['user']['id']}", headers=bob["headers"])

    assert forbidden.status_code == 403
    assert left.status_code == 204


async def test_remove_missing_member(client: AsyncClient, register):
    alice = await register("alice")
    bob = await register("bob")
    group = await _create_group(client, alice)

    response = await client.delete(
        f"/api/v1/groups/{group['id']}/members/{bob['user']['id']}", headers=alice["headers"]
    )

    assert response.status_code == 404


async def test_update_member_role(client: AsyncClient, register):
    alice = await register("alice")
    bob = await register("bob")
    group = await _create_group(client, alice, bob)

    promoted = await client.put(
        f"/api/v1/groups/{group['id']}/members/{bob['user']['id']}/role",
        json={"role": "Admin"},
        headers=alice["headers"],
    )
    assert promoted.status_code == 200
    assert promoted.json()["role"] == "Admin"

    invalid = await client.put(
        f"/api/v1/groups/{group['id']}/members/{bob['user']['id']}/role",
        json={"role": "Owner"},
        headers=alice["headers"],
    )
    assert invalid.status_code == 422


async def test_non_member_cannot_see_group_messages(client: AsyncClient, register):
    alice = await register("alice")
    mallory = await register("mallory")
    group = await _create_group(client, alice)

    response = await client.get(f"/api/v1/messages/group/{group['id']}", headers=mallory["headers"])

    assert response.status_code == 403


async def test_removed_member_stops_receiving_group_messages(client: AsyncClient, register, hub_manager):
    alice = await register("alice")
    bob = await register("bob")
    group = await _create_group(client, alice, bob)
    bob_socket = AsyncMock()
    bob_connection = hub_manager.connect(bob["user"]["id"], bob_socket)
    hub_manager.add_to_room(bob_connection, group_room(group["id"]))

    removed = await client.delete(
        f"/api/v1/groups/{group['id']}/members/{bob['user']['id']}", headers=alice["headers"]
    )
    sent = await client.post(
        "/api/v1/messages", json={"group_id": group["id"], "content": "secret"}, headers=alice["headers"]
    )

    assert removed.status_code == 204
    assert sent.status_code == 201
    assert bob_connection not in hub_manager.room_members(group_room(group["id"]))
    events = [c.args[0]["event"] for c in bob_socket.send_json.await_args_list]
    assert events == ["GroupMemberRemoved"]

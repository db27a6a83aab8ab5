"""
WebSocket Tests

This module tests the staff websocket: token admission, automatic room
membership, table/layout subscriptions and event delivery.

Test Categories:
1. Admission (refused before any room join)
2. Room topology
3. Subscriptions and delivery
"""
import uuid

import pytest
from channels.db import database_sync_to_async
from channels.testing import WebsocketCommunicator
from django.apps import apps

from core_backend.asgi import application
from core_backend.jwt_websocket_middleware import AdmissionRefused
from realtime import rooms
from users.tests.helpers import access_token_for, expired_token_for

WS_PATH = "/ws/floor/"


def realtime_hub():
    return apps.get_app_config("realtime").hub


def group_members(room):
    layer = realtime_hub().channel_layer
    return set(layer.groups.get(rooms.group_name(room), {}).keys())


async def connect(path=WS_PATH, headers=None):
    communicator = WebsocketCommunicator(application, path, headers=headers or [])
    connected, close_code = await communicator.connect()
    return communicator, connected, close_code


@database_sync_to_async
def create_user(username, labels):
    from django.contrib.auth import get_user_model

    return get_user_model().objects.create_user(
        username=username,
        email=f"{username}@restaurant.test",
        password="secret-pass",
        labels=labels,
    )


@database_sync_to_async
def token_for(user):
    return access_token_for(user)


# ============================================================================
# ADMISSION TESTS
# ============================================================================

@pytest.mark.django_db(transaction=True)
@pytest.mark.asyncio
class TestAdmission:
    """Connections are refused before joining any room."""

    async def test_missing_token_is_refused(self):
        """
        HIGH: Verify a connection without any token is refused

        Expected: handshake rejected with the missing-token close code,
        no room gains a member
        """
        communicator, connected, close_code = await connect()

        assert not connected
        assert close_code == AdmissionRefused.MISSING_TOKEN
        assert group_members(rooms.ORDERS) == set()

    async def test_expired_token_is_refused(self):
        """
        CRITICAL: A syntactically valid but expired token is refused

        Expected: refused with the expired-token code, joins no room
        """
        user = await create_user("late", ["waiter"])
        token = expired_token_for(user)

        communicator, connected, close_code = await connect(f"{WS_PATH}?token={token}")

        assert not connected
        assert close_code == AdmissionRefused.EXPIRED_TOKEN
        for room in rooms.GLOBAL_ROOMS:
            assert group_members(room) == set()

    async def test_tampered_token_is_refused(self):
        user = await create_user("mallory", ["waiter"])
        token = await token_for(user)

        communicator, connected, close_code = await connect(f"{WS_PATH}?token={token[:-2]}xx")

        assert not connected
        assert close_code == AdmissionRefused.INVALID_TOKEN

    async def test_token_for_deleted_user_is_refused(self):
        user = await create_user("gone", ["waiter"])
        token = await token_for(user)
        await database_sync_to_async(user.delete)()

        communicator, connected, close_code = await connect(f"{WS_PATH}?token={token}")

        assert not connected
        assert close_code == AdmissionRefused.UNKNOWN_USER
        assert group_members(rooms.ORDERS) == set()


# ============================================================================
# ROOM TOPOLOGY TESTS
# ============================================================================

@pytest.mark.django_db(transaction=True)
@pytest.mark.asyncio
class TestRoomTopology:

    async def test_staff_joins_global_rooms_only(self):
        user = await create_user("waiter1", ["waiter"])
        token = await token_for(user)

        communicator, connected, _ = await connect(
            headers=[(b"authorization", f"Bearer {token}".encode())]
        )
        assert connected

        message = await communicator.receive_json_from()
        assert message["type"] == "connection:established"
        assert sorted(message["data"]["rooms"]) == sorted(rooms.GLOBAL_ROOMS)
        assert message["data"]["user"]["username"] == "waiter1"
        assert group_members(rooms.MANAGERS) == set()

        await communicator.disconnect()

    async def test_manager_also_joins_manager_room(self):
        user = await create_user("boss", ["manager"])
        token = await token_for(user)

        communicator, connected, _ = await connect(
            headers=[(b"cookie", f"access_token={token}".encode())]
        )
        assert connected

        message = await communicator.receive_json_from()
        assert rooms.MANAGERS in message["data"]["rooms"]
        assert len(group_members(rooms.MANAGERS)) == 1

        await communicator.disconnect()
        assert group_members(rooms.MANAGERS) == set()
        assert group_members(rooms.ORDERS) == set()


# ============================================================================
# SUBSCRIPTION AND DELIVERY TESTS
# ============================================================================

@pytest.mark.django_db(transaction=True)
@pytest.mark.asyncio
class TestSubscriptions:

    async def _connected(self, username="floor"):
        user = await create_user(username, ["waiter"])
        token = await token_for(user)
        communicator, connected, _ = await connect(f"{WS_PATH}?token={token}")
        assert connected
        await communicator.receive_json_from()  # connection:established
        return communicator

    async def test_table_subscription_receives_table_events(self):
        """
        HIGH: subscribe:table joins table:<id>; events published there are
        delivered, and stop after unsubscribe:table
        """
        communicator = await self._connected()
        table_id = str(uuid.uuid4())

        await communicator.send_json_to({"type": "subscribe:table", "id": table_id})
        await communicator.send_json_to({"type": "ping"})
        assert (await communicator.receive_json_from())["type"] == "pong"

        await realtime_hub().apublish(
            "order:updated", {"id": "o-1"}, [rooms.table_room(table_id)]
        )
        event = await communicator.receive_json_from()
        assert event == {
            "type": "order:updated",
            "data": {"id": "o-1"},
            "room": f"table:{table_id}",
        }

        await communicator.send_json_to({"type": "unsubscribe:table", "id": table_id})
        await communicator.send_json_to({"type": "ping"})
        assert (await communicator.receive_json_from())["type"] == "pong"

        await realtime_hub().apublish("order:updated", {"id": "o-2"}, [rooms.table_room(table_id)])
        assert await communicator.receive_nothing()

        await communicator.disconnect()

    async def test_malformed_ids_are_ignored(self):
        communicator = await self._connected("floor2")

        await communicator.send_json_to({"type": "subscribe:table", "id": "table-7"})
        await communicator.send_json_to({"type": "subscribe:layout", "id": 42})
        await communicator.send_json_to({"type": "ping"})

        assert (await communicator.receive_json_from())["type"] == "pong"
        layer = realtime_hub().channel_layer
        assert not any(group.startswith("room.table.") for group in layer.groups)
        assert not any(group.startswith("room.layout.") for group in layer.groups)

        await communicator.disconnect()

    async def test_layout_subscription(self):
        communicator = await self._connected("floor3")
        layout_id = str(uuid.uuid4())

        await communicator.send_json_to({"type": "subscribe:layout", "id": layout_id})
        await communicator.send_json_to({"type": "ping"})
        await communicator.receive_json_from()

        await realtime_hub().apublish("layout:updated", {"id": layout_id}, [rooms.layout_room(layout_id)])
        event = await communicator.receive_json_from()
        assert event["type"] == "layout:updated"

        await communicator.disconnect()

    async def test_global_room_delivery(self):
        communicator = await self._connected("floor4")

        await realtime_hub().apublish("menu:updated", {"id": "m-1"}, [rooms.MENU])

        event = await communicator.receive_json_from()
        assert event["type"] == "menu:updated"
        assert event["room"] == "menu"

        await communicator.disconnect()

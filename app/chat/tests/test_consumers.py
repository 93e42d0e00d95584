"""
Tests for ChatConsumer.

Verifies:
- Unauthenticated sockets are closed with 4001
- registerUser only joins the socket's own user channel
- joinRoom requires a canonical pair channel with a connection
- Channel-layer events are forwarded with their payload flattened
- A message sent through the service reaches both sockets
"""

import pytest
from asgiref.sync import sync_to_async
from channels.layers import get_channel_layer
from channels.testing import WebsocketCommunicator
from django.contrib.auth.models import AnonymousUser

from chat.consumers import ChatConsumer
from chat.constants import REALTIME_CONFIG, WS_CLOSE_UNAUTHENTICATED
from chat.rooms import pair_channel, user_channel
from chat.services import MessageService

pytestmark = [pytest.mark.asyncio, pytest.mark.django_db(transaction=True)]


def make_communicator(user, subprotocols=None):
    communicator = WebsocketCommunicator(
        ChatConsumer.as_asgi(), "/ws/chat/", subprotocols=subprotocols
    )
    communicator.scope["user"] = user
    return communicator


async def open_socket(user, subprotocols=None):
    communicator = make_communicator(user, subprotocols)
    connected, _ = await communicator.connect()
    assert connected
    return communicator


class TestConnect:
    async def test_anonymous_closed_with_4001(self):
        communicator = make_communicator(AnonymousUser())

        connected, code = await communicator.connect()

        assert connected is False
        assert code == WS_CLOSE_UNAUTHENTICATED

    async def test_authenticated_accepted(self, alice):
        communicator = make_communicator(alice)

        connected, _ = await communicator.connect()

        assert connected
        await communicator.disconnect()

    async def test_jwt_subprotocol_echoed(self, alice):
        communicator = make_communicator(alice, subprotocols=["jwt", "token"])

        connected, subprotocol = await communicator.connect()

        assert connected
        assert subprotocol == "jwt"
        await communicator.disconnect()


class TestRegisterUser:
    async def test_joins_own_channel(self, alice):
        communicator = await open_socket(alice)

        await communicator.send_json_to({"type": "registerUser", "user_id": alice.id})
        response = await communicator.receive_json_from()

        assert response == {"type": "registered", "room_id": user_channel(alice.id)}
        await communicator.disconnect()

    async def test_other_user_rejected(self, alice, bob):
        communicator = await open_socket(alice)

        await communicator.send_json_to({"type": "registerUser", "user_id": bob.id})
        response = await communicator.receive_json_from()

        assert response["type"] == "error"
        await get_channel_layer().group_send(
            user_channel(bob.id),
            {
                "type": REALTIME_CONFIG.GROUP_MESSAGE_TYPE,
                "event": REALTIME_CONFIG.EVENT_UNREAD_TOTAL,
                "payload": {"count": 3},
            },
        )
        assert await communicator.receive_nothing()
        await communicator.disconnect()


class TestJoinRoom:
    async def test_connected_pair_joins(self, alice, bob, connected):
        communicator = await open_socket(alice)
        room_id = pair_channel(alice.id, bob.id)

        await communicator.send_json_to({"type": "joinRoom", "room_id": room_id})
        response = await communicator.receive_json_from()

        assert response == {"type": "joined", "room_id": room_id}
        await communicator.disconnect()

    async def test_unconnected_pair_rejected(self, alice, stranger):
        communicator = await open_socket(alice)

        await communicator.send_json_to(
            {"type": "joinRoom", "room_id": pair_channel(alice.id, stranger.id)}
        )
        response = await communicator.receive_json_from()

        assert response["type"] == "error"
        await communicator.disconnect()

    async def test_foreign_room_rejected(self, alice, bob, carol, connected):
        communicator = await open_socket(alice)

        await communicator.send_json_to(
            {"type": "joinRoom", "room_id": pair_channel(bob.id, carol.id)}
        )
        response = await communicator.receive_json_from()

        assert response["type"] == "error"
        await communicator.disconnect()

    @pytest.mark.parametrize("room_id", [None, "", "user.1", "1_2_3"])
    async def test_malformed_room_rejected(self, alice, room_id):
        communicator = await open_socket(alice)

        await communicator.send_json_to({"type": "joinRoom", "room_id": room_id})
        response = await communicator.receive_json_from()

        assert response["type"] == "error"
        await communicator.disconnect()

    async def test_leave_stops_delivery(self, alice, bob, connected):
        communicator = await open_socket(alice)
        room_id = pair_channel(alice.id, bob.id)
        await communicator.send_json_to({"type": "joinRoom", "room_id": room_id})
        await communicator.receive_json_from()

        await communicator.send_json_to({"type": "leaveRoom", "room_id": room_id})
        response = await communicator.receive_json_from()
        await get_channel_layer().group_send(
            room_id,
            {
                "type": REALTIME_CONFIG.GROUP_MESSAGE_TYPE,
                "event": REALTIME_CONFIG.EVENT_MESSAGE,
                "payload": {"message": {"id": 1}, "room_id": room_id},
            },
        )

        assert response == {"type": "left", "room_id": room_id}
        assert await communicator.receive_nothing()
        await communicator.disconnect()

    async def test_leave_keeps_user_channel(self, alice):
        communicator = await open_socket(alice)
        group = user_channel(alice.id)
        await communicator.send_json_to({"type": "registerUser", "user_id": alice.id})
        await communicator.receive_json_from()

        await communicator.send_json_to({"type": "leaveRoom", "room_id": group})
        response = await communicator.receive_json_from()
        await get_channel_layer().group_send(
            group,
            {
                "type": REALTIME_CONFIG.GROUP_MESSAGE_TYPE,
                "event": REALTIME_CONFIG.EVENT_UNREAD_TOTAL,
                "payload": {"count": 2},
            },
        )

        assert response["type"] == "error"
        assert await communicator.receive_json_from() == {
            "type": "chat:unread-total",
            "count": 2,
        }
        await communicator.disconnect()


class TestReceive:
    async def test_unknown_type_returns_error(self, alice):
        communicator = await open_socket(alice)

        await communicator.send_json_to({"type": "sendMessage"})
        response = await communicator.receive_json_from()

        assert response["type"] == "error"
        assert "sendMessage" in response["message"]
        await communicator.disconnect()

    async def test_chat_event_forwarded_flat(self, alice):
        communicator = await open_socket(alice)
        await communicator.send_json_to({"type": "registerUser", "user_id": alice.id})
        await communicator.receive_json_from()

        await get_channel_layer().group_send(
            user_channel(alice.id),
            {
                "type": REALTIME_CONFIG.GROUP_MESSAGE_TYPE,
                "event": REALTIME_CONFIG.EVENT_UNREAD_TOTAL,
                "payload": {"count": 4},
            },
        )
        event = await communicator.receive_json_from()

        assert event == {"type": "chat:unread-total", "count": 4}
        await communicator.disconnect()


@pytest.mark.e2e
class TestDelivery:
    async def test_sent_message_reaches_both_participants(
        self, alice, bob, connected, settings
    ):
        settings.CHAT_REALTIME_PUBLISHER = "chat.realtime.ChannelLayerPublisher"
        room_id = pair_channel(alice.id, bob.id)
        alice_socket = await open_socket(alice)
        bob_socket = await open_socket(bob)
        for socket in (alice_socket, bob_socket):
            await socket.send_json_to({"type": "joinRoom", "room_id": room_id})
            await socket.receive_json_from()
        await bob_socket.send_json_to({"type": "registerUser", "user_id": bob.id})
        await bob_socket.receive_json_from()

        result = await sync_to_async(MessageService.send_message)(
            sender=alice, receiver_id=bob.id, content="hello"
        )
        assert result.success

        alice_event = await alice_socket.receive_json_from()
        assert alice_event["type"] == "chat:message"
        assert alice_event["room_id"] == room_id
        assert alice_event["message"]["content"] == "hello"

        bob_events = []
        while not await bob_socket.receive_nothing(timeout=0.2):
            bob_events.append(await bob_socket.receive_json_from())
        by_type = {event["type"]: event for event in bob_events}
        assert by_type["chat:message"]["message"]["id"] == result.data.id
        assert by_type["chat:conversation-updated"]["conversation"]["id"] == alice.id
        assert by_type["chat:unread-total"]["count"] == 1

        await alice_socket.disconnect()
        await bob_socket.disconnect()

"""
WebSocket consumers for the chat application.

This module implements the WebSocket consumer that delivers realtime chat
events. The consumer only manages group membership and forwards events;
messages are sent and marked read through the HTTP API.

Consumers:
    ChatConsumer: One socket per client, joined to any number of channels

Authentication:
    Users are authenticated via JWT token passed as query parameter.
    JWTAuthMiddleware attaches the user to self.scope["user"].

Channel Groups:
    user.{id}   Private channel of one user (joined with registerUser)
    {lo}_{hi}   Channel shared by a connected pair (joined with joinRoom)

Message Types (from client):
    - registerUser: {"type": "registerUser", "user_id": <own id>}
    - joinRoom: {"type": "joinRoom", "room_id": "<lo>_<hi>"}
    - leaveRoom: {"type": "leaveRoom", "room_id": "<lo>_<hi>"} (pair channels only)

Message Types (to client):
    - registered / joined / left: Acknowledgements
    - chat:message, chat:conversation-updated, chat:unread-total,
      chat:messages-read: Realtime events, payload fields at top level
    - error: Error response
"""

from __future__ import annotations

import logging

from channels.db import database_sync_to_async
from channels.generic.websocket import AsyncJsonWebsocketConsumer
from django.contrib.auth.models import AnonymousUser

from connections.services import ConnectionService
from core.exceptions import ValidationError

from chat.constants import CONTROL_MESSAGES, WS_CLOSE_UNAUTHENTICATED
from chat.rooms import parse_pair_channel, user_channel

logger = logging.getLogger(__name__)


class ChatConsumer(AsyncJsonWebsocketConsumer):
    """
    WebSocket consumer for realtime chat events.

    Handles:
        - Connection authentication
        - Joining the user's private channel
        - Joining/leaving conversation rooms the user belongs to
        - Forwarding chat.event group messages to the client

    Attributes:
        joined_groups: Channel-layer groups this socket has joined
    """

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.joined_groups: set[str] = set()

    @property
    def user(self):
        return self.scope.get("user")

    async def connect(self):
        """
        Handle WebSocket connection.

        Unauthenticated sockets are closed with code 4001.
        """
        if not self.user or isinstance(self.user, AnonymousUser):
            logger.warning("Rejected unauthenticated chat socket")
            await self.close(code=WS_CLOSE_UNAUTHENTICATED)
            return

        if "jwt" in self.scope.get("subprotocols", []):
            await self.accept(subprotocol="jwt")
        else:
            await self.accept()
        logger.info(f"User {self.user.id} opened a chat socket")

    async def disconnect(self, close_code):
        """Leave every group this socket joined."""
        for group in list(self.joined_groups):
            await self._leave(group)

        if self.user and not isinstance(self.user, AnonymousUser):
            logger.info(f"User {self.user.id} closed a chat socket ({close_code})")

    async def receive_json(self, content, **kwargs):
        """
        Handle incoming control frames.

        Args:
            content: Parsed JSON frame from client
        """
        if not isinstance(content, dict):
            await self._send_error("Frames must be JSON objects")
            return

        message_type = content.get("type")

        if message_type == CONTROL_MESSAGES.REGISTER_USER:
            await self._handle_register_user(content)
        elif message_type == CONTROL_MESSAGES.JOIN_ROOM:
            await self._handle_join_room(content)
        elif message_type == CONTROL_MESSAGES.LEAVE_ROOM:
            await self._handle_leave_room(content)
        else:
            await self._send_error(f"Unknown message type: {message_type}")

    async def _handle_register_user(self, content):
        """Join the user's private channel. Only the socket's own user is allowed."""
        if str(content.get("user_id")) != str(self.user.id):
            logger.warning(
                f"User {self.user.id} tried to register as {content.get('user_id')}"
            )
            await self._send_error("You can only register as yourself")
            return

        group = user_channel(self.user.id)
        await self._join(group)
        await self.send_json({"type": "registered", "room_id": group})

    async def _handle_join_room(self, content):
        """
        Join a conversation room.

        The room must be a pair channel containing the user, and the other
        user must be a connection.
        """
        room_id = content.get("room_id")
        try:
            user_ids = parse_pair_channel(room_id)
        except ValidationError as e:
            await self._send_error(e.message)
            return

        own_id = str(self.user.id)
        if own_id not in user_ids:
            logger.warning(f"User {own_id} tried to join foreign room {room_id}")
            await self._send_error("You are not a participant in this room")
            return

        counterpart_id = user_ids[1] if user_ids[0] == own_id else user_ids[0]
        if not await self._can_message(counterpart_id):
            logger.warning(
                f"User {own_id} tried to join room {room_id} without a connection"
            )
            await self._send_error("You can only join rooms with your connections")
            return

        await self._join(room_id)
        await self.send_json({"type": "joined", "room_id": room_id})

    async def _handle_leave_room(self, content):
        """Leave a conversation room. The user channel is only left on disconnect."""
        room_id = content.get("room_id")
        try:
            parse_pair_channel(room_id)
        except ValidationError as e:
            await self._send_error(e.message)
            return

        if room_id in self.joined_groups:
            await self._leave(room_id)
        await self.send_json({"type": "left", "room_id": room_id})

    async def chat_event(self, event):
        """
        Handle chat.event messages from the channel layer.

        Sends {"type": <event name>, **payload} to the WebSocket client.
        """
        await self.send_json({"type": event["event"], **event["payload"]})

    async def _join(self, group: str):
        await self.channel_layer.group_add(group, self.channel_name)
        self.joined_groups.add(group)

    async def _leave(self, group: str):
        await self.channel_layer.group_discard(group, self.channel_name)
        self.joined_groups.discard(group)

    async def _send_error(self, message: str):
        await self.send_json({"type": "error", "message": message})

    @database_sync_to_async
    def _can_message(self, counterpart_id) -> bool:
        return ConnectionService.can_message(self.user.id, counterpart_id)

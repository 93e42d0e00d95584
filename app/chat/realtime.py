"""
Realtime publishers.

A publisher delivers one event to one channel id. The chat core only
computes channel ids and payloads; delivering them to sockets is the
channel layer's job.

Publishers:
    ChannelLayerPublisher: group_send to the Channels layer (default)
    InMemoryPublisher: Records publications in a list

The class used at runtime is settings.CHAT_REALTIME_PUBLISHER.

Usage:
    from chat.realtime import get_publisher

    get_publisher().publish("user.7", "chat:unread-total", {"count": 3})
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Protocol

from asgiref.sync import async_to_sync
from channels.layers import get_channel_layer
from django.conf import settings
from django.utils.module_loading import import_string

from core.exceptions import ExternalServiceError

from chat.constants import REALTIME_CONFIG

logger = logging.getLogger(__name__)


class Publisher(Protocol):
    """Anything that can deliver an event to a channel id."""

    def publish(self, channel_id: str, event: str, payload: dict[str, Any]) -> None:
        ...


class ChannelLayerPublisher:
    """
    Publish through the Django Channels layer.

    Each publication becomes a group_send to the group named by the channel
    id. ChatConsumer.chat_event forwards it to the socket.
    """

    def __init__(self, channel_layer=None):
        self._channel_layer = channel_layer

    @property
    def channel_layer(self):
        if self._channel_layer is None:
            self._channel_layer = get_channel_layer()
        return self._channel_layer

    def publish(self, channel_id: str, event: str, payload: dict[str, Any]) -> None:
        """
        Send ``event`` to every socket in the ``channel_id`` group.

        Raises:
            ExternalServiceError: No layer is configured or the send failed
        """
        layer = self.channel_layer
        if layer is None:
            raise ExternalServiceError(
                "No channel layer is configured",
                error_code="CHANNEL_LAYER_MISSING",
            )

        try:
            async_to_sync(layer.group_send)(
                channel_id,
                {
                    "type": REALTIME_CONFIG.GROUP_MESSAGE_TYPE,
                    "event": event,
                    "payload": payload,
                },
            )
        except Exception as e:
            raise ExternalServiceError(
                f"Failed to publish {event} to {channel_id}: {e}",
                error_code="PUBLISH_FAILED",
            ) from e

        logger.debug(f"Published {event} to {channel_id}")


@dataclass(frozen=True)
class Publication:
    channel_id: str
    event: str
    payload: dict[str, Any]


class InMemoryPublisher:
    """
    Publisher that keeps every publication in order.

    Used by tests and local tooling in place of the channel layer.
    """

    def __init__(self):
        self.publications: list[Publication] = []

    def publish(self, channel_id: str, event: str, payload: dict[str, Any]) -> None:
        self.publications.append(Publication(channel_id, event, payload))

    def events(self, channel_id: str | None = None, event: str | None = None):
        """Publications filtered by channel id and/or event name."""
        return [
            publication
            for publication in self.publications
            if (channel_id is None or publication.channel_id == channel_id)
            and (event is None or publication.event == event)
        ]

    def clear(self) -> None:
        self.publications.clear()


def get_publisher() -> Publisher:
    """Instantiate the configured publisher class."""
    return import_string(settings.CHAT_REALTIME_PUBLISHER)()

"""
Fan-out of realtime updates after a chat mutation.

After a send or a bulk mark-read, both participants need fresh state:
the conversation summary on each side, the affected unread total, and
on the pair channel the raw message or the read receipt.

Publication is best-effort. A failed publication is logged and the
remaining publications still go out; the mutation that triggered them
is never rolled back.

Publication order:
    send:       chat:message (pair channel, synchronous, see message_created)
                then, from a Celery task (see message_sent):
                chat:conversation-updated to sender and receiver
                chat:unread-total to the receiver
    mark-read:  chat:conversation-updated to reader and counterpart
                chat:unread-total to the reader
                chat:messages-read (pair channel)

Usage:
    from chat.fanout import ConversationFanout

    fanout = ConversationFanout()
    fanout.message_created(message)
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from chat.constants import REALTIME_CONFIG
from chat.models import Message
from chat.realtime import get_publisher
from chat.rooms import pair_channel, user_channel
from chat.serializers import MessageSerializer
from chat.summaries import fetch_summary

if TYPE_CHECKING:
    from chat.realtime import Publisher

logger = logging.getLogger(__name__)


class ConversationFanout:
    """
    Publishes conversation state to the realtime channels.

    Args:
        publisher: Publisher to use; defaults to the configured one
    """

    def __init__(self, publisher: Publisher | None = None):
        self.publisher = publisher if publisher is not None else get_publisher()

    def message_created(self, message: Message) -> bool:
        """Publish the raw message to the pair channel."""
        room_id = pair_channel(message.sender_id, message.receiver_id)
        return self._publish(
            room_id,
            REALTIME_CONFIG.EVENT_MESSAGE,
            {"message": dict(MessageSerializer(message).data), "room_id": room_id},
        )

    def message_sent(self, sender_id, receiver_id) -> None:
        """
        Refresh both sides of a conversation after a send.

        The sender's own unread total cannot change, so it is not published.
        """
        self.conversation_updated(sender_id, receiver_id)
        self.conversation_updated(receiver_id, sender_id)
        self.unread_total(receiver_id)

    def messages_read(self, reader_id, other_user_id) -> None:
        """Refresh both sides after ``reader_id`` read ``other_user_id``'s messages."""
        self.conversation_updated(reader_id, other_user_id)
        self.conversation_updated(other_user_id, reader_id)
        self.unread_total(reader_id)
        self._publish(
            pair_channel(reader_id, other_user_id),
            REALTIME_CONFIG.EVENT_MESSAGES_READ,
            {"reader_id": reader_id, "other_user_id": other_user_id},
        )

    def conversation_updated(self, viewer_id, counterpart_id) -> bool:
        """
        Publish the viewer's summary of the conversation to the viewer.

        Nothing is published when the summary is absent. A DatabaseError
        while building the summary propagates so the calling task retries.
        """
        summary = fetch_summary(viewer_id, counterpart_id)
        if summary is None:
            logger.debug(
                f"No summary for viewer {viewer_id} and counterpart "
                f"{counterpart_id}; skipping conversation update"
            )
            return False

        return self._publish(
            user_channel(viewer_id),
            REALTIME_CONFIG.EVENT_CONVERSATION_UPDATED,
            {"conversation": summary.to_dict()},
        )

    def unread_total(self, user_id) -> bool:
        """Publish the user's total unread count to the user."""
        count = Message.objects.unread_for(user_id).count()
        return self._publish(
            user_channel(user_id),
            REALTIME_CONFIG.EVENT_UNREAD_TOTAL,
            {"count": count},
        )

    def _publish(self, channel_id: str, event: str, payload: dict[str, Any]) -> bool:
        try:
            self.publisher.publish(channel_id, event, payload)
        except Exception:
            logger.exception(f"Failed to publish {event} to {channel_id}")
            return False
        return True

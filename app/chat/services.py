"""
Chat system service layer.

This module provides the business logic for direct messaging between
connected users.

Services:
    MessageService: Send, list and mark-read messages; unread counts
    ConversationService: Conversation summaries for the inbox

Design Principles:
    - Services are stateless (use class methods)
    - Expected failures return ServiceResult.failure()
    - Unexpected failures raise exceptions
    - Only connected users may exchange or read messages
      (see ConnectionService.can_message)
    - Realtime fan-out never fails the mutation that triggered it

Usage:
    from chat.services import MessageService, ConversationService

    # Send a message
    result = MessageService.send_message(
        sender=user,
        receiver_id=other_user.id,
        content="Hello!",
    )
    if result.success:
        message = result.data

    # Inbox
    summaries = ConversationService.list_recent_conversations(user.id)
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from django.contrib.auth import get_user_model
from django.utils import timezone
from kombu.exceptions import OperationalError

from connections.services import ConnectionService
from core.services import BaseService, ServiceResult

from chat import tasks
from chat.constants import MESSAGE_CONFIG
from chat.fanout import ConversationFanout
from chat.models import Message
from chat.summaries import build_summary, list_recent_summaries

if TYPE_CHECKING:
    from authentication.models import User
    from chat.summaries import ConversationSummary

logger = logging.getLogger(__name__)


def _schedule(task, *args) -> None:
    """Queue a fan-out task; a broker outage only costs realtime freshness."""
    try:
        task.delay(*args)
    except OperationalError:
        logger.exception(f"Failed to schedule {task.name} with args {args}")


class MessageService(BaseService):
    """
    Service for message operations.

    Methods:
        send_message: Send a text message to a connected user
        list_messages: Conversation history, marking inbound messages read
        mark_read: Mark all messages from a counterpart as read
        get_unread_total: Unread messages addressed to a user
        get_unread_count: Unread messages from one counterpart
    """

    @classmethod
    def _not_connected(cls, user_id, counterpart_id, action: str) -> ServiceResult:
        cls.get_logger().warning(
            f"User {user_id} tried to {action} user {counterpart_id} "
            "without a connection"
        )
        return ServiceResult.failure(
            "You can only message users you are connected with",
            error_code="NOT_CONNECTED",
        )

    @classmethod
    def send_message(
        cls,
        sender: User,
        receiver_id,
        content: str | None,
    ) -> ServiceResult[Message]:
        """
        Send a text message.

        On success the raw message is published to the pair channel before
        this method returns. Summary and unread-total updates are handed to
        a Celery task.

        Args:
            sender: User sending the message
            receiver_id: ID of the user the message is addressed to
            content: Message text (trimmed before storage)

        Returns:
            ServiceResult with the new Message

        Error codes:
            MISSING_RECEIVER: No receiver given
            EMPTY_CONTENT: Content is empty after trimming
            CONTENT_TOO_LONG: Content exceeds MESSAGE_CONFIG.MAX_CONTENT_LENGTH
            SELF_MESSAGE: Sender and receiver are the same user
            USER_NOT_FOUND: Receiver does not exist
            NOT_CONNECTED: Sender and receiver are not connected
        """
        if receiver_id is None or str(receiver_id).strip() == "":
            return ServiceResult.failure(
                "A receiver is required",
                error_code="MISSING_RECEIVER",
            )

        content = content.strip() if content else ""
        if len(content) < MESSAGE_CONFIG.MIN_CONTENT_LENGTH:
            return ServiceResult.failure(
                "Message content cannot be empty",
                error_code="EMPTY_CONTENT",
            )
        if len(content) > MESSAGE_CONFIG.MAX_CONTENT_LENGTH:
            return ServiceResult.failure(
                f"Message content cannot exceed "
                f"{MESSAGE_CONFIG.MAX_CONTENT_LENGTH:,} characters",
                error_code="CONTENT_TOO_LONG",
            )

        if str(receiver_id) == str(sender.id):
            return ServiceResult.failure(
                "You cannot message yourself",
                error_code="SELF_MESSAGE",
            )

        if not get_user_model().objects.filter(pk=receiver_id).exists():
            return ServiceResult.failure(
                "Receiver not found",
                error_code="USER_NOT_FOUND",
            )

        if not ConnectionService.can_message(sender.id, receiver_id):
            return cls._not_connected(sender.id, receiver_id, "message")

        with cls.atomic():
            message = Message.objects.create(
                sender=sender,
                receiver_id=receiver_id,
                content=content,
            )

        cls.get_logger().info(
            f"User {sender.id} sent message {message.id} to user {receiver_id}"
        )

        ConversationFanout().message_created(message)
        _schedule(tasks.fan_out_message_sent, message.sender_id, message.receiver_id)

        return ServiceResult.success(message)

    @classmethod
    def list_messages(
        cls,
        viewer: User,
        counterpart_id,
    ) -> ServiceResult[list[Message]]:
        """
        Get every message between the viewer and a counterpart.

        Messages are in (created_at, id) order, oldest first. Reading a
        conversation marks the counterpart's messages to the viewer as
        read; the returned messages already reflect that.

        Error codes:
            NOT_CONNECTED: Viewer and counterpart are not connected
        """
        if not ConnectionService.can_message(viewer.id, counterpart_id):
            return cls._not_connected(viewer.id, counterpart_id, "read messages with")

        messages = list(
            Message.objects.between(viewer.id, counterpart_id).order_by(
                "created_at", "id"
            )
        )

        if cls._mark_read(viewer.id, counterpart_id):
            for message in messages:
                if message.is_inbound_for(viewer.id):
                    message.read = True

        cls.get_logger().debug(
            f"User {viewer.id} fetched {len(messages)} messages "
            f"with user {counterpart_id}"
        )
        return ServiceResult.success(messages)

    @classmethod
    def mark_read(cls, viewer: User, counterpart_id) -> ServiceResult[int]:
        """
        Mark every unread message from the counterpart to the viewer as read.

        Returns:
            ServiceResult with the number of messages updated

        Error codes:
            NOT_CONNECTED: Viewer and counterpart are not connected
        """
        if not ConnectionService.can_message(viewer.id, counterpart_id):
            return cls._not_connected(viewer.id, counterpart_id, "mark read")

        return ServiceResult.success(cls._mark_read(viewer.id, counterpart_id))

    @classmethod
    def _mark_read(cls, viewer_id, counterpart_id) -> int:
        """
        Bulk-update read state and fan out when anything changed.

        Repeating the call is harmless: nothing matches the second time and
        nothing is published.
        """
        rows = Message.objects.unread_from(counterpart_id, viewer_id).update(
            read=True,
            updated_at=timezone.now(),
        )

        if rows:
            cls.get_logger().info(
                f"User {viewer_id} marked {rows} messages from user "
                f"{counterpart_id} as read"
            )
            _schedule(tasks.fan_out_messages_read, viewer_id, counterpart_id)
        return rows

    @classmethod
    def get_unread_total(cls, user_id) -> int:
        """Number of unread messages addressed to the user, from anyone."""
        return Message.objects.unread_for(user_id).count()

    @classmethod
    def get_unread_count(cls, viewer_id, counterpart_id) -> int:
        """Number of unread messages from the counterpart to the viewer."""
        return Message.objects.unread_from(counterpart_id, viewer_id).count()


class ConversationService(BaseService):
    """
    Service for conversation summaries.

    A conversation is the set of messages between two users; it has no row
    of its own, so these are read-only views.

    Methods:
        build_summary: One conversation as the viewer sees it
        list_recent_conversations: The viewer's inbox, newest first
    """

    @classmethod
    def build_summary(cls, viewer_id, counterpart_id) -> ConversationSummary | None:
        """
        Summary of the viewer's conversation with the counterpart.

        Returns None when the counterpart has no profile or no message has
        been exchanged.
        """
        return build_summary(viewer_id, counterpart_id)

    @classmethod
    def list_recent_conversations(cls, viewer_id) -> list[ConversationSummary]:
        """Every conversation the viewer has, most recent last message first."""
        summaries = list_recent_summaries(viewer_id)
        cls.get_logger().debug(
            f"Built {len(summaries)} conversation summaries for user {viewer_id}"
        )
        return summaries

"""
Serializers for chat API.

This module provides serializers for the chat system:
- Message serializers (read, create)
- Conversation summary serializer

The same serializers shape realtime payloads, so an HTTP response and
a websocket event for the same object are identical.

Serializer Hierarchy:
    MessageSerializer: Message as returned by the API and realtime events
    MessageCreateSerializer: Send new message
    ConversationSummarySerializer: One entry of the recent-conversations list

Design Decisions:
    - Read and write serializers are separate for clarity
    - The create serializer is permissive; content rules live in
      MessageService so the error codes are the same for every caller
"""

from __future__ import annotations

from rest_framework import serializers

from chat.constants import MESSAGE_CONFIG
from chat.models import Message


# =============================================================================
# Message Serializers
# =============================================================================


class MessageSerializer(serializers.ModelSerializer):
    """Message with sender/receiver ids and read state."""

    sender_id = serializers.IntegerField(read_only=True)
    receiver_id = serializers.IntegerField(read_only=True)

    class Meta:
        model = Message
        fields = [
            "id",
            "sender_id",
            "receiver_id",
            "content",
            "read",
            "created_at",
        ]
        read_only_fields = fields


class MessageCreateSerializer(serializers.Serializer):
    """
    Serializer for sending messages.

    Both fields are optional here; MessageService reports missing receivers
    and empty content with their own error codes.
    """

    receiver_id = serializers.IntegerField(
        required=False,
        allow_null=True,
        help_text="User the message is addressed to",
    )
    content = serializers.CharField(
        required=False,
        allow_blank=True,
        trim_whitespace=False,
        default="",
        help_text=(
            f"Message text (max {MESSAGE_CONFIG.MAX_CONTENT_LENGTH:,} "
            "characters after trimming)"
        ),
    )


# =============================================================================
# Conversation Serializers
# =============================================================================


class ConversationSummarySerializer(serializers.Serializer):
    """
    Read serializer for chat.summaries.ConversationSummary.

    ``id`` is the counterpart's user id. ``avatar`` and ``profile_image``
    carry the same value.
    """

    id = serializers.IntegerField(read_only=True)
    username = serializers.CharField(read_only=True, allow_null=True)
    display_name = serializers.CharField(read_only=True, allow_null=True)
    details = serializers.DictField(read_only=True)
    avatar = serializers.CharField(read_only=True, allow_null=True)
    profile_image = serializers.CharField(read_only=True, allow_null=True)
    last_message = MessageSerializer(read_only=True)
    unread_count = serializers.IntegerField(read_only=True)

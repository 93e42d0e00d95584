"""
Chat system models.

This module defines the data model for direct (1:1) messaging between
connected users.

Models:
    Message: A single message from one user to another

Design Decisions:
    - There is no conversation table; a conversation is the set of messages
      exchanged between two users, in either direction
    - Read state lives on the message itself and only ever goes
      false -> true, set in bulk by the receiver
    - Ordering is (created_at, id) so messages created in the same instant
      still have a deterministic order
"""

from __future__ import annotations

from django.conf import settings
from django.db import models
from django.db.models import Q

from core.models import BaseModel


class MessageQuerySet(models.QuerySet):
    """
    Chainable filters for the direct-message predicates.

    Methods:
        between: Messages exchanged between two users, both directions
        involving: Messages a user sent or received
        unread_for: Unread messages addressed to a user
        unread_from: Unread messages from one user to another
    """

    def between(self, user_a_id, user_b_id) -> MessageQuerySet:
        return self.filter(
            Q(sender_id=user_a_id, receiver_id=user_b_id)
            | Q(sender_id=user_b_id, receiver_id=user_a_id)
        )

    def involving(self, user_id) -> MessageQuerySet:
        return self.filter(Q(sender_id=user_id) | Q(receiver_id=user_id))

    def unread_for(self, receiver_id) -> MessageQuerySet:
        return self.filter(receiver_id=receiver_id, read=False)

    def unread_from(self, sender_id, receiver_id) -> MessageQuerySet:
        return self.filter(sender_id=sender_id, receiver_id=receiver_id, read=False)

    def newest_first(self) -> MessageQuerySet:
        return self.order_by("-created_at", "-id")


class Message(BaseModel):
    """
    A direct message.

    Fields:
        sender: User who sent the message
        receiver: User the message is addressed to
        content: Trimmed, non-empty message text
        read: Whether the receiver has read the message

    Invariants:
        - sender != receiver (enforced by the connection gate, which never
          connects a user with themselves)
        - read only transitions from False to True
    """

    sender = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="sent_messages",
        help_text="User who sent this message",
    )

    receiver = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="received_messages",
        help_text="User this message is addressed to",
    )

    content = models.TextField(
        help_text="Message text",
    )

    read = models.BooleanField(
        default=False,
        help_text="Whether the receiver has read this message",
    )

    objects = MessageQuerySet.as_manager()

    class Meta:
        db_table = "chat_message"
        ordering = ["created_at", "id"]
        indexes = [
            models.Index(
                fields=["sender", "receiver", "read"],
                name="chat_msg_pair_read_idx",
            ),
            models.Index(
                fields=["receiver", "read"],
                name="chat_msg_receiver_read_idx",
            ),
        ]

    def __str__(self) -> str:
        return f"Message {self.pk} ({self.sender_id} -> {self.receiver_id})"

    def is_inbound_for(self, user_id) -> bool:
        """True if this message was addressed to ``user_id``."""
        return str(self.receiver_id) == str(user_id)

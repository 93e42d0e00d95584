"""
Celery tasks for chat app.

This module defines async tasks for:
- Conversation fan-out after a message is sent
- Conversation fan-out after messages are marked read

Related files:
    - fanout.py: ConversationFanout
    - services.py: MessageService (schedules these tasks)

Usage:
    from chat.tasks import fan_out_message_sent

    fan_out_message_sent.delay(sender_id, receiver_id)
"""

import logging

from celery import shared_task
from django.db import DatabaseError

from chat.constants import REALTIME_CONFIG
from chat.fanout import ConversationFanout

logger = logging.getLogger(__name__)


@shared_task(
    bind=True,
    autoretry_for=(DatabaseError,),
    retry_backoff=True,
    retry_kwargs={"max_retries": REALTIME_CONFIG.FANOUT_MAX_RETRIES},
)
def fan_out_message_sent(self, sender_id: int, receiver_id: int) -> None:
    """
    Publish updated summaries and the receiver's unread total after a send.

    Args:
        sender_id: ID of the user who sent the message
        receiver_id: ID of the user who received it
    """
    logger.debug(
        f"Fanning out message sent from {sender_id} to {receiver_id} "
        f"(attempt {self.request.retries + 1})"
    )
    ConversationFanout().message_sent(sender_id, receiver_id)


@shared_task(
    bind=True,
    autoretry_for=(DatabaseError,),
    retry_backoff=True,
    retry_kwargs={"max_retries": REALTIME_CONFIG.FANOUT_MAX_RETRIES},
)
def fan_out_messages_read(self, reader_id: int, other_user_id: int) -> None:
    """
    Publish updated summaries, the reader's unread total and the read receipt.

    Args:
        reader_id: ID of the user who read the messages
        other_user_id: ID of the user whose messages were read
    """
    logger.debug(
        f"Fanning out messages read by {reader_id} from {other_user_id} "
        f"(attempt {self.request.retries + 1})"
    )
    ConversationFanout().messages_read(reader_id, other_user_id)

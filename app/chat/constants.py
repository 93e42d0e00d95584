"""
Constants and configuration for the chat module.

This module centralizes configuration values for:
- Message content limits
- Realtime event names and channel naming
- Websocket control frames

Import example:
    from chat.constants import MESSAGE_CONFIG, REALTIME_CONFIG
"""

from typing import Final


# =============================================================================
# Message Configuration
# =============================================================================


class MESSAGE_CONFIG:
    """Configuration for message operations."""

    # Content limits (after trimming)
    MAX_CONTENT_LENGTH: Final[int] = 5000  # Characters
    MIN_CONTENT_LENGTH: Final[int] = 1


# =============================================================================
# Realtime Configuration
# =============================================================================


class REALTIME_CONFIG:
    """
    Configuration for realtime publication.

    Channel ids double as channel-layer group names, so they may only use
    ASCII letters, digits, hyphens, underscores and periods.
    """

    # Event names (wire contract, shared with clients)
    EVENT_MESSAGE: Final[str] = "chat:message"
    EVENT_CONVERSATION_UPDATED: Final[str] = "chat:conversation-updated"
    EVENT_UNREAD_TOTAL: Final[str] = "chat:unread-total"
    EVENT_MESSAGES_READ: Final[str] = "chat:messages-read"

    # Channel naming
    USER_CHANNEL_PREFIX: Final[str] = "user."
    PAIR_CHANNEL_SEPARATOR: Final[str] = "_"

    # Channel-layer message type, dispatched to ChatConsumer.chat_event
    GROUP_MESSAGE_TYPE: Final[str] = "chat.event"

    # Fan-out task retries
    FANOUT_MAX_RETRIES: Final[int] = 3


# =============================================================================
# Websocket Control Frames
# =============================================================================


class CONTROL_MESSAGES:
    """Frame types a client may send over the chat websocket."""

    REGISTER_USER: Final[str] = "registerUser"
    JOIN_ROOM: Final[str] = "joinRoom"
    LEAVE_ROOM: Final[str] = "leaveRoom"


# Close code for unauthenticated sockets
WS_CLOSE_UNAUTHENTICATED: Final[int] = 4001

"""
Chat app for direct messaging.

This app handles:
- Direct messages between connected users
- Read state and unread counts
- Conversation summaries for the inbox
- Realtime fan-out over WebSocket

Related apps:
    - authentication: User and Profile
    - connections: Follow graph that gates messaging

WebSocket Support:
    Uses Django Channels for real-time communication.
    See consumers.py for WebSocket handlers.
    See routing.py for WebSocket URL patterns.

Usage:
    from chat.services import MessageService

    result = MessageService.send_message(
        sender=user,
        receiver_id=other_user.id,
        content="Hello!",
    )
"""

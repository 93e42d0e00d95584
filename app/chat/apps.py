"""
Chat application configuration.

This app provides direct messaging with:
- Messages gated by the follow graph
- Bulk read tracking and unread counts
- Realtime conversation updates over Channels
"""

from django.apps import AppConfig


class ChatConfig(AppConfig):
    """Configuration for the chat application."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "chat"
    verbose_name = "Chat"

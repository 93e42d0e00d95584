"""
Django admin configuration for chat models.

Provides admin interfaces for:
- Message moderation
"""

from django.contrib import admin

from chat.models import Message


@admin.register(Message)
class MessageAdmin(admin.ModelAdmin):
    """Admin interface for Message model."""

    list_display = [
        "id",
        "sender",
        "receiver",
        "content_preview",
        "read",
        "created_at",
    ]
    list_filter = ["read", "created_at"]
    search_fields = ["content", "sender__email", "receiver__email"]
    raw_id_fields = ["sender", "receiver"]
    readonly_fields = ["created_at", "updated_at"]
    ordering = ["-created_at"]

    @admin.display(description="Content")
    def content_preview(self, obj):
        return obj.content[:50] + "..." if len(obj.content) > 50 else obj.content

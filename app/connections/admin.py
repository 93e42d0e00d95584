"""
Django admin configuration for connection models.
"""

from django.contrib import admin

from connections.models import Follow


@admin.register(Follow)
class FollowAdmin(admin.ModelAdmin):
    list_display = ("follower", "following", "created_at")
    search_fields = ("follower__email", "following__email")
    raw_id_fields = ("follower", "following")
    date_hierarchy = "created_at"

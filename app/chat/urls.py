"""
URL configuration for the messages API.

URL Structure:
    /send/                   POST  Send a message
    /recent/                 GET   Recent conversations
    /unread-count/           GET   Total unread messages
    /{user_id}/              GET   Messages with a user
    /{user_id}/mark-read/    POST  Mark a user's messages read

All URLs are prefixed with /api/v1/messages/ in the main URL configuration.
"""

from django.urls import path

from chat import views

app_name = "chat"

urlpatterns = [
    path("send/", views.SendMessageView.as_view(), name="send"),
    path("recent/", views.RecentConversationsView.as_view(), name="recent"),
    path("unread-count/", views.UnreadCountView.as_view(), name="unread-count"),
    path(
        "<int:user_id>/mark-read/",
        views.MarkReadView.as_view(),
        name="mark-read",
    ),
    path(
        "<int:user_id>/",
        views.ConversationMessagesView.as_view(),
        name="conversation",
    ),
]

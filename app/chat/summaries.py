"""
Conversation summaries.

A summary is the viewer's view of one conversation: the counterpart's
profile, the last message exchanged and how many messages from the
counterpart the viewer has not read. Summaries are derived on demand and
never stored.

A summary exists only when the counterpart has a profile and at least one
message has been exchanged. Otherwise the builder returns None, which
callers treat as "nothing to show" rather than as an error.

Usage:
    from chat.summaries import build_summary

    summary = build_summary(viewer.id, counterpart_id)
    if summary is not None:
        payload = summary.to_dict()
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from django.db import DatabaseError

from authentication.models import Profile

from chat.models import Message
from chat.serializers import ConversationSummarySerializer

if TYPE_CHECKING:
    from collections.abc import Iterable

logger = logging.getLogger(__name__)


@dataclass
class ConversationSummary:
    """
    One conversation as seen by a viewer.

    Attributes:
        id: Counterpart user id
        username: Counterpart username
        display_name: Counterpart display name, falling back to username
        details: Profile detail fields (empty values are None)
        avatar: Counterpart avatar
        profile_image: Same value as avatar, kept for older clients
        last_message: Most recent Message between the two users
        unread_count: Messages from the counterpart the viewer has not read
    """

    id: int
    username: str | None
    display_name: str | None
    avatar: str | None
    profile_image: str | None
    last_message: Message
    unread_count: int = 0
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def sort_key(self) -> tuple:
        return (self.last_message.created_at, self.last_message.id)

    def to_dict(self) -> dict[str, Any]:
        """JSON-safe representation, as sent over HTTP and realtime."""
        return dict(ConversationSummarySerializer(self).data)


def normalize_profile(profile: Profile | None) -> dict[str, Any] | None:
    """
    Public profile fields in the shape summaries expose.

    Returns None when there is no profile.
    """
    if profile is None:
        return None

    avatar = profile.avatar or None
    return {
        "id": profile.user_id,
        "username": profile.username or None,
        "display_name": profile.display_name or profile.username or None,
        "details": profile.get_details(),
        "avatar": avatar,
        "profile_image": avatar,
    }


def _fetch_profile(user_id) -> Profile | None:
    return Profile.objects.filter(user_id=user_id).first()


def _fetch_last_message(viewer_id, counterpart_id) -> Message | None:
    return Message.objects.between(viewer_id, counterpart_id).newest_first().first()


def _fetch_unread_count(viewer_id, counterpart_id) -> int:
    return Message.objects.unread_from(counterpart_id, viewer_id).count()


def fetch_summary(viewer_id, counterpart_id) -> ConversationSummary | None:
    """
    Build the viewer's summary of the conversation with ``counterpart_id``.

    The profile, last message and unread count are independent reads.
    They run one after another on the caller's database connection: the
    ORM is synchronous and connections are per thread, so splitting them
    across threads would read outside the caller's transaction.

    Raises:
        DatabaseError: Propagated so Celery callers can retry

    Returns:
        ConversationSummary, or None if there is no conversation to show
    """
    profile = _fetch_profile(counterpart_id)
    last_message = _fetch_last_message(viewer_id, counterpart_id)
    unread_count = _fetch_unread_count(viewer_id, counterpart_id)

    public = normalize_profile(profile)
    if public is None or last_message is None:
        return None

    return ConversationSummary(
        last_message=last_message,
        unread_count=unread_count,
        **public,
    )


def build_summary(viewer_id, counterpart_id) -> ConversationSummary | None:
    """
    Like fetch_summary, but a database error is logged and yields None.

    Used for listings, where one broken conversation must not fail the rest.
    """
    try:
        return fetch_summary(viewer_id, counterpart_id)
    except DatabaseError:
        logger.exception(
            f"Failed to build conversation summary for viewer {viewer_id} "
            f"and counterpart {counterpart_id}"
        )
        return None


def recent_counterpart_ids(viewer_id) -> list:
    """
    Distinct counterparts of ``viewer_id``, most recent conversation first.
    """
    pairs = (
        Message.objects.involving(viewer_id)
        .newest_first()
        .values_list("sender_id", "receiver_id")
    )

    seen = set()
    ordered = []
    for sender_id, receiver_id in pairs.iterator():
        counterpart_id = receiver_id if str(sender_id) == str(viewer_id) else sender_id
        if counterpart_id not in seen:
            seen.add(counterpart_id)
            ordered.append(counterpart_id)
    return ordered


def sort_summaries(
    summaries: Iterable[ConversationSummary],
) -> list[ConversationSummary]:
    """Order summaries by last message (created_at, id), newest first."""
    return sorted(summaries, key=lambda summary: summary.sort_key, reverse=True)


def list_recent_summaries(viewer_id) -> list[ConversationSummary]:
    """
    Summaries of every conversation the viewer has, newest first.

    Conversations whose summary is absent are left out.
    """
    summaries = []
    for counterpart_id in recent_counterpart_ids(viewer_id):
        summary = build_summary(viewer_id, counterpart_id)
        if summary is not None:
            summaries.append(summary)
    return sort_summaries(summaries)

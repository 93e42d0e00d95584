"""
Realtime channel addressing.

Every realtime publication goes to one of two kinds of channel:

    pair channel: shared by the two participants of a conversation,
        "{lo}_{hi}" where lo/hi are the two user ids as strings, sorted
        lexicographically. pair_channel(a, b) == pair_channel(b, a).
    user channel: private to one user, "user.{id}".

Both forms are valid channel-layer group names.

Usage:
    from chat.rooms import pair_channel, user_channel

    room_id = pair_channel(sender.id, receiver.id)   # e.g. "12_7"
    user_channel(receiver.id)                         # e.g. "user.7"
"""

from __future__ import annotations

from core.exceptions import ValidationError

from chat.constants import REALTIME_CONFIG


def _require_id(user_id, label: str) -> str:
    if user_id is None:
        raise ValidationError(f"{label} is required", error_code="MISSING_USER_ID")

    value = str(user_id).strip()
    if not value:
        raise ValidationError(f"{label} is required", error_code="MISSING_USER_ID")
    return value


def pair_channel(user_a_id, user_b_id) -> str:
    """
    Channel id shared by two users.

    Ids are compared as strings, so "10" sorts before "9". This keeps the
    ordering stable whatever type the caller holds the ids in.

    Raises:
        ValidationError: If either id is missing (MISSING_USER_ID)
    """
    low, high = sorted(
        (_require_id(user_a_id, "user_a_id"), _require_id(user_b_id, "user_b_id"))
    )
    return f"{low}{REALTIME_CONFIG.PAIR_CHANNEL_SEPARATOR}{high}"


def user_channel(user_id) -> str:
    """
    Channel id private to one user.

    Raises:
        ValidationError: If the id is missing (MISSING_USER_ID)
    """
    return f"{REALTIME_CONFIG.USER_CHANNEL_PREFIX}{_require_id(user_id, 'user_id')}"


def parse_pair_channel(channel_id) -> tuple[str, str]:
    """
    Split a pair channel id back into its two user ids.

    Only canonical ids (as produced by pair_channel) are accepted.

    Raises:
        ValidationError: INVALID_ROOM if the id is not a canonical pair channel
    """
    parts = str(channel_id or "").split(REALTIME_CONFIG.PAIR_CHANNEL_SEPARATOR)
    if len(parts) != 2 or not all(part.strip() for part in parts):
        raise ValidationError(
            f"'{channel_id}' is not a conversation room",
            error_code="INVALID_ROOM",
        )

    if pair_channel(*parts) != channel_id:
        raise ValidationError(
            f"'{channel_id}' is not a canonical conversation room",
            error_code="INVALID_ROOM",
        )
    return parts[0], parts[1]

"""
Client-side realtime view of the inbox and an open conversation.

The state a client keeps is a pure function of the events it has
received. Each reducer takes a state and one event and returns the next
state; nothing here touches the database or the network.

Events:
    RawMessage: chat:message, a new message on a pair channel
    ConversationUpdated: chat:conversation-updated, a fresh summary
    UnreadTotal: chat:unread-total, the authoritative unread total
    MessagesRead: chat:messages-read, a counterpart read our messages
    OptimisticLocalRead: Local-only, the user opened a conversation

States:
    InboxState: Conversation summaries keyed by counterpart id, plus the
        unread total. Updating a conversation replaces it in place and
        re-sorts, so a conversation never appears twice.
    ChatWindowState: The open conversation's messages, de-duplicated by id.

Side effects are returned, not performed. reduce_chat_window returns
MarkReadRequested when an inbound message arrives; RealtimeView turns
that into an optimistic local read plus the callback it was given.

Usage:
    view = RealtimeView(viewer_id=7, on_mark_read=api.mark_read)
    view.open_conversation(12, history=messages)
    view.dispatch("chat:message", {"message": {...}, "room_id": "12_7"})
    view.inbox.ordered()
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, Any, Union

from django.utils.dateparse import parse_datetime

from chat.constants import REALTIME_CONFIG
from chat.rooms import pair_channel

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

logger = logging.getLogger(__name__)


# =============================================================================
# Events
# =============================================================================


@dataclass(frozen=True)
class RawMessage:
    message: dict[str, Any]
    room_id: str


@dataclass(frozen=True)
class ConversationUpdated:
    conversation: dict[str, Any]


@dataclass(frozen=True)
class UnreadTotal:
    count: Any


@dataclass(frozen=True)
class MessagesRead:
    reader_id: Any
    other_user_id: Any


@dataclass(frozen=True)
class OptimisticLocalRead:
    counterpart_id: Any


ChatEvent = Union[
    RawMessage, ConversationUpdated, UnreadTotal, MessagesRead, OptimisticLocalRead
]


@dataclass(frozen=True)
class MarkReadRequested:
    """Ask the server to mark the counterpart's messages read."""

    counterpart_id: Any


def parse_event(name: str, payload: dict[str, Any] | None) -> ChatEvent | None:
    """
    Turn a wire event into a typed event.

    Returns None for unknown event names and malformed payloads.
    """
    payload = payload or {}

    if name == REALTIME_CONFIG.EVENT_MESSAGE:
        message = payload.get("message")
        if not isinstance(message, dict):
            return None
        return RawMessage(message=message, room_id=payload.get("room_id"))

    if name == REALTIME_CONFIG.EVENT_CONVERSATION_UPDATED:
        conversation = payload.get("conversation")
        if not isinstance(conversation, dict):
            return None
        return ConversationUpdated(conversation=conversation)

    if name == REALTIME_CONFIG.EVENT_UNREAD_TOTAL:
        return UnreadTotal(count=payload.get("count"))

    if name == REALTIME_CONFIG.EVENT_MESSAGES_READ:
        return MessagesRead(
            reader_id=payload.get("reader_id"),
            other_user_id=payload.get("other_user_id"),
        )

    logger.debug(f"Ignoring unknown chat event {name}")
    return None


# =============================================================================
# Helpers
# =============================================================================


def _same_id(a, b) -> bool:
    return a is not None and b is not None and str(a) == str(b)


def _as_count(value) -> int:
    """Non-negative int, or 0 for anything that is not a number."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0
    return max(int(value), 0)


def _recency_key(summary: dict[str, Any]) -> tuple:
    last_message = summary.get("last_message") or {}
    created_at = last_message.get("created_at")
    if isinstance(created_at, str):
        created_at = parse_datetime(created_at)
    return (created_at, last_message.get("id") or 0)


def _name_key(summary: dict[str, Any]) -> str:
    return str(summary.get("display_name") or summary.get("username") or "").casefold()


def sort_conversations(summaries: Iterable[dict[str, Any]]) -> list[dict[str, Any]]:
    """
    Order summaries for display.

    Summaries with a last message come first, newest first; ties on the
    timestamp are broken by message id. Summaries without one follow,
    alphabetically by display name.
    """
    with_message = []
    without_message = []
    for summary in summaries:
        if _recency_key(summary)[0] is not None:
            with_message.append(summary)
        else:
            without_message.append(summary)

    with_message.sort(key=_recency_key, reverse=True)
    without_message.sort(key=_name_key)
    return with_message + without_message


# =============================================================================
# Inbox
# =============================================================================


@dataclass(frozen=True)
class InboxState:
    """
    Conversation list and unread total.

    Attributes:
        conversations: Summaries keyed by str(counterpart id), in display order
        unread_total: Unread messages across all conversations
    """

    conversations: dict[str, dict[str, Any]] = field(default_factory=dict)
    unread_total: int = 0

    @classmethod
    def from_summaries(
        cls, summaries: Iterable[dict[str, Any]], unread_total: int = 0
    ) -> InboxState:
        state = cls(unread_total=_as_count(unread_total))
        for summary in summaries:
            state = reduce_inbox(state, ConversationUpdated(conversation=summary))
        return state

    def ordered(self) -> list[dict[str, Any]]:
        return list(self.conversations.values())

    def get(self, counterpart_id) -> dict[str, Any] | None:
        return self.conversations.get(str(counterpart_id))


def _merge_conversation(state: InboxState, incoming: dict[str, Any]) -> InboxState:
    if incoming.get("id") is None:
        logger.debug("Ignoring conversation update without an id")
        return state

    key = str(incoming["id"])
    merged = {**state.conversations.get(key, {}), **incoming}
    if incoming.get("last_message") is None and key in state.conversations:
        merged["last_message"] = state.conversations[key].get("last_message")
    merged["unread_count"] = _as_count(merged.get("unread_count"))

    conversations = dict(state.conversations)
    conversations[key] = merged
    ordered = sort_conversations(conversations.values())
    return replace(
        state,
        conversations={str(summary["id"]): summary for summary in ordered},
    )


def _clear_unread(state: InboxState, counterpart_id) -> InboxState:
    key = str(counterpart_id)
    summary = state.conversations.get(key)
    if summary is None:
        return state

    cleared = _as_count(summary.get("unread_count"))
    updated = {**summary, "unread_count": 0}
    last_message = summary.get("last_message")
    if isinstance(last_message, dict) and _same_id(
        last_message.get("sender_id"), counterpart_id
    ):
        updated["last_message"] = {**last_message, "read": True}

    conversations = dict(state.conversations)
    conversations[key] = updated
    return replace(
        state,
        conversations=conversations,
        unread_total=max(state.unread_total - cleared, 0),
    )


def reduce_inbox(state: InboxState, event: ChatEvent | None) -> InboxState:
    """
    Apply one event to the inbox.

    ConversationUpdated replaces the conversation by counterpart id and
    re-sorts. UnreadTotal overwrites the total. OptimisticLocalRead zeroes
    the conversation's unread count and subtracts it from the total.
    Other events leave the inbox unchanged.
    """
    if isinstance(event, ConversationUpdated):
        return _merge_conversation(state, event.conversation)
    if isinstance(event, UnreadTotal):
        return replace(state, unread_total=_as_count(event.count))
    if isinstance(event, OptimisticLocalRead):
        return _clear_unread(state, event.counterpart_id)
    return state


# =============================================================================
# Chat window
# =============================================================================


@dataclass(frozen=True)
class ChatWindowState:
    """
    An open conversation.

    Attributes:
        viewer_id: The local user
        counterpart_id: The other participant
        messages: Messages in arrival order, unique by id
    """

    viewer_id: Any
    counterpart_id: Any
    messages: tuple[dict[str, Any], ...] = ()

    @property
    def room_id(self) -> str:
        return pair_channel(self.viewer_id, self.counterpart_id)

    def with_history(self, messages: Iterable[dict[str, Any]]) -> ChatWindowState:
        """Replace the messages with a fetched history, dropping duplicate ids."""
        unique = []
        seen = set()
        for message in messages:
            message_id = message.get("id")
            if message_id is not None and message_id in seen:
                continue
            seen.add(message_id)
            unique.append(dict(message))
        return replace(self, messages=tuple(unique))

    def has_message(self, message_id) -> bool:
        return any(_same_id(m.get("id"), message_id) for m in self.messages)


def _mark_sent_by(state: ChatWindowState, sender_id) -> ChatWindowState:
    messages = tuple(
        {**m, "read": True} if _same_id(m.get("sender_id"), sender_id) else m
        for m in state.messages
    )
    return replace(state, messages=messages)


def reduce_chat_window(
    state: ChatWindowState, event: ChatEvent | None
) -> tuple[ChatWindowState, list[MarkReadRequested]]:
    """
    Apply one event to the open conversation.

    Returns:
        (next state, side effects)
    """
    if isinstance(event, RawMessage):
        if event.room_id != state.room_id:
            return state, []

        message = event.message
        if not state.has_message(message.get("id")):
            state = replace(state, messages=state.messages + (dict(message),))

        if _same_id(message.get("sender_id"), state.counterpart_id):
            return state, [MarkReadRequested(counterpart_id=state.counterpart_id)]
        return state, []

    if isinstance(event, MessagesRead):
        # The counterpart read what the viewer sent
        if _same_id(event.reader_id, state.counterpart_id) and _same_id(
            event.other_user_id, state.viewer_id
        ):
            return _mark_sent_by(state, state.viewer_id), []
        return state, []

    if isinstance(event, OptimisticLocalRead):
        if _same_id(event.counterpart_id, state.counterpart_id):
            return _mark_sent_by(state, state.counterpart_id), []
        return state, []

    return state, []


# =============================================================================
# Composition
# =============================================================================


class RealtimeView:
    """
    Inbox plus at most one open conversation, driven by wire events.

    Args:
        viewer_id: The local user
        on_mark_read: Called with a counterpart id whenever the server
            should mark that counterpart's messages read
    """

    def __init__(
        self,
        viewer_id,
        on_mark_read: Callable[[Any], None] | None = None,
        inbox: InboxState | None = None,
    ):
        self.viewer_id = viewer_id
        self.on_mark_read = on_mark_read
        self.inbox = inbox or InboxState()
        self.window: ChatWindowState | None = None

    def open_conversation(
        self, counterpart_id, history: Iterable[dict[str, Any]] = ()
    ) -> None:
        """Show a conversation and read it without waiting for the server."""
        self.window = ChatWindowState(
            viewer_id=self.viewer_id,
            counterpart_id=counterpart_id,
        ).with_history(history)
        self._read(counterpart_id)

    def close_conversation(self) -> None:
        self.window = None

    def dispatch(self, name: str, payload: dict[str, Any] | None) -> None:
        """Apply a wire event to the inbox and the open conversation."""
        self.apply(parse_event(name, payload))

    def apply(self, event: ChatEvent | None) -> None:
        if event is None:
            return

        self.inbox = reduce_inbox(self.inbox, event)
        if self.window is None:
            return

        self.window, effects = reduce_chat_window(self.window, event)
        for effect in effects:
            self._read(effect.counterpart_id)

    def _read(self, counterpart_id) -> None:
        event = OptimisticLocalRead(counterpart_id=counterpart_id)
        self.inbox = reduce_inbox(self.inbox, event)
        if self.window is not None:
            self.window, _ = reduce_chat_window(self.window, event)
        if self.on_mark_read is not None:
            self.on_mark_read(counterpart_id)

"""Conversation state snapshots and the pure transition function."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Union

from .message_store import MessageLog
from .models import FeedbackKind, Message


@dataclass(frozen=True)
class ConversationState:
    """Immutable snapshot of everything the presentation layer renders."""

    messages: MessageLog = field(default_factory=MessageLog)
    pending: bool = False
    last_error: str | None = None
    suggestions_visible: bool = True
    last_copied_id: str | None = None

    @property
    def is_empty(self) -> bool:
        return len(self.messages) == 0


@dataclass(frozen=True)
class MessageSubmitted:
    message: Message


@dataclass(frozen=True)
class ReplyReceived:
    message: Message


@dataclass(frozen=True)
class RequestFailed:
    error: str
    notice: Message


@dataclass(frozen=True)
class RequestCancelled:
    pass


@dataclass(frozen=True)
class ConversationCleared:
    pass


@dataclass(frozen=True)
class FeedbackToggled:
    message_id: str
    kind: FeedbackKind


@dataclass(frozen=True)
class MessageCopied:
    message_id: str


@dataclass(frozen=True)
class CopiedFlagExpired:
    message_id: str


@dataclass(frozen=True)
class ErrorDismissed:
    pass


ConversationEvent = Union[
    MessageSubmitted,
    ReplyReceived,
    RequestFailed,
    RequestCancelled,
    ConversationCleared,
    FeedbackToggled,
    MessageCopied,
    CopiedFlagExpired,
    ErrorDismissed,
]


def transition(state: ConversationState, event: ConversationEvent) -> ConversationState:
    """Return the state that follows ``event``.

    Events that are not allowed in the current state return ``state`` itself,
    so callers can detect a rejected event with an identity check.
    """
    if isinstance(event, MessageSubmitted):
        if state.pending or not event.message.text.strip():
            return state
        return replace(
            state,
            suggestions_visible=False,
            last_error=None,
            messages=state.messages.append(event.message),
            pending=True,
        )

    if isinstance(event, ReplyReceived):
        # A reply that lands after clear() is still appended to the new log.
        return replace(
            state,
            messages=state.messages.append(event.message),
            pending=False,
            suggestions_visible=False,
        )

    if isinstance(event, RequestFailed):
        return replace(
            state,
            last_error=event.error,
            messages=state.messages.append(event.notice),
            pending=False,
            suggestions_visible=False,
        )

    if isinstance(event, RequestCancelled):
        if not state.pending:
            return state
        return replace(state, pending=False)

    if isinstance(event, ConversationCleared):
        return replace(
            state,
            messages=MessageLog(),
            suggestions_visible=True,
            last_error=None,
            last_copied_id=None,
        )

    if isinstance(event, FeedbackToggled):
        updated = state.messages.with_feedback(event.message_id, event.kind)
        if updated is state.messages:
            return state
        return replace(state, messages=updated)

    if isinstance(event, MessageCopied):
        if state.messages.get(event.message_id) is None:
            return state
        return replace(state, last_copied_id=event.message_id)

    if isinstance(event, CopiedFlagExpired):
        if state.last_copied_id != event.message_id:
            return state
        return replace(state, last_copied_id=None)

    if isinstance(event, ErrorDismissed):
        if state.last_error is None:
            return state
        return replace(state, last_error=None)

    raise TypeError(f"Unsupported conversation event: {event!r}")

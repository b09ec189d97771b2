"""Conversation controller: the message log, the send pipeline, and feedback."""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Sequence
import logging
from typing import Protocol

from .backend import PLACEHOLDER_REPLY
from .exceptions import BackendTransportError
from .logging_utils import log_event
from .models import FeedbackKind, Message, SubmitOrigin, SubmitOutcome
from .state import (
    ConversationCleared,
    ConversationEvent,
    ConversationState,
    CopiedFlagExpired,
    ErrorDismissed,
    FeedbackToggled,
    MessageCopied,
    MessageSubmitted,
    ReplyReceived,
    RequestCancelled,
    RequestFailed,
    transition,
)

LOGGER = logging.getLogger(__name__)

CONNECTIVITY_ERROR = (
    "Could not reach Study Buddy. Check your connection and make sure the server is running."
)
FAILURE_NOTICE = (
    "Error: Could not get response from server. Check your backend connection and try again."
)

StateListener = Callable[[ConversationState], None]
Clipboard = Callable[[str], None]


class ReplyBackend(Protocol):
    """Anything that can turn one user message into one reply."""

    async def request_reply(self, message: str) -> str: ...


class ConversationController:
    """Own the conversation state and apply every change through ``transition``.

    All operations except ``submit`` are synchronous. ``submit`` suspends only
    on the backend call; the ``pending`` check happens before that await, so
    a second submit issued while the first is in flight is ignored.
    """

    def __init__(
        self,
        backend: ReplyBackend,
        clipboard: Clipboard | None = None,
        suggestions: Sequence[str] = (),
    ) -> None:
        self._backend = backend
        self._clipboard = clipboard
        self._suggestions = tuple(suggestions)
        self._state = ConversationState()
        self._listeners: list[StateListener] = []

    @property
    def snapshot(self) -> ConversationState:
        """Return the current immutable state."""
        return self._state

    @property
    def suggestions(self) -> tuple[str, ...]:
        return self._suggestions

    @property
    def pending(self) -> bool:
        return self._state.pending

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """Register ``listener`` for snapshots and return an unsubscribe callable."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def _dispatch(self, event: ConversationEvent) -> bool:
        """Apply ``event``; notify listeners and return True when state changed."""
        new_state = transition(self._state, event)
        if new_state is self._state:
            return False
        self._state = new_state
        for listener in list(self._listeners):
            try:
                listener(new_state)
            except Exception:  # noqa: BLE001 - a broken view must not break the log.
                LOGGER.exception(
                    "controller.listener.failed",
                    extra={"event": "controller.listener.failed"},
                )
        return True

    async def submit(
        self, text: str, origin: SubmitOrigin = SubmitOrigin.TYPED
    ) -> SubmitOutcome:
        """Send one user turn and append the reply (or a failure notice)."""
        normalized = text.strip()
        if not normalized or self._state.pending:
            log_event(
                LOGGER,
                logging.DEBUG,
                "controller.submit.skipped",
                reason="pending" if normalized else "empty",
                origin=origin,
            )
            return SubmitOutcome.SKIPPED

        self._dispatch(MessageSubmitted(Message.from_user(normalized)))
        log_event(LOGGER, logging.INFO, "controller.submit.sent", origin=origin)

        try:
            reply = await self._backend.request_reply(normalized)
        except Exception as exc:  # noqa: BLE001 - any backend failure settles the turn.
            log_event(
                LOGGER,
                logging.WARNING,
                "controller.request.failed",
                error_type=exc.__class__.__name__,
                transport=isinstance(exc, BackendTransportError),
            )
            self._dispatch(
                RequestFailed(
                    error=CONNECTIVITY_ERROR,
                    notice=Message.from_assistant(FAILURE_NOTICE),
                )
            )
            return SubmitOutcome.FAILED
        except asyncio.CancelledError:
            log_event(LOGGER, logging.INFO, "controller.request.cancelled")
            self._dispatch(RequestCancelled())
            raise

        if not isinstance(reply, str) or not reply.strip():
            reply = PLACEHOLDER_REPLY
        self._dispatch(ReplyReceived(Message.from_assistant(reply)))
        log_event(LOGGER, logging.INFO, "controller.reply.received", chars=len(reply))
        return SubmitOutcome.REPLIED

    async def submit_suggestion(self, text: str) -> SubmitOutcome:
        """Submit a suggestion chip's prompt."""
        return await self.submit(text, origin=SubmitOrigin.SUGGESTION)

    def clear(self) -> None:
        """Empty the log and offer suggestions again."""
        self._dispatch(ConversationCleared())
        log_event(LOGGER, logging.INFO, "controller.cleared", pending=self._state.pending)

    def set_feedback(self, message_id: str, kind: FeedbackKind) -> bool:
        """Toggle like/dislike on an assistant message; return True if applied."""
        return self._dispatch(FeedbackToggled(message_id, FeedbackKind(kind)))

    def copy(self, message_id: str) -> bool:
        """Copy a message's text to the clipboard and flag it as copied."""
        message = self._state.messages.get(message_id)
        if message is None:
            return False
        if self._clipboard is not None:
            try:
                self._clipboard(message.text)
            except Exception as exc:  # noqa: BLE001 - clipboard is best effort.
                log_event(
                    LOGGER,
                    logging.WARNING,
                    "controller.clipboard.failed",
                    error=str(exc),
                )
        self._dispatch(MessageCopied(message_id))
        return True

    def clear_copied(self, message_id: str) -> None:
        """Drop the copied flag if it still points at ``message_id``."""
        self._dispatch(CopiedFlagExpired(message_id))

    def dismiss_error(self) -> None:
        self._dispatch(ErrorDismissed())

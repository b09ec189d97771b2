"""Append-only message log indexed by message id."""

from __future__ import annotations

from collections.abc import Iterator

from .models import FeedbackKind, Message


class MessageLog:
    """Immutable, ordered conversation log.

    Every mutating operation returns a new log, so snapshots handed to the
    presentation layer never change underneath it. Lookups go through an id
    index instead of holding live references to entries.
    """

    __slots__ = ("_messages", "_index")

    def __init__(self, messages: tuple[Message, ...] = ()) -> None:
        self._messages: tuple[Message, ...] = tuple(messages)
        self._index: dict[str, int] = {
            message.id: position for position, message in enumerate(self._messages)
        }

    def __len__(self) -> int:
        return len(self._messages)

    def __iter__(self) -> Iterator[Message]:
        return iter(self._messages)

    def __getitem__(self, position: int) -> Message:
        return self._messages[position]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, MessageLog):
            return NotImplemented
        return self._messages == other._messages

    def __hash__(self) -> int:
        return hash(self._messages)

    def __repr__(self) -> str:
        return f"MessageLog({len(self._messages)} messages)"

    @property
    def messages(self) -> tuple[Message, ...]:
        return self._messages

    @property
    def last(self) -> Message | None:
        return self._messages[-1] if self._messages else None

    def get(self, message_id: str) -> Message | None:
        """Return the message with ``message_id`` or ``None``."""
        position = self._index.get(message_id)
        if position is None:
            return None
        return self._messages[position]

    def append(self, message: Message) -> MessageLog:
        """Return a new log with ``message`` added at the end."""
        return MessageLog(self._messages + (message,))

    def with_feedback(self, message_id: str, kind: FeedbackKind) -> MessageLog:
        """Return a log with the feedback toggle applied to one assistant message.

        Unknown ids and user messages leave the log untouched (``self`` is
        returned).
        """
        position = self._index.get(message_id)
        if position is None:
            return self
        current = self._messages[position]
        if not current.is_assistant:
            return self
        updated = list(self._messages)
        updated[position] = current.with_feedback(kind)
        return MessageLog(tuple(updated))

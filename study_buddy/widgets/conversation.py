"""Scrollable conversation view widget."""

from __future__ import annotations

from textual.app import ComposeResult
from textual.containers import VerticalScroll
from textual.widgets import Static

from ..state import ConversationState
from .message import MessageBubble

EMPTY_STATE_TEXT = "Start a conversation\nAsk Study Buddy anything about your studies!"


class ConversationView(VerticalScroll):
    """A scrollable container that mirrors the controller's message log."""

    DEFAULT_CSS = """
    ConversationView > #empty_state {
        width: 100%;
        margin-top: 4;
        text-align: center;
        color: $text-muted;
    }
    """

    def __init__(self, show_timestamps: bool = True, **kwargs: object) -> None:
        super().__init__(**kwargs)  # type: ignore[arg-type]
        self.show_timestamps = show_timestamps
        self._bubbles: dict[str, MessageBubble] = {}
        self._order: list[str] = []

    def compose(self) -> ComposeResult:
        yield Static(EMPTY_STATE_TEXT, id="empty_state")

    @property
    def bubbles(self) -> list[MessageBubble]:
        return [self._bubbles[message_id] for message_id in self._order]

    async def sync(self, state: ConversationState) -> None:
        """Bring the rendered bubbles in line with ``state``.

        The log only grows between clears, so the existing bubbles are either a
        prefix of the new log (mount the tail) or stale (rebuild).
        """
        ids = [message.id for message in state.messages]
        if ids[: len(self._order)] != self._order:
            await self._remove_bubbles()

        new_bubbles: list[MessageBubble] = []
        for message in state.messages:
            copied = message.id == state.last_copied_id
            bubble = self._bubbles.get(message.id)
            if bubble is not None:
                bubble.update_from(message, copied)
                continue
            bubble = MessageBubble(
                message, show_timestamp=self.show_timestamps, copied=copied
            )
            self._bubbles[message.id] = bubble
            self._order.append(message.id)
            new_bubbles.append(bubble)

        self.query_one("#empty_state", Static).display = state.is_empty
        if new_bubbles:
            await self.mount_all(new_bubbles)
            self.scroll_end(animate=False)

    async def _remove_bubbles(self) -> None:
        for bubble in list(self._bubbles.values()):
            await bubble.remove()
        self._bubbles.clear()
        self._order.clear()

"""Message bubble widget with copy and feedback actions."""

from __future__ import annotations

from typing import Any

from rich.markdown import Markdown
from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical
from textual.message import Message
from textual.widgets import Button, Static

from ..models import Feedback, FeedbackKind, Sender
from ..models import Message as ChatMessage


class MessageBubble(Vertical):
    """Render a single chat message with sender, optional timestamp, and actions."""

    DEFAULT_CSS = """
    MessageBubble {
        height: auto;
    }
    MessageBubble > #header-block {
        padding: 0;
        color: $text-muted;
    }
    MessageBubble > #content-block {
        height: auto;
    }
    MessageBubble > .message-actions {
        height: auto;
        margin-top: 1;
    }
    MessageBubble .message-actions Button {
        min-width: 8;
        margin-right: 1;
    }
    MessageBubble .message-actions Button.-selected {
        background: $accent;
    }
    """

    class CopyRequested(Message):
        """Posted when the copy button of a bubble is pressed."""

        def __init__(self, message_id: str) -> None:
            super().__init__()
            self.message_id = message_id

    class FeedbackRequested(Message):
        """Posted when the like or dislike button of a bubble is pressed."""

        def __init__(self, message_id: str, kind: FeedbackKind) -> None:
            super().__init__()
            self.message_id = message_id
            self.kind = kind

    def __init__(
        self,
        message: ChatMessage,
        show_timestamp: bool = True,
        copied: bool = False,
        **kwargs: Any,
    ) -> None:
        super().__init__(**kwargs)  # type: ignore[arg-type]
        self.chat_message = message
        self.show_timestamp = show_timestamp
        self.copied = copied
        self.add_class(f"message-{message.sender.value}")

    @property
    def message_id(self) -> str:
        return self.chat_message.id

    @property
    def sender_label(self) -> str:
        return "You" if self.chat_message.sender is Sender.USER else "Study Buddy"

    def _compose_header(self) -> str:
        if self.show_timestamp:
            return f"**{self.sender_label}**  _{self.chat_message.formatted_time()}_"
        return f"**{self.sender_label}**"

    def compose(self) -> ComposeResult:
        yield Static(Markdown(self._compose_header()), id="header-block")
        yield Static(Markdown(self.chat_message.text), id="content-block")
        if self.chat_message.is_assistant:
            with Horizontal(classes="message-actions"):
                yield Button(self._copy_label(), classes="copy-button")
                yield Button("👍", classes="like-button")
                yield Button("👎", classes="dislike-button")

    def on_mount(self) -> None:
        self._refresh_actions()

    def _copy_label(self) -> str:
        return "Copied!" if self.copied else "Copy"

    def _refresh_actions(self) -> None:
        if not self.chat_message.is_assistant:
            return
        for button in self.query(".copy-button").results(Button):
            button.label = self._copy_label()
        for button in self.query(".like-button").results(Button):
            button.set_class(self.chat_message.feedback is Feedback.LIKED, "-selected")
        for button in self.query(".dislike-button").results(Button):
            button.set_class(self.chat_message.feedback is Feedback.DISLIKED, "-selected")

    def update_from(self, message: ChatMessage, copied: bool) -> None:
        """Apply a newer snapshot of the same message (feedback and copied flag)."""
        self.chat_message = message
        self.copied = copied
        self._refresh_actions()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        button = event.button
        if button.has_class("copy-button"):
            event.stop()
            self.post_message(self.CopyRequested(self.message_id))
        elif button.has_class("like-button"):
            event.stop()
            self.post_message(self.FeedbackRequested(self.message_id, FeedbackKind.LIKE))
        elif button.has_class("dislike-button"):
            event.stop()
            self.post_message(
                self.FeedbackRequested(self.message_id, FeedbackKind.DISLIKE)
            )

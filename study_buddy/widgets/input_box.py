"""Input row containing the message field and send button."""

from __future__ import annotations

from textual.containers import Horizontal, Vertical
from textual.widgets import Button, Input


class InputBox(Vertical):
    """Input region with message field and send button."""

    def compose(self):  # type: ignore[override]
        with Horizontal(id="input_row"):
            yield Input(
                placeholder="Ask Study Buddy anything... (Enter to send)",
                id="message_input",
            )
            yield Button("Send", id="send_button", variant="success")

    def set_busy(self, busy: bool) -> None:
        """Disable the field and button while a reply is pending."""
        self.query_one("#message_input", Input).disabled = busy
        self.query_one("#send_button", Button).disabled = busy

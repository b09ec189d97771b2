"""Suggestion chips offered before the first message."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from textual.app import ComposeResult
from textual.containers import Horizontal
from textual.message import Message
from textual.widgets import Button


class SuggestionBar(Horizontal):
    """Row of starter prompts; hidden once the conversation begins."""

    DEFAULT_CSS = """
    SuggestionBar {
        height: auto;
        padding: 0 1;
    }
    SuggestionBar > Button {
        margin-right: 1;
    }
    """

    class Selected(Message):
        """Posted with the prompt text of the chosen chip."""

        def __init__(self, text: str) -> None:
            super().__init__()
            self.text = text

    def __init__(self, suggestions: Sequence[str] = (), **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self.suggestions = tuple(suggestions)

    def compose(self) -> ComposeResult:
        for index, text in enumerate(self.suggestions):
            yield Button(text, id=f"suggestion-{index}", classes="suggestion-chip")

    def on_button_pressed(self, event: Button.Pressed) -> None:
        button_id = event.button.id or ""
        if not button_id.startswith("suggestion-"):
            return
        event.stop()
        index = int(button_id.removeprefix("suggestion-"))
        self.post_message(self.Selected(self.suggestions[index]))

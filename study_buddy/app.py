"""Textual front end for the Study Buddy conversation controller."""

from __future__ import annotations

from collections.abc import Callable
from functools import partial
import logging
from typing import Any

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Container
from textual.widgets import Button, Footer, Header, Input, Static

from .backend import ChatBackend
from .config import load_config
from .controller import ConversationController
from .logging_utils import configure_logging, log_event
from .models import SubmitOrigin, SubmitOutcome
from .state import ConversationState
from .widgets.activity_bar import ActivityBar
from .widgets.conversation import ConversationView
from .widgets.input_box import InputBox
from .widgets.message import MessageBubble
from .widgets.suggestions import SuggestionBar

LOGGER = logging.getLogger(__name__)


class StudyBuddyApp(App[None]):
    """Chat UI that renders controller snapshots and forwards user actions."""

    CSS = """
    Screen {
        layout: vertical;
        background: $background;
    }

    #app-root {
        layout: vertical;
        width: 100%;
        height: 1fr;
    }

    #conversation {
        height: 1fr;
        padding: 1;
    }

    #error_banner {
        height: auto;
        padding: 0 1;
        background: $error;
        color: $text;
    }

    InputBox {
        height: auto;
        padding: 0 1 1 1;
        border-top: solid $panel;
        background: $surface;
    }

    #input_row {
        height: auto;
    }

    #message_input {
        width: 1fr;
    }

    #send_button {
        margin-left: 1;
        min-width: 10;
    }

    #activity_bar {
        border-top: dashed $panel;
        background: $surface;
    }

    MessageBubble {
        width: 85%;
        margin: 1 0;
        padding: 1 2;
        border: round $panel;
    }

    .message-user {
        align-horizontal: right;
        background: $primary;
    }

    .message-assistant {
        align-horizontal: left;
        background: $surface;
    }
    """

    DEFAULT_ACTION_DESCRIPTIONS: dict[str, str] = {
        "new_conversation": "New Chat",
        "dismiss_error": "Dismiss Error",
        "quit": "Quit",
    }

    def __init__(
        self,
        config: dict[str, dict[str, Any]] | None = None,
        backend: Any | None = None,
    ) -> None:
        self.config = config if config is not None else load_config()
        configure_logging(self.config["logging"])
        self.window_title = str(self.config["app"]["title"])
        self.window_subtitle = str(self.config["app"]["subtitle"])
        ui_cfg = self.config["ui"]
        self.copied_flag_seconds = float(ui_cfg["copied_flag_seconds"])
        self.backend = (
            backend
            if backend is not None
            else ChatBackend.from_config(self.config["backend"])
        )
        self.controller = ConversationController(
            self.backend,
            clipboard=self._write_clipboard,
            suggestions=ui_cfg.get("suggestions") or (),
        )
        self._binding_specs = self._binding_specs_from_config(self.config)
        self._unsubscribe: Callable[[], None] | None = None
        self._was_pending = False

        # Cached widget references, populated in on_mount().
        self._w_input: Input | None = None
        self._w_input_box: InputBox | None = None
        self._w_conversation: ConversationView | None = None
        self._w_suggestions: SuggestionBar | None = None
        self._w_error: Static | None = None
        self._w_activity: ActivityBar | None = None
        super().__init__()

    @classmethod
    def _binding_specs_from_config(
        cls, config: dict[str, dict[str, Any]]
    ) -> list[Binding]:
        keybinds = config.get("keybinds", {})
        bindings: list[Binding] = []
        for action_name, description in cls.DEFAULT_ACTION_DESCRIPTIONS.items():
            binding_key = keybinds.get(action_name)
            if isinstance(binding_key, str) and binding_key.strip():
                bindings.append(
                    Binding(
                        key=binding_key.strip(),
                        action=action_name,
                        description=description,
                        show=True,
                    )
                )
        return bindings

    def compose(self) -> ComposeResult:
        yield Header()
        with Container(id="app-root"):
            yield Static("", id="error_banner")
            yield ConversationView(
                show_timestamps=bool(self.config["ui"]["show_timestamps"]),
                id="conversation",
            )
            yield SuggestionBar(self.controller.suggestions, id="suggestion_bar")
            yield InputBox()
            yield ActivityBar(
                shortcut_hints=self._shortcut_hints(),
                id="activity_bar",
            )
        yield Footer()

    def _shortcut_hints(self) -> str:
        return "  ".join(
            f"{binding.key} {binding.description.lower()}"
            for binding in self._binding_specs
            if binding.action == "new_conversation"
        )

    async def on_mount(self) -> None:
        """Register keybindings, subscribe to the controller, and draw state."""
        self.title = self.window_title
        self.sub_title = self.window_subtitle
        for binding in self._binding_specs:
            self.bind(
                binding.key,
                binding.action,
                description=binding.description,
                show=binding.show,
            )

        self._w_input = self.query_one("#message_input", Input)
        self._w_input_box = self.query_one(InputBox)
        self._w_conversation = self.query_one(ConversationView)
        self._w_suggestions = self.query_one(SuggestionBar)
        self._w_error = self.query_one("#error_banner", Static)
        self._w_activity = self.query_one(ActivityBar)

        self._unsubscribe = self.controller.subscribe(self._on_state_changed)
        await self._render_state()
        self._w_input.focus()
        LOGGER.info("app.ready", extra={"event": "app.ready"})

    def _on_state_changed(self, _state: ConversationState) -> None:
        # Rendering mounts widgets, so it runs on the app's message queue.
        self.call_later(self._render_state)

    async def _render_state(self) -> None:
        """Render the latest controller snapshot."""
        state = self.controller.snapshot
        conversation = self._w_conversation or self.query_one(ConversationView)
        await conversation.sync(state)

        suggestions = self._w_suggestions or self.query_one(SuggestionBar)
        suggestions.display = state.suggestions_visible and bool(suggestions.suggestions)

        banner = self._w_error or self.query_one("#error_banner", Static)
        banner.update(state.last_error or "")
        banner.display = state.last_error is not None

        input_box = self._w_input_box or self.query_one(InputBox)
        input_box.set_busy(state.pending)
        activity = self._w_activity or self.query_one(ActivityBar)
        if state.pending:
            activity.start_activity()
        else:
            activity.stop_activity()
            if self._was_pending:
                (self._w_input or self.query_one("#message_input", Input)).focus()
        self._was_pending = state.pending

    def _write_clipboard(self, text: str) -> None:
        self.copy_to_clipboard(text)

    async def send_text(
        self, text: str, origin: SubmitOrigin = SubmitOrigin.TYPED
    ) -> SubmitOutcome:
        """Submit ``text`` through the controller and wait for the turn to settle."""
        outcome = await self.controller.submit(text, origin)
        log_event(LOGGER, logging.DEBUG, "app.submit.settled", outcome=outcome)
        return outcome

    def _submit_in_background(self, text: str, origin: SubmitOrigin) -> None:
        self.run_worker(self.send_text(text, origin), group="submit")

    def _send_from_input(self) -> None:
        input_widget = self._w_input or self.query_one("#message_input", Input)
        text = input_widget.value
        # Blank input and sends while a reply is pending are silent no-ops.
        if not text.strip() or self.controller.pending:
            return
        input_widget.value = ""
        self.sub_title = self.window_subtitle
        self._submit_in_background(text, SubmitOrigin.TYPED)

    def on_input_submitted(self, event: Input.Submitted) -> None:
        if event.input.id == "message_input":
            self._send_from_input()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "send_button":
            self._send_from_input()

    def on_suggestion_bar_selected(self, event: SuggestionBar.Selected) -> None:
        self._submit_in_background(event.text, SubmitOrigin.SUGGESTION)

    def on_message_bubble_copy_requested(
        self, event: MessageBubble.CopyRequested
    ) -> None:
        if self.controller.copy(event.message_id):
            self.sub_title = "Copied to clipboard."
            self.set_timer(
                self.copied_flag_seconds,
                partial(self._expire_copied, event.message_id),
            )

    def _expire_copied(self, message_id: str) -> None:
        self.controller.clear_copied(message_id)
        if self.controller.snapshot.last_copied_id is None:
            self.sub_title = self.window_subtitle

    def on_message_bubble_feedback_requested(
        self, event: MessageBubble.FeedbackRequested
    ) -> None:
        self.controller.set_feedback(event.message_id, event.kind)

    async def action_new_conversation(self) -> None:
        """Clear the conversation and offer suggestions again."""
        self.controller.clear()
        input_widget = self._w_input or self.query_one("#message_input", Input)
        input_widget.value = ""
        self.sub_title = self.window_subtitle

    def action_dismiss_error(self) -> None:
        self.controller.dismiss_error()

    async def action_quit(self) -> None:
        """Exit the app."""
        self.exit()

    async def on_unmount(self) -> None:
        """Detach from the controller and release the HTTP client."""
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
        close = getattr(self.backend, "aclose", None)
        if close is not None:
            await close()

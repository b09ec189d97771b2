"""Activity bar showing a waiting animation and keyboard shortcut hints."""

from __future__ import annotations

from typing import Any

from textual.app import ComposeResult
from textual.timer import Timer
from textual.widgets import Label, Static

_ANIMATION_FRAMES: tuple[str, ...] = (
    "·····",
    "●····",
    "·●···",
    "··●··",
    "···●·",
    "····●",
)


class ActivityBar(Static):
    """Render the 'thinking' animation on the left and shortcut hints on the right."""

    DEFAULT_CSS = """
    ActivityBar {
        layout: horizontal;
        height: 1;
        padding: 0 1;
    }
    ActivityBar #activity_left {
        width: 1fr;
    }
    ActivityBar #activity_right {
        width: auto;
        text-align: right;
    }
    """

    def __init__(self, shortcut_hints: str = "", **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self._shortcut_hints = shortcut_hints
        self._timer: Timer | None = None
        self._frame_index = 0
        self._hint = ""

    def compose(self) -> ComposeResult:
        yield Label("", id="activity_left")
        yield Label(self._shortcut_hints, id="activity_right")

    @property
    def running(self) -> bool:
        return self._timer is not None

    def start_activity(self, hint: str = "Study Buddy is thinking...") -> None:
        """Begin the animated dots next to ``hint``."""
        if self._timer is not None:
            return
        self._hint = hint
        self._frame_index = 0
        self._tick()
        self._timer = self.set_interval(0.15, self._tick)

    def stop_activity(self) -> None:
        """Stop the animation and clear the left label."""
        timer = self._timer
        self._timer = None
        if timer is not None:
            timer.stop()
        self.query_one("#activity_left", Label).update("")

    def _tick(self) -> None:
        frame = _ANIMATION_FRAMES[self._frame_index % len(_ANIMATION_FRAMES)]
        self._frame_index += 1
        self.query_one("#activity_left", Label).update(f"{frame}  {self._hint}")

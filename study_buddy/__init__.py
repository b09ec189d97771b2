"""Top-level package for the study-buddy chat client."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .app import StudyBuddyApp
    from .backend import ChatBackend
    from .config import ensure_config_dir, load_config
    from .controller import ConversationController
    from .exceptions import (
        BackendConnectionError,
        BackendResponseError,
        BackendStatusError,
        BackendTransportError,
        ConfigValidationError,
        StudyBuddyError,
    )
    from .message_store import MessageLog
    from .models import Feedback, FeedbackKind, Message, Sender, SubmitOrigin, SubmitOutcome
    from .state import ConversationState, transition

__all__ = [
    "BackendConnectionError",
    "BackendResponseError",
    "BackendStatusError",
    "BackendTransportError",
    "ChatBackend",
    "ConfigValidationError",
    "ConversationController",
    "ConversationState",
    "Feedback",
    "FeedbackKind",
    "Message",
    "MessageLog",
    "Sender",
    "StudyBuddyApp",
    "StudyBuddyError",
    "SubmitOrigin",
    "SubmitOutcome",
    "ensure_config_dir",
    "load_config",
    "transition",
]

_EXCEPTIONS = {
    "BackendConnectionError",
    "BackendResponseError",
    "BackendStatusError",
    "BackendTransportError",
    "ConfigValidationError",
    "StudyBuddyError",
}
_MODELS = {"Feedback", "FeedbackKind", "Message", "Sender", "SubmitOrigin", "SubmitOutcome"}


def __getattr__(name: str) -> Any:
    """Lazily import symbols to keep the UI dependency optional at import time."""
    if name in _EXCEPTIONS:
        from . import exceptions

        return getattr(exceptions, name)
    if name in _MODELS:
        from . import models

        return getattr(models, name)
    if name in {"ensure_config_dir", "load_config"}:
        from .config import ensure_config_dir, load_config

        return {"ensure_config_dir": ensure_config_dir, "load_config": load_config}[name]
    if name in {"ConversationState", "transition"}:
        from .state import ConversationState, transition

        return {"ConversationState": ConversationState, "transition": transition}[name]
    if name == "MessageLog":
        from .message_store import MessageLog

        return MessageLog
    if name == "ChatBackend":
        from .backend import ChatBackend

        return ChatBackend
    if name == "ConversationController":
        from .controller import ConversationController

        return ConversationController
    if name == "StudyBuddyApp":
        from .app import StudyBuddyApp

        return StudyBuddyApp
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")

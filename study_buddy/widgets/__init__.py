"""Widget exports for the study_buddy UI."""

from .activity_bar import ActivityBar
from .conversation import ConversationView
from .input_box import InputBox
from .message import MessageBubble
from .suggestions import SuggestionBar

__all__ = [
    "ActivityBar",
    "ConversationView",
    "InputBox",
    "MessageBubble",
    "SuggestionBar",
]

"""Message records and the small enums shared by the controller and the UI."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
import itertools

_SEQUENCE = itertools.count(1)


class Sender(str, Enum):
    """Author of a message in the conversation log."""

    USER = "user"
    ASSISTANT = "assistant"


class Feedback(str, Enum):
    """Per-message rating left on assistant replies."""

    NONE = "none"
    LIKED = "liked"
    DISLIKED = "disliked"


class FeedbackKind(str, Enum):
    """Rating action requested by the user."""

    LIKE = "like"
    DISLIKE = "dislike"

    @property
    def target(self) -> Feedback:
        return Feedback.LIKED if self is FeedbackKind.LIKE else Feedback.DISLIKED


class SubmitOrigin(str, Enum):
    """Where the submitted text came from."""

    TYPED = "typed"
    SUGGESTION = "suggestion"


class SubmitOutcome(str, Enum):
    """Result of a single ``submit`` call."""

    SKIPPED = "skipped"
    REPLIED = "replied"
    FAILED = "failed"


def next_message_id(created_at: datetime) -> str:
    """Return an id that stays unique for messages created in the same tick.

    The millisecond prefix keeps ids ordered for humans reading logs; the
    process-wide sequence suffix removes collisions.
    """
    millis = int(created_at.timestamp() * 1000)
    return f"{millis}-{next(_SEQUENCE)}"


@dataclass(frozen=True)
class Message:
    """A single immutable entry in the conversation log."""

    text: str
    sender: Sender
    timestamp: datetime = field(default_factory=datetime.now)
    id: str = ""
    feedback: Feedback = Feedback.NONE

    def __post_init__(self) -> None:
        if not self.id:
            object.__setattr__(self, "id", next_message_id(self.timestamp))

    @classmethod
    def from_user(cls, text: str) -> Message:
        return cls(text=text, sender=Sender.USER)

    @classmethod
    def from_assistant(cls, text: str) -> Message:
        return cls(text=text, sender=Sender.ASSISTANT)

    @property
    def is_assistant(self) -> bool:
        return self.sender is Sender.ASSISTANT

    def with_feedback(self, kind: FeedbackKind) -> Message:
        """Return a copy with the like/dislike toggle applied."""
        target = kind.target
        updated = Feedback.NONE if self.feedback is target else target
        return replace(self, feedback=updated)

    def formatted_time(self) -> str:
        """Return the ``HH:MM`` display form of the timestamp."""
        return self.timestamp.strftime("%H:%M")

"""Tests for the pure conversation transition function."""

from __future__ import annotations

import unittest

from study_buddy.models import Feedback, FeedbackKind, Message
from study_buddy.state import (
    ConversationCleared,
    ConversationState,
    CopiedFlagExpired,
    ErrorDismissed,
    FeedbackToggled,
    MessageCopied,
    MessageSubmitted,
    ReplyReceived,
    RequestCancelled,
    RequestFailed,
    transition,
)


class TransitionTests(unittest.TestCase):
    """Validate state machine behavior without any controller or UI."""

    def test_submit_moves_to_awaiting_reply(self) -> None:
        state = ConversationState(last_error="old error")
        question = Message.from_user("hello")
        state = transition(state, MessageSubmitted(question))

        self.assertTrue(state.pending)
        self.assertFalse(state.suggestions_visible)
        self.assertIsNone(state.last_error)
        self.assertEqual(list(state.messages), [question])

    def test_submit_while_pending_is_rejected(self) -> None:
        state = transition(
            ConversationState(), MessageSubmitted(Message.from_user("first"))
        )
        after = transition(state, MessageSubmitted(Message.from_user("second")))
        self.assertIs(after, state)

    def test_blank_submit_is_rejected(self) -> None:
        state = ConversationState()
        self.assertIs(transition(state, MessageSubmitted(Message.from_user("   "))), state)

    def test_reply_releases_pending(self) -> None:
        state = transition(ConversationState(), MessageSubmitted(Message.from_user("q")))
        state = transition(state, ReplyReceived(Message.from_assistant("a")))
        self.assertFalse(state.pending)
        self.assertEqual(len(state.messages), 2)

    def test_failure_sets_error_and_appends_notice(self) -> None:
        state = transition(ConversationState(), MessageSubmitted(Message.from_user("q")))
        notice = Message.from_assistant("sorry")
        state = transition(state, RequestFailed(error="offline", notice=notice))
        self.assertFalse(state.pending)
        self.assertEqual(state.last_error, "offline")
        self.assertIs(state.messages.last, notice)

    def test_cancel_releases_pending_without_appending(self) -> None:
        state = transition(ConversationState(), MessageSubmitted(Message.from_user("q")))
        state = transition(state, RequestCancelled())
        self.assertFalse(state.pending)
        self.assertEqual(len(state.messages), 1)

    def test_clear_resets_log_and_flags_but_not_pending(self) -> None:
        state = transition(ConversationState(), MessageSubmitted(Message.from_user("q")))
        state = transition(state, ConversationCleared())
        self.assertTrue(state.is_empty)
        self.assertTrue(state.suggestions_visible)
        self.assertIsNone(state.last_error)
        self.assertTrue(state.pending)

        # A late reply lands in the emptied log.
        state = transition(state, ReplyReceived(Message.from_assistant("late")))
        self.assertEqual([m.text for m in state.messages], ["late"])
        self.assertFalse(state.suggestions_visible)
        self.assertFalse(state.pending)

    def test_failure_after_clear_hides_suggestions(self) -> None:
        state = transition(ConversationState(), MessageSubmitted(Message.from_user("q")))
        state = transition(state, ConversationCleared())
        state = transition(
            state, RequestFailed(error="offline", notice=Message.from_assistant("sorry"))
        )
        self.assertEqual([m.text for m in state.messages], ["sorry"])
        self.assertFalse(state.suggestions_visible)

    def test_feedback_toggle_rules(self) -> None:
        answer = Message.from_assistant("a")
        state = transition(ConversationState(), MessageSubmitted(Message.from_user("q")))
        state = transition(state, ReplyReceived(answer))

        state = transition(state, FeedbackToggled(answer.id, FeedbackKind.LIKE))
        self.assertEqual(state.messages.get(answer.id).feedback, Feedback.LIKED)
        state = transition(state, FeedbackToggled(answer.id, FeedbackKind.LIKE))
        self.assertEqual(state.messages.get(answer.id).feedback, Feedback.NONE)
        state = transition(state, FeedbackToggled(answer.id, FeedbackKind.LIKE))
        state = transition(state, FeedbackToggled(answer.id, FeedbackKind.DISLIKE))
        self.assertEqual(state.messages.get(answer.id).feedback, Feedback.DISLIKED)

    def test_feedback_on_unknown_id_is_noop(self) -> None:
        state = ConversationState()
        self.assertIs(transition(state, FeedbackToggled("x", FeedbackKind.LIKE)), state)

    def test_copied_flag_lifecycle(self) -> None:
        answer = Message.from_assistant("a")
        state = transition(ConversationState(), MessageSubmitted(Message.from_user("q")))
        state = transition(state, ReplyReceived(answer))

        state = transition(state, MessageCopied(answer.id))
        self.assertEqual(state.last_copied_id, answer.id)
        self.assertIs(transition(state, CopiedFlagExpired("other")), state)
        state = transition(state, CopiedFlagExpired(answer.id))
        self.assertIsNone(state.last_copied_id)

    def test_copy_of_unknown_message_is_noop(self) -> None:
        state = ConversationState()
        self.assertIs(transition(state, MessageCopied("missing")), state)

    def test_error_dismissed(self) -> None:
        state = ConversationState(last_error="offline")
        state = transition(state, ErrorDismissed())
        self.assertIsNone(state.last_error)
        self.assertIs(transition(state, ErrorDismissed()), state)

    def test_unknown_event_raises(self) -> None:
        with self.assertRaises(TypeError):
            transition(ConversationState(), object())  # type: ignore[arg-type]


if __name__ == "__main__":
    unittest.main()

"""ReplyMatcher implementation.

Decides which update in a fetched batch, if any, answers a question.
Candidates are scanned newest first so that a corrected answer wins over
an earlier one from the same batch.
"""

from typing import Sequence

from ..models import ButtonClick, CorrelationMode, Question, TextOrMediaMessage, Update

PRIVATE_CHAT = "private"


class ReplyMatcher:
    """Correlates incoming updates with a question."""

    def __init__(self, chat_id: str, clock_skew_seconds: float = 120.0):
        self._chat_id = str(chat_id)
        self._clock_skew_seconds = clock_skew_seconds

    def match(self, updates: Sequence[Update], question: Question) -> Update | None:
        """Return the newest update that answers the question, or None."""
        for update in reversed(updates):
            if isinstance(update, ButtonClick):
                if self.accepts_click(update, question):
                    return update
            elif isinstance(update, TextOrMediaMessage):
                if self.accepts_message(update, question):
                    return update
        return None

    def accepts_click(self, click: ButtonClick, question: Question) -> bool:
        """A click only answers the question whose buttons were clicked."""
        return click.message_id is not None and click.message_id == question.message_id

    def accepts_message(self, msg: TextOrMediaMessage, question: Question) -> bool:
        """Apply the endpoint, sender, content and correlation rules."""
        if msg.chat_id != self._chat_id or msg.chat_type != PRIVATE_CHAT:
            return False

        # Our own messages (prompts, read receipts) are never replies
        if msg.sender_is_bot:
            return False

        if not msg.has_content:
            return False

        # An explicit reply link is authoritative in both modes
        if msg.reply_to_message_id is not None:
            return msg.reply_to_message_id == question.message_id

        if question.mode is CorrelationMode.STRICT:
            return False

        if msg.date + self._clock_skew_seconds < question.issued_at:
            return False

        # message_id increases within a chat
        return msg.message_id > question.message_id

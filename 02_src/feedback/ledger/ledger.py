"""Question/Reply ledger.

Process-lifetime record of the most recent question and the most recent
reply. Lets a follow-up call re-attach to a question whose wait was
interrupted, or pick up a reply that was already consumed from the feed.
"""

import asyncio
from typing import Protocol

from ..logging_config import get_logger
from ..models import Question, Reply

logger = get_logger(__name__)


class ILedger(Protocol):
    """Current question pointer plus a single cached reply."""

    async def record_question(self, question: Question) -> None:
        """Make question the current one."""
        ...

    async def record_reply(self, reply: Reply) -> Reply:
        """Cache reply for its question. Return the reply bound to that question."""
        ...

    async def lookup_reply(self, question_id: int) -> Reply | None:
        """Return the cached reply for question_id, if any."""
        ...

    async def current_question(self) -> Question | None:
        """Return the most recently asked question."""
        ...


class Ledger:
    """In-memory ledger guarded by a single lock."""

    def __init__(self):
        self._lock = asyncio.Lock()
        self._current: Question | None = None
        self._reply: Reply | None = None

    async def record_question(self, question: Question) -> None:
        """Overwrite the current question pointer. The cached reply is kept."""
        async with self._lock:
            self._current = question

    async def record_reply(self, reply: Reply) -> Reply:
        """Cache reply; the first reply bound to a question wins."""
        async with self._lock:
            if self._reply is not None and self._reply.question_id == reply.question_id:
                if self._reply is not reply:
                    logger.info(
                        "Question %s already has a reply, ignoring later match",
                        reply.question_id,
                    )
                return self._reply
            self._reply = reply
            return reply

    async def lookup_reply(self, question_id: int) -> Reply | None:
        """Return the cached reply if it belongs to question_id."""
        async with self._lock:
            if self._reply is not None and self._reply.question_id == question_id:
                return self._reply
            return None

    async def current_question(self) -> Question | None:
        """Return the current question."""
        async with self._lock:
            return self._current

"""WaitSession implementation.

One blocking wait for the reply to a single question:

    POLLING -> MATCHED    reply found (or already cached in the ledger)
    POLLING -> TIMED_OUT  deadline reached, raises ReplyTimeout
    POLLING -> FAILED     the poll loop raised; transport errors never get
                          here because the loop retries them itself

The question is captured when the session is built, so a newer question
recorded in the ledger while this one is polling does not change what
this session matches. Sessions running at the same time share the poll
loop's backlog and each claims only the update that answers its own
question.
"""

import asyncio
import time
from enum import Enum
from typing import Awaitable, Callable, Sequence

from ..buttons import acknowledge_click, reply_from_click
from ..content import ReplyBuilder
from ..errors import ReplyTimeout
from ..ledger import ILedger
from ..logging_config import get_logger
from ..models import ButtonClick, Question, Reply, TextOrMediaMessage, Update
from ..polling import LongPollLoop, ReplyMatcher
from ..transport import ITransport
from .heartbeat import Heartbeat

logger = get_logger(__name__)

MIN_TIMEOUT_SECONDS = 1.0

Clock = Callable[[], float]
Sleeper = Callable[[float], Awaitable[None]]


class SessionState(str, Enum):
    """Wait session states."""

    POLLING = "polling"
    MATCHED = "matched"
    TIMED_OUT = "timed_out"
    FAILED = "failed"


class WaitSession:
    """Blocks until the question is answered or the deadline passes."""

    def __init__(
        self,
        question: Question,
        timeout_seconds: float,
        poll_loop: LongPollLoop,
        matcher: ReplyMatcher,
        ledger: ILedger,
        builder: ReplyBuilder,
        transport: ITransport,
        poll_interval_seconds: float = 2.0,
        heartbeat: Heartbeat | None = None,
        clock: Clock = time.monotonic,
        sleep: Sleeper = asyncio.sleep,
    ):
        self._question = question
        self._timeout_seconds = timeout_seconds
        self._poll_loop = poll_loop
        self._matcher = matcher
        self._ledger = ledger
        self._builder = builder
        self._transport = transport
        self._poll_interval_seconds = poll_interval_seconds
        self._heartbeat = heartbeat
        self._clock = clock
        self._sleep = sleep
        self._state = SessionState.POLLING

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def question(self) -> Question:
        return self._question

    async def run(self) -> Reply:
        """Wait for the reply. Raises ReplyTimeout at the deadline."""
        cached = await self._ledger.lookup_reply(self._question.message_id)
        if cached is not None:
            self._state = SessionState.MATCHED
            return cached

        deadline = self._clock() + max(MIN_TIMEOUT_SECONDS, self._timeout_seconds)

        if self._heartbeat:
            self._heartbeat.start()
        try:
            reply = await self._poll_until(deadline)
        except ReplyTimeout:
            self._state = SessionState.TIMED_OUT
            logger.info(
                "No reply to message %s within %ss",
                self._question.message_id,
                self._timeout_seconds,
            )
            raise
        except Exception:
            self._state = SessionState.FAILED
            raise
        finally:
            if self._heartbeat:
                await self._heartbeat.stop()

        self._state = SessionState.MATCHED
        return reply

    async def _poll_until(self, deadline: float) -> Reply:
        while True:
            remaining = deadline - self._clock()
            if remaining <= 0:
                raise ReplyTimeout(self._timeout_seconds, urgent=self._question.urgent)

            # Another session may already have answered this question
            cached = await self._ledger.lookup_reply(self._question.message_id)
            if cached is not None:
                return cached

            # Updates fetched by other sessions come first, then a fresh batch
            found = self._poll_loop.claim(self._select)
            if found is None:
                await self._poll_loop.fetch_batch(max_wait=remaining)
                found = self._poll_loop.claim(self._select)
            if found is not None:
                return await self._resolve(found)

            # After a failure the loop has already slept its backoff
            if self._poll_loop.consecutive_failures == 0:
                remaining = deadline - self._clock()
                if remaining > 0:
                    await self._sleep(min(self._poll_interval_seconds, remaining))

    def _select(self, updates: Sequence[Update]) -> Update | None:
        return self._matcher.match(updates, self._question)

    async def _resolve(self, update: Update) -> Reply:
        """Turn the matched update into a reply bound in the ledger."""
        question_id = self._question.message_id

        if isinstance(update, ButtonClick):
            logger.info("Button reply to message %s", question_id)
            await acknowledge_click(self._transport, update)
            reply = reply_from_click(update, question_id)
        elif isinstance(update, TextOrMediaMessage):
            logger.info("Message %s answers message %s", update.message_id, question_id)
            await self._builder.send_read_receipt(update)
            reply = await self._builder.build(update, question_id)
        else:
            raise TypeError(f"Unsupported update type: {type(update).__name__}")

        return await self._ledger.record_reply(reply)

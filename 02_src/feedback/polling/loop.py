"""LongPollLoop implementation."""

import asyncio
import random
from collections import deque
from typing import Awaitable, Callable, Sequence

from ..errors import TransportError
from ..logging_config import get_logger
from ..models import Update
from ..transport import ITransport
from .cursor import UpdateCursor

logger = get_logger(__name__)

MAX_BACKOFF_EXPONENT = 4  # 16x the base interval
MAX_JITTER_SECONDS = 0.5
MAX_BACKOFF_SECONDS = 30.0
# Fetched updates kept for sessions that have not looked at them yet
BACKLOG_LIMIT = 200

Sleeper = Callable[[float], Awaitable[None]]
Selector = Callable[[Sequence[Update]], Update | None]


class LongPollLoop:
    """Fetches update batches and advances the cursor past every one of them.

    The cursor is shared by every wait session, so fetched updates also go
    into a bounded backlog. A session takes only the update that answers its
    own question via claim(); everything else stays available to the other
    sessions.

    Transport failures are absorbed here: the loop sleeps an exponential
    backoff with jitter and reports an empty batch. Any other exception
    propagates to the caller.
    """

    def __init__(
        self,
        transport: ITransport,
        cursor: UpdateCursor,
        poll_interval_seconds: float = 2.0,
        long_poll_seconds: float = 25.0,
        sleep: Sleeper = asyncio.sleep,
        backlog_limit: int = BACKLOG_LIMIT,
    ):
        self._transport = transport
        self._cursor = cursor
        self._poll_interval_seconds = poll_interval_seconds
        self._long_poll_seconds = long_poll_seconds
        self._sleep = sleep
        self._consecutive_failures = 0
        self._backlog: deque[Update] = deque(maxlen=backlog_limit)
        self._fetch_count = 0
        # Serializes the fetch + cursor read-modify-write
        self._lock = asyncio.Lock()

    @property
    def cursor(self) -> UpdateCursor:
        return self._cursor

    @property
    def consecutive_failures(self) -> int:
        return self._consecutive_failures

    @property
    def backlog(self) -> list[Update]:
        """Fetched updates no session has claimed yet, oldest first."""
        return list(self._backlog)

    def claim(self, select: Selector) -> Update | None:
        """Remove and return the backlog update chosen by select, if any."""
        found = select(list(self._backlog))
        if found is not None:
            self._backlog.remove(found)
        return found

    def backoff_delay(self) -> float:
        """Delay before the next attempt after the current run of failures."""
        exponent = min(max(self._consecutive_failures - 1, 0), MAX_BACKOFF_EXPONENT)
        delay = self._poll_interval_seconds * (2**exponent)
        jitter = random.uniform(0, MAX_JITTER_SECONDS)
        return min(delay + jitter, MAX_BACKOFF_SECONDS)

    async def fetch_batch(self, max_wait: float | None = None) -> list[Update]:
        """Fetch one batch of updates newer than the cursor into the backlog.

        A caller that had to wait for another caller's fetch returns at once
        with an empty list: the updates it waited for are already in the
        backlog.

        Args:
            max_wait: Upper bound on how long this call may block, covering
                both the long-poll wait and any backoff sleep.

        Returns:
            The newly fetched updates in feed order; empty after a transport
            failure or when another caller fetched first.
        """
        wait = self._long_poll_seconds
        if max_wait is not None:
            wait = max(min(wait, max_wait), 0)

        seen = self._fetch_count
        try:
            async with self._lock:
                if self._fetch_count != seen:
                    return []
                batch = await self._transport.fetch_updates(
                    self._cursor.next_fetch_floor(), wait
                )
                self._cursor.advance(batch.highest_update_id)
                self._backlog.extend(batch.updates)
                self._fetch_count += 1
        except TransportError as e:
            self._consecutive_failures += 1
            delay = self.backoff_delay()
            if max_wait is not None:
                delay = max(min(delay, max_wait), 0)
            logger.warning(
                "getUpdates failed, retrying in %dms (attempt %d): %s",
                round(delay * 1000),
                self._consecutive_failures,
                e,
            )
            await self._sleep(delay)
            return []

        self._consecutive_failures = 0
        return batch.updates

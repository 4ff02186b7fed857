"""Liveness heartbeat for long waits."""

import asyncio
import inspect
from typing import Any, Callable

from ..logging_config import get_logger

logger = get_logger(__name__)

# notify(progress_counter, message); may return an awaitable
Notifier = Callable[[int, str], Any]

DEFAULT_MESSAGE = "Waiting for user reply..."


class Heartbeat:
    """Fires a notifier at a fixed cadence until stopped.

    Notifications are fire-and-forget: they are never awaited by the
    heartbeat loop and their failures are logged and dropped.
    """

    def __init__(
        self,
        notify: Notifier,
        interval_seconds: float = 5.0,
        message: str = DEFAULT_MESSAGE,
    ):
        self._notify = notify
        self._interval_seconds = interval_seconds
        self._message = message
        self._count = 0
        self._task: asyncio.Task | None = None
        self._pending: set[asyncio.Future] = set()

    @property
    def count(self) -> int:
        """Number of notifications fired so far."""
        return self._count

    def start(self) -> None:
        """Start the background loop."""
        if self._task is None:
            self._task = asyncio.create_task(self._run())

    async def stop(self) -> None:
        """Stop the background loop and cancel notifications still in flight."""
        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None

        # Nothing may be sent after the caller has its result
        pending = list(self._pending)
        for future in pending:
            future.cancel()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)
        self._pending.clear()

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self._interval_seconds)
            self._count += 1
            self._fire(self._count)

    def _fire(self, progress: int) -> None:
        try:
            result = self._notify(progress, self._message)
        except Exception as e:
            logger.debug("Heartbeat notification failed: %s", e)
            return

        if inspect.isawaitable(result):
            future = asyncio.ensure_future(result)
            self._pending.add(future)
            future.add_done_callback(self._on_done)

    def _on_done(self, future: asyncio.Future) -> None:
        self._pending.discard(future)
        if not future.cancelled() and future.exception() is not None:
            logger.debug("Heartbeat notification failed: %s", future.exception())

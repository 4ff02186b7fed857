"""Pytest configuration and fixtures."""

import asyncio
import sys
from pathlib import Path

import pytest
import pytest_asyncio

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from feedback.config import Settings  # noqa: E402
from feedback.models import UpdateBatch  # noqa: E402
from feedback.errors import TransportError  # noqa: E402

CHAT_ID = "42"


class ManualClock:
    """Monotonic clock that only moves when sleep() is awaited."""

    def __init__(self, start: float = 0.0):
        self.now = start
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds
        await asyncio.sleep(0)


class FakeTransport:
    """Scripted transport: each fetch pops the next batch or exception."""

    def __init__(self, clock: ManualClock | None = None, chat_type: str = "private"):
        self.clock = clock
        self.chat_type = chat_type
        self.batches: list = []
        self.fetch_calls: list[tuple[int | None, float]] = []
        self.sent: list[dict] = []
        self.acks: list[tuple[str, str | None]] = []
        self.files: dict[str, bytes] = {}
        self.next_message_id = 100
        self.closed = False

    async def send_message(self, text: str, **kwargs) -> int:
        message_id = self.next_message_id
        self.next_message_id += 1
        self.sent.append({"text": text, "message_id": message_id, **kwargs})
        return message_id

    async def fetch_updates(self, offset, wait_seconds) -> UpdateBatch:
        self.fetch_calls.append((offset, wait_seconds))
        if self.batches:
            item = self.batches.pop(0)
            if isinstance(item, Exception):
                raise item
            return item
        # Nothing scripted: behave like a long poll that returned empty
        if self.clock is not None:
            self.clock.now += wait_seconds
        await asyncio.sleep(0)
        return UpdateBatch()

    async def answer_callback_query(self, click_id: str, text: str | None = None) -> None:
        self.acks.append((click_id, text))

    async def download_file(self, file_id: str) -> bytes:
        if file_id not in self.files:
            raise TransportError("getFile", "file not found")
        return self.files[file_id]

    async def get_chat_type(self) -> str:
        return self.chat_type

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def settings():
    """Settings for a private chat with predictable intervals."""
    return Settings(
        bot_token="TOKEN",
        chat_id=CHAT_ID,
        poll_interval_seconds=2.0,
        getupdates_timeout_seconds=25.0,
        emergency_timeout_seconds=3600.0,
        non_emergency_timeout_seconds=180.0,
        heartbeat_interval_seconds=5.0,
    )


@pytest.fixture
def clock():
    """Manual clock starting at zero."""
    return ManualClock()


@pytest.fixture
def transport(clock):
    """Scripted fake transport bound to the manual clock."""
    return FakeTransport(clock=clock)


@pytest_asyncio.fixture
async def service(settings, transport, clock):
    """FeedbackService wired to the fake transport and manual clock."""
    from feedback.app import FeedbackService

    svc = FeedbackService(
        settings,
        transport=transport,
        clock=clock,
        wall_clock=lambda: 1000.0,
        sleep=clock.sleep,
    )
    yield svc
    await svc.stop()

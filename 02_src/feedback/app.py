"""Service bootstrap and the two caller-facing operations."""

import asyncio
import time
from dataclasses import replace
from typing import Awaitable, Callable, Protocol

from .buttons import QuickReply, build_inline_keyboard, correlation_mode_for
from .config import Settings, normalize_parse_mode
from .content import ReplyBuilder, build_prompt, resolve_project_directory
from .errors import ConfigurationError, NoQuestionError
from .ledger import Ledger
from .logging_config import get_logger
from .models import CorrelationMode, Question, Reply
from .polling import LongPollLoop, ReplyMatcher, UpdateCursor
from .session import Heartbeat, Notifier, TimeoutPolicy, WaitSession
from .transport import ITransport, TelegramTransport

logger = get_logger(__name__)

DEFAULT_SUMMARY = (
    "Please review the changes I just made and reply with your feedback "
    "or next instructions."
)


class IFeedbackService(Protocol):
    """Ask a human through Telegram and wait for the answer."""

    @property
    def settings(self) -> Settings:
        """Runtime settings."""
        ...

    async def start(self) -> None:
        """Verify the chat and prepare for polling."""
        ...

    async def stop(self) -> None:
        """Release the transport."""
        ...

    async def ask(
        self,
        summary: str = DEFAULT_SUMMARY,
        project_directory: str = ".",
        emergency: bool = False,
        parse_mode: str | None = None,
        quick_replies: list[QuickReply] | None = None,
        notify: Notifier | None = None,
    ) -> Reply:
        """Send a question and block until it is answered."""
        ...

    async def resume(
        self,
        message_id: int | None = None,
        emergency: bool = False,
        notify: Notifier | None = None,
    ) -> Reply:
        """Return the cached reply or keep waiting for an earlier question."""
        ...


class FeedbackService:
    """Wires the transport, cursor, ledger and wait sessions together."""

    def __init__(
        self,
        settings: Settings,
        transport: ITransport | None = None,
        clock: Callable[[], float] = time.monotonic,
        wall_clock: Callable[[], float] = time.time,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self._settings = settings
        self._transport = transport or TelegramTransport(settings)
        self._clock = clock
        self._wall_clock = wall_clock
        self._sleep = sleep

        # Process-wide state
        self._cursor = UpdateCursor()
        self._ledger = Ledger()

        self._policy = TimeoutPolicy(
            urgent_seconds=settings.emergency_timeout_seconds,
            normal_seconds=settings.non_emergency_timeout_seconds,
        )
        self._matcher = ReplyMatcher(settings.chat_id, settings.clock_skew_seconds)
        self._poll_loop = LongPollLoop(
            self._transport,
            self._cursor,
            poll_interval_seconds=settings.poll_interval_seconds,
            long_poll_seconds=settings.getupdates_timeout_seconds,
            sleep=sleep,
        )
        self._builder = ReplyBuilder(
            self._transport,
            include_images=settings.include_images,
            max_images=settings.max_images,
            read_receipt_enabled=settings.read_receipt_enabled,
            read_receipt_text=settings.read_receipt_text,
            read_receipt_silent=settings.read_receipt_silent,
        )

    @property
    def settings(self) -> Settings:
        return self._settings

    @property
    def ledger(self) -> Ledger:
        return self._ledger

    @property
    def cursor(self) -> UpdateCursor:
        return self._cursor

    @property
    def policy(self) -> TimeoutPolicy:
        return self._policy

    async def start(self) -> None:
        """Refuse to run against anything but a private chat."""
        logger.info("Starting feedback service")
        chat_type = await self._transport.get_chat_type()
        if chat_type != "private":
            raise ConfigurationError(
                f'Only private chats are supported (chat.type="private"), got '
                f'chat.type="{chat_type}". Point TELEGRAM_CHAT_ID at the private '
                "chat between the bot and the user."
            )
        logger.info("Feedback service started")

    async def stop(self) -> None:
        """Close the transport if it owns resources."""
        close = getattr(self._transport, "close", None)
        if close is not None:
            await close()
        logger.info("Feedback service stopped")

    async def ask(
        self,
        summary: str = DEFAULT_SUMMARY,
        project_directory: str = ".",
        emergency: bool = False,
        parse_mode: str | None = None,
        quick_replies: list[QuickReply] | None = None,
        notify: Notifier | None = None,
    ) -> Reply:
        """Send a question and block until it is answered."""
        timeout_seconds = self._policy.select(emergency)
        # Unset means the configured mode; "none"/"off" disables formatting
        if parse_mode is None or not parse_mode.strip():
            effective_parse_mode = self._settings.parse_mode
        else:
            effective_parse_mode = normalize_parse_mode(parse_mode)

        prompt = build_prompt(
            summary,
            resolve_project_directory(project_directory),
            timeout_seconds,
            effective_parse_mode,
        )
        keyboard = build_inline_keyboard(quick_replies) if quick_replies else None
        mode = correlation_mode_for(self._settings.force_reply, bool(keyboard))

        issued_at = int(self._wall_clock())
        message_id = await self._transport.send_message(
            prompt,
            parse_mode=effective_parse_mode,
            force_reply=mode is CorrelationMode.STRICT,
            inline_keyboard=keyboard,
        )

        question = Question(
            message_id=message_id,
            issued_at=issued_at,
            mode=mode,
            urgent=emergency,
        )
        await self._ledger.record_question(question)
        logger.info(
            "Question %s sent",
            message_id,
            extra={
                "context": {
                    "message_id": message_id,
                    "mode": mode.value,
                    "emergency": emergency,
                    "timeout_seconds": timeout_seconds,
                }
            },
        )

        return await self._new_session(question, timeout_seconds, notify).run()

    async def resume(
        self,
        message_id: int | None = None,
        emergency: bool = False,
        notify: Notifier | None = None,
    ) -> Reply:
        """Return the cached reply or keep waiting for an earlier question."""
        current = await self._ledger.current_question()
        target_id = message_id
        if target_id is None and current is not None:
            target_id = current.message_id
        if target_id is None:
            raise NoQuestionError(
                "No previous question is available. Call telegram_chat to ask one first."
            )

        cached = await self._ledger.lookup_reply(target_id)
        if cached is not None:
            return cached

        if current is not None and current.message_id == target_id:
            question = replace(current, urgent=emergency)
        else:
            # Unknown question: no issue time, default correlation
            if self._settings.force_reply:
                mode = CorrelationMode.STRICT
            else:
                mode = CorrelationMode.LOOSE
            question = Question(message_id=target_id, issued_at=0, mode=mode, urgent=emergency)

        timeout_seconds = self._policy.select(emergency)
        logger.info("Resuming wait for message %s (mode=%s)", target_id, question.mode.value)
        return await self._new_session(question, timeout_seconds, notify).run()

    def _new_session(
        self, question: Question, timeout_seconds: float, notify: Notifier | None
    ) -> WaitSession:
        heartbeat = None
        if notify is not None:
            heartbeat = Heartbeat(notify, self._settings.heartbeat_interval_seconds)

        return WaitSession(
            question=question,
            timeout_seconds=timeout_seconds,
            poll_loop=self._poll_loop,
            matcher=self._matcher,
            ledger=self._ledger,
            builder=self._builder,
            transport=self._transport,
            poll_interval_seconds=self._settings.poll_interval_seconds,
            heartbeat=heartbeat,
            clock=self._clock,
            sleep=self._sleep,
        )

"""Telegram Bot API client built on httpx."""

from typing import Any, Protocol

import httpx

from ..config import Settings
from ..errors import TransportError
from ..logging_config import get_logger
from ..models import UpdateBatch
from .wire import parse_updates

logger = get_logger(__name__)

ALLOWED_UPDATES = ["message", "callback_query"]
GETUPDATES_LIMIT = 50

InlineKeyboard = list[list[dict[str, str]]]


class ITransport(Protocol):
    """The chat transport consumed by the wait engine."""

    async def send_message(
        self,
        text: str,
        *,
        parse_mode: str | None = None,
        force_reply: bool = False,
        inline_keyboard: InlineKeyboard | None = None,
        reply_to_message_id: int | None = None,
        allow_sending_without_reply: bool | None = None,
        disable_notification: bool | None = None,
    ) -> int:
        """Post a message to the configured chat. Return its message id."""
        ...

    async def fetch_updates(self, offset: int | None, wait_seconds: float) -> UpdateBatch:
        """Long-poll for updates with id >= offset."""
        ...

    async def answer_callback_query(self, click_id: str, text: str | None = None) -> None:
        """Acknowledge a button click."""
        ...

    async def download_file(self, file_id: str) -> bytes:
        """Resolve a file id and download its bytes."""
        ...

    async def get_chat_type(self) -> str:
        """Return the type of the configured chat."""
        ...


class TelegramTransport:
    """Telegram Bot API client scoped to a single chat."""

    def __init__(
        self,
        settings: Settings,
        client: httpx.AsyncClient | None = None,
        request_timeout: float = 30.0,
    ):
        self._chat_id = settings.chat_id
        self._api_url = f"{settings.api_base}/bot{settings.bot_token}"
        self._file_url = f"{settings.api_base}/file/bot{settings.bot_token}"
        self._request_timeout = request_timeout
        self._client = client or httpx.AsyncClient()

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        await self._client.aclose()

    async def _call(
        self, method: str, payload: dict[str, Any], timeout: float | None = None
    ) -> Any:
        """Call a Bot API method and return its result."""
        try:
            response = await self._client.post(
                f"{self._api_url}/{method}",
                json=payload,
                timeout=timeout or self._request_timeout,
            )
        except httpx.HTTPError as e:
            raise TransportError(method, str(e) or e.__class__.__name__) from e

        try:
            data = response.json()
        except ValueError as e:
            raise TransportError(method, f"HTTP {response.status_code}") from e

        if not isinstance(data, dict) or not data.get("ok"):
            description = data.get("description") if isinstance(data, dict) else None
            raise TransportError(method, description or f"HTTP {response.status_code}")

        return data.get("result")

    async def _send_message_once(
        self,
        text: str,
        parse_mode: str | None,
        force_reply: bool,
        inline_keyboard: InlineKeyboard | None,
        reply_to_message_id: int | None,
        allow_sending_without_reply: bool | None,
        disable_notification: bool | None,
    ) -> int:
        payload: dict[str, Any] = {"chat_id": self._chat_id, "text": text}
        if parse_mode:
            payload["parse_mode"] = parse_mode

        reply_markup: dict[str, Any] = {}
        if force_reply:
            reply_markup["force_reply"] = True
        if inline_keyboard:
            reply_markup["inline_keyboard"] = inline_keyboard
        if reply_markup:
            payload["reply_markup"] = reply_markup

        if reply_to_message_id is not None:
            payload["reply_to_message_id"] = reply_to_message_id
        if allow_sending_without_reply is not None:
            payload["allow_sending_without_reply"] = allow_sending_without_reply
        if disable_notification is not None:
            payload["disable_notification"] = disable_notification

        result = await self._call("sendMessage", payload)
        return int(result["message_id"])

    async def send_message(
        self,
        text: str,
        *,
        parse_mode: str | None = None,
        force_reply: bool = False,
        inline_keyboard: InlineKeyboard | None = None,
        reply_to_message_id: int | None = None,
        allow_sending_without_reply: bool | None = None,
        disable_notification: bool | None = None,
    ) -> int:
        """Send a message; retry once as plain text if the markup is rejected."""
        args = (
            force_reply,
            inline_keyboard,
            reply_to_message_id,
            allow_sending_without_reply,
            disable_notification,
        )
        try:
            return await self._send_message_once(text, parse_mode, *args)
        except TransportError as e:
            if not parse_mode or not e.is_parse_error:
                raise
            logger.warning(
                "sendMessage with parse_mode=%s failed, retrying as plain text: %s",
                parse_mode,
                e.description,
            )
            return await self._send_message_once(text, None, *args)

    async def fetch_updates(self, offset: int | None, wait_seconds: float) -> UpdateBatch:
        """Long-poll getUpdates."""
        payload: dict[str, Any] = {
            "limit": GETUPDATES_LIMIT,
            "allowed_updates": ALLOWED_UPDATES,
        }
        if offset is not None:
            payload["offset"] = offset
        wait = max(int(wait_seconds), 0)
        if wait > 0:
            payload["timeout"] = wait

        result = await self._call("getUpdates", payload, timeout=wait + 5)
        return parse_updates(result or [])

    async def answer_callback_query(self, click_id: str, text: str | None = None) -> None:
        """Acknowledge a button click."""
        payload: dict[str, Any] = {"callback_query_id": click_id}
        if text:
            payload["text"] = text
        await self._call("answerCallbackQuery", payload)

    async def download_file(self, file_id: str) -> bytes:
        """Resolve a file id via getFile and download its bytes."""
        result = await self._call("getFile", {"file_id": file_id})
        file_path = (result or {}).get("file_path")
        if not file_path:
            raise TransportError("getFile", "no file_path returned")

        try:
            response = await self._client.get(
                f"{self._file_url}/{file_path}", timeout=self._request_timeout
            )
            response.raise_for_status()
        except httpx.HTTPError as e:
            raise TransportError("downloadFile", str(e) or e.__class__.__name__) from e
        return response.content

    async def get_chat_type(self) -> str:
        """Return the type of the configured chat."""
        result = await self._call("getChat", {"chat_id": self._chat_id})
        return str((result or {}).get("type") or "unknown")

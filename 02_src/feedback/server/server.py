"""MCP tool server exposing the feedback bridge."""

import os
from contextlib import asynccontextmanager
from typing import Annotated, AsyncIterator

from dotenv import load_dotenv
from mcp.server.fastmcp import Context, FastMCP
from mcp.types import CallToolResult, ImageContent, TextContent
from pydantic import Field

from ..app import DEFAULT_SUMMARY, FeedbackService, IFeedbackService
from ..buttons import QuickReply
from ..config import DEFAULT_ENV_PATH, Settings
from ..errors import FeedbackError, ReplyTimeout
from ..logging_config import get_logger, setup_logging
from ..models import ContentItem, ImageItem, TextItem
from ..session import Notifier

logger = get_logger(__name__)

SERVER_NAME = "telegram-feedback-mcp"

TELEGRAM_CHAT_DESCRIPTION = (
    "Ask the user a question through Telegram and wait for the reply "
    "(private chat only; images supported).\n\n"
    "Only set emergency=true for questions that are urgent and block further "
    "work until the user answers. Progress reports and non-blocking questions "
    "should use emergency=false (short timeout; a default text is returned on "
    "timeout).\n\n"
    "summary is sent verbatim with the chosen Telegram parse_mode, so you may "
    "use HTML / MarkdownV2 / Markdown formatting.\n\n"
    "quick_replies adds candidate answer buttons the user can tap."
)

GET_LAST_DESCRIPTION = (
    "Get or keep waiting for the reply to the most recent telegram_chat question "
    "(private chat only; images supported). Use this after an external timeout "
    "interrupted a wait: it returns an already received reply immediately or "
    "resumes waiting for the same question."
)


# Global service instance
_service: IFeedbackService | None = None


def get_service() -> IFeedbackService:
    """Get the global service instance, building it from the environment."""
    global _service
    if not _service:
        _service = FeedbackService(Settings.from_env())
    return _service


def set_service(service: IFeedbackService | None) -> None:
    """Replace the global service instance."""
    global _service
    _service = service


@asynccontextmanager
async def lifespan(server: FastMCP) -> AsyncIterator[IFeedbackService]:
    """Verify the chat on startup; a misconfiguration aborts the server."""
    service = get_service()
    await service.start()
    try:
        yield service
    finally:
        await service.stop()


def _to_mcp_content(content: tuple[ContentItem, ...]) -> list[TextContent | ImageContent]:
    items: list[TextContent | ImageContent] = []
    for item in content:
        if isinstance(item, ImageItem):
            items.append(ImageContent(type="image", data=item.data, mimeType=item.mime_type))
        elif isinstance(item, TextItem):
            items.append(TextContent(type="text", text=item.text))
    return items


def _text_result(text: str, is_error: bool = False) -> CallToolResult:
    return CallToolResult(content=[TextContent(type="text", text=text)], isError=is_error)


def progress_notifier(ctx: Context | None) -> Notifier | None:
    """Build a notifier that sends MCP progress notifications for this request.

    Clients that did not supply a progress token get the request id as the
    token, which is enough for clients that reset their timeout on progress.
    """
    if ctx is None:
        return None

    async def notify(progress: int, message: str) -> None:
        request_context = ctx.request_context
        meta = request_context.meta
        token = meta.progressToken if meta and meta.progressToken is not None else None
        if token is None:
            token = request_context.request_id
        await request_context.session.send_progress_notification(
            progress_token=token,
            progress=progress,
            message=message,
            related_request_id=ctx.request_id,
        )

    return notify


async def telegram_chat(
    project_directory: Annotated[
        str, Field(description="Project directory, shown in the message header")
    ] = ".",
    summary: Annotated[
        str,
        Field(
            description=(
                "Work summary or question to send. Sent verbatim: with parse_mode=HTML "
                "you must write/escape HTML yourself; with MarkdownV2, escape special "
                "characters per MarkdownV2 rules."
            )
        ),
    ] = DEFAULT_SUMMARY,
    emergency: Annotated[
        bool,
        Field(
            description=(
                "true = long timeout; false = short timeout and a default text on "
                "timeout. Only true when work cannot continue without an answer."
            )
        ),
    ] = False,
    parse_mode: Annotated[
        str | None,
        Field(
            description=(
                "Telegram parse_mode: HTML / MarkdownV2 / Markdown; none/off/false "
                "disables formatting. Defaults to TELEGRAM_PARSE_MODE (HTML)."
            )
        ),
    ] = None,
    quick_replies: Annotated[
        list[QuickReply] | None,
        Field(description="Optional candidate answers shown as buttons"),
    ] = None,
    ctx: Context = None,
) -> CallToolResult:
    """Ask the user and wait for the reply."""
    service = get_service()
    try:
        reply = await service.ask(
            summary=summary,
            project_directory=project_directory,
            emergency=emergency,
            parse_mode=parse_mode,
            quick_replies=quick_replies,
            notify=progress_notifier(ctx),
        )
    except ReplyTimeout as e:
        if not e.urgent:
            return _text_result(service.settings.non_emergency_timeout_text)
        return _text_result(f"Telegram interaction failed: {e}", is_error=True)
    except FeedbackError as e:
        logger.error("telegram_chat failed: %s", e)
        return _text_result(f"Telegram interaction failed: {e}", is_error=True)

    return CallToolResult(content=_to_mcp_content(reply.content))


async def get_last_feedback_response(
    message_id: Annotated[
        int | None,
        Field(
            description=(
                "Optional id of the question message to wait on. Defaults to the "
                "most recent telegram_chat question."
            )
        ),
    ] = None,
    emergency: Annotated[
        bool,
        Field(
            description=(
                "true = long timeout; false = short timeout and a default text on timeout."
            )
        ),
    ] = False,
    ctx: Context = None,
) -> CallToolResult:
    """Return the cached reply or resume waiting for it."""
    service = get_service()
    try:
        reply = await service.resume(
            message_id=message_id,
            emergency=emergency,
            notify=progress_notifier(ctx),
        )
    except ReplyTimeout as e:
        if not e.urgent:
            return _text_result(service.settings.non_emergency_timeout_text)
        return _text_result(f"Fetching the last reply failed: {e}", is_error=True)
    except FeedbackError as e:
        logger.error("get_last_feedback_response failed: %s", e)
        return _text_result(f"Fetching the last reply failed: {e}", is_error=True)

    return CallToolResult(content=_to_mcp_content(reply.content))


def create_mcp_server() -> FastMCP:
    """Create the MCP server with both tools registered."""
    mcp = FastMCP(SERVER_NAME, lifespan=lifespan)
    mcp.add_tool(
        telegram_chat,
        name="telegram_chat",
        description=TELEGRAM_CHAT_DESCRIPTION,
        structured_output=False,
    )
    mcp.add_tool(
        get_last_feedback_response,
        name="get_last_feedback_response",
        description=GET_LAST_DESCRIPTION,
        structured_output=False,
    )
    return mcp


def run() -> None:
    """Run the MCP server over the transport named by MCP_TRANSPORT (default stdio)."""
    load_dotenv(DEFAULT_ENV_PATH)
    setup_logging()

    transport = os.getenv("MCP_TRANSPORT", "stdio")
    logger.info("Starting %s over %s", SERVER_NAME, transport)
    create_mcp_server().run(transport=transport)

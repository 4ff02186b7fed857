"""Quick-reply buttons and button-click replies.

A click on an inline button is an alternate reply path: it names the
question message directly, so it needs no further correlation checks.
"""

from pydantic import BaseModel, Field

from ..errors import TransportError
from ..logging_config import get_logger
from ..models import ButtonClick, CorrelationMode, Reply, ReplySource, TextItem
from ..transport import ITransport

logger = get_logger(__name__)

MAX_BUTTONS_PER_ROW = 3
CALLBACK_DATA_MAX_BYTES = 64
CLICK_ACK_TEXT = "Received"


class QuickReply(BaseModel):
    """A candidate answer shown as an inline button."""

    text: str = Field(description="Button label")
    callback_data: str | None = Field(
        default=None, description="Value returned when clicked (defaults to text)"
    )


def _truncate_utf8(value: str, max_bytes: int) -> str:
    encoded = value.encode("utf-8")
    if len(encoded) <= max_bytes:
        return value
    return encoded[:max_bytes].decode("utf-8", errors="ignore")


def build_inline_keyboard(quick_replies: list[QuickReply]) -> list[list[dict[str, str]]]:
    """Lay out buttons in rows of at most three."""
    keyboard: list[list[dict[str, str]]] = []
    row: list[dict[str, str]] = []

    for reply in quick_replies:
        row.append(
            {
                "text": reply.text,
                "callback_data": _truncate_utf8(
                    reply.callback_data or reply.text, CALLBACK_DATA_MAX_BYTES
                ),
            }
        )
        if len(row) >= MAX_BUTTONS_PER_ROW:
            keyboard.append(row)
            row = []

    if row:
        keyboard.append(row)

    return keyboard


def correlation_mode_for(force_reply: bool, has_buttons: bool) -> CorrelationMode:
    """Strict correlation needs ForceReply, which cannot be combined with buttons."""
    if force_reply and not has_buttons:
        return CorrelationMode.STRICT
    return CorrelationMode.LOOSE


def reply_from_click(click: ButtonClick, question_id: int) -> Reply:
    """The click payload becomes a single text item."""
    return Reply(
        question_id=question_id,
        source=ReplySource.BUTTON,
        content=(TextItem(text=click.data),),
    )


async def acknowledge_click(transport: ITransport, click: ButtonClick) -> None:
    """Answer the callback query once. Failures are logged, not raised."""
    try:
        await transport.answer_callback_query(click.click_id, CLICK_ACK_TEXT)
    except TransportError as e:
        logger.warning("answerCallbackQuery failed: %s", e.description)

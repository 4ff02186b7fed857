"""Telegram Bot API wire models and conversion to domain updates."""

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ..logging_config import get_logger
from ..models import (
    ButtonClick,
    Document,
    PhotoSize,
    TextOrMediaMessage,
    Update,
    UpdateBatch,
)

logger = get_logger(__name__)


class _WireModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class TgChat(_WireModel):
    id: int | str
    type: str = ""


class TgUser(_WireModel):
    id: int | str
    is_bot: bool = False
    username: str | None = None


class TgPhotoSize(_WireModel):
    file_id: str
    width: int = 0
    height: int = 0
    file_size: int | None = None


class TgDocument(_WireModel):
    file_id: str
    file_name: str | None = None
    mime_type: str | None = None
    file_size: int | None = None


class TgMessageRef(_WireModel):
    message_id: int


class TgMessage(_WireModel):
    message_id: int
    date: int = 0
    chat: TgChat
    sender: TgUser | None = Field(default=None, alias="from")
    reply_to_message: TgMessageRef | None = None
    text: str | None = None
    caption: str | None = None
    photo: list[TgPhotoSize] = Field(default_factory=list)
    document: TgDocument | None = None


class TgCallbackQuery(_WireModel):
    id: str
    sender: TgUser | None = Field(default=None, alias="from")
    message: TgMessageRef | None = None
    chat_instance: str = ""
    data: str | None = None


class TgUpdate(_WireModel):
    update_id: int
    message: TgMessage | None = None
    callback_query: TgCallbackQuery | None = None


def _to_message(update_id: int, msg: TgMessage) -> TextOrMediaMessage:
    return TextOrMediaMessage(
        update_id=update_id,
        message_id=msg.message_id,
        chat_id=str(msg.chat.id),
        chat_type=msg.chat.type,
        date=msg.date,
        sender_id=str(msg.sender.id) if msg.sender else None,
        sender_is_bot=msg.sender.is_bot if msg.sender else False,
        reply_to_message_id=msg.reply_to_message.message_id if msg.reply_to_message else None,
        text=msg.text,
        caption=msg.caption,
        photos=tuple(
            PhotoSize(
                file_id=p.file_id,
                width=p.width,
                height=p.height,
                file_size=p.file_size or 0,
            )
            for p in msg.photo
        ),
        document=(
            Document(
                file_id=msg.document.file_id,
                file_name=msg.document.file_name,
                mime_type=msg.document.mime_type,
                file_size=msg.document.file_size or 0,
            )
            if msg.document
            else None
        ),
    )


def parse_update(raw: dict) -> Update | None:
    """Convert one raw update to a domain update; None for kinds we ignore."""
    update = TgUpdate.model_validate(raw)

    if update.callback_query is not None:
        cq = update.callback_query
        return ButtonClick(
            update_id=update.update_id,
            click_id=cq.id,
            message_id=cq.message.message_id if cq.message else None,
            data=cq.data or "",
            sender_id=str(cq.sender.id) if cq.sender else None,
        )

    if update.message is not None:
        return _to_message(update.update_id, update.message)

    return None


def parse_updates(raw_updates: list[dict]) -> UpdateBatch:
    """Parse a getUpdates result, keeping the highest id of every entry."""
    updates: list[Update] = []
    highest: int | None = None

    for raw in raw_updates:
        update_id = raw.get("update_id") if isinstance(raw, dict) else None
        if isinstance(update_id, int):
            highest = update_id if highest is None else max(highest, update_id)

        try:
            update = parse_update(raw)
        except ValidationError as e:
            logger.warning("Skipping malformed update %s: %s", update_id, e)
            continue

        if update is not None:
            updates.append(update)

    return UpdateBatch(updates=updates, highest_update_id=highest)

"""ReplyBuilder: turns a matched message into reply content."""

import base64

from ..errors import TransportError
from ..logging_config import get_logger
from ..models import (
    ContentItem,
    ImageItem,
    PhotoSize,
    Reply,
    ReplySource,
    TextItem,
    TextOrMediaMessage,
)
from ..transport import ITransport

logger = get_logger(__name__)

EMPTY_REPLY_TEXT = "The user's reply was empty."
PHOTO_MIME_TYPE = "image/jpeg"


def _photo_rank(photo: PhotoSize) -> tuple[int, int]:
    # file_size is optional on the wire, width and height are not
    return photo.width * photo.height, photo.file_size


class ReplyBuilder:
    """Builds reply content from a message and sends read receipts."""

    def __init__(
        self,
        transport: ITransport,
        include_images: bool = True,
        max_images: int = 8,
        read_receipt_enabled: bool = True,
        read_receipt_text: str = "Received",
        read_receipt_silent: bool = True,
    ):
        self._transport = transport
        self._include_images = include_images
        self._max_images = max_images
        self._read_receipt_enabled = read_receipt_enabled
        self._read_receipt_text = read_receipt_text.strip()
        self._read_receipt_silent = read_receipt_silent

    async def build(self, message: TextOrMediaMessage, question_id: int) -> Reply:
        """Text and caption first, then images, then notices for unsupported files."""
        content: list[ContentItem] = []

        parts = [p.strip() for p in (message.text, message.caption) if p]
        text = "\n\n".join(p for p in parts if p)
        if text:
            content.append(TextItem(text=text))

        if self._include_images:
            await self._add_media(message, content)

        if not content:
            content.append(TextItem(text=EMPTY_REPLY_TEXT))

        return Reply(
            question_id=question_id,
            source=ReplySource.MESSAGE,
            content=tuple(content),
            message_id=message.message_id,
        )

    async def _add_media(self, message: TextOrMediaMessage, content: list[ContentItem]) -> None:
        images_added = 0

        if message.photos and images_added < self._max_images:
            # Ties go to the last size sent, which Telegram lists largest last
            largest = max(reversed(message.photos), key=_photo_rank)
            if await self._add_image(largest.file_id, PHOTO_MIME_TYPE, content):
                images_added += 1

        document = message.document
        if document is None:
            return

        mime_type = document.mime_type or "application/octet-stream"
        if document.is_image:
            if images_added < self._max_images:
                await self._add_image(document.file_id, mime_type, content)
            return

        name = document.file_name or "attachment"
        prefix = "\n\n" if content else ""
        content.append(
            TextItem(
                text=(
                    f"{prefix}[Received a file that is not supported] {name} ({mime_type}). "
                    "Please send text or images instead."
                )
            )
        )

    async def _add_image(self, file_id: str, mime_type: str, content: list[ContentItem]) -> bool:
        try:
            data = await self._transport.download_file(file_id)
        except TransportError as e:
            # The update is already consumed, so keep the rest of the reply
            logger.warning("Image download failed for %s: %s", file_id, e)
            content.append(TextItem(text="[An image was sent but could not be downloaded]"))
            return False
        content.append(ImageItem(data=base64.b64encode(data).decode("ascii"), mime_type=mime_type))
        return True

    async def send_read_receipt(self, message: TextOrMediaMessage) -> None:
        """Best-effort receipt posted as a reply to the user's message."""
        if not self._read_receipt_enabled or not self._read_receipt_text:
            return
        try:
            await self._transport.send_message(
                self._read_receipt_text,
                reply_to_message_id=message.message_id,
                allow_sending_without_reply=True,
                disable_notification=self._read_receipt_silent,
            )
        except TransportError as e:
            logger.warning("Read receipt failed: %s", e.description)

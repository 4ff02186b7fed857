"""Inbound update models.

An update is one event from the chat feed: either a text/media message or
a click on one of the inline buttons attached to a question.
"""

from dataclasses import dataclass, field
from typing import Union


@dataclass(frozen=True)
class PhotoSize:
    """One resolution of a sent photo."""

    file_id: str
    width: int = 0
    height: int = 0
    file_size: int = 0


@dataclass(frozen=True)
class Document:
    """A file attached to a message."""

    file_id: str
    file_name: str | None = None
    mime_type: str | None = None
    file_size: int = 0

    @property
    def is_image(self) -> bool:
        return (self.mime_type or "").startswith("image/")


@dataclass(frozen=True)
class TextOrMediaMessage:
    """A message posted in the chat."""

    update_id: int
    message_id: int
    chat_id: str
    chat_type: str
    date: int  # unix seconds
    sender_id: str | None = None
    sender_is_bot: bool = False
    reply_to_message_id: int | None = None
    text: str | None = None
    caption: str | None = None
    photos: tuple[PhotoSize, ...] = field(default_factory=tuple)
    document: Document | None = None

    @property
    def has_content(self) -> bool:
        """True if the message carries text, a caption or any media."""
        return bool(
            (self.text or "").strip()
            or (self.caption or "").strip()
            or self.photos
            or self.document
        )


@dataclass(frozen=True)
class ButtonClick:
    """A click on an inline keyboard button."""

    update_id: int
    click_id: str
    message_id: int | None  # message whose buttons were clicked
    data: str = ""
    sender_id: str | None = None


Update = Union[TextOrMediaMessage, ButtonClick]


@dataclass(frozen=True)
class UpdateBatch:
    """One fetched page of the update feed."""

    updates: list[Update] = field(default_factory=list)
    # Highest update_id seen, including updates of kinds we do not model
    highest_update_id: int | None = None

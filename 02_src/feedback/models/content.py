"""Reply content models."""

from dataclasses import dataclass
from enum import Enum
from typing import Union


@dataclass(frozen=True)
class TextItem:
    """A text part of a reply."""

    text: str


@dataclass(frozen=True)
class ImageItem:
    """An image part of a reply, base64 encoded."""

    data: str
    mime_type: str = "image/jpeg"


ContentItem = Union[TextItem, ImageItem]


class ReplySource(str, Enum):
    """Where a reply came from."""

    MESSAGE = "message"
    BUTTON = "button"


@dataclass(frozen=True)
class Reply:
    """The resolved answer to a question."""

    question_id: int
    source: ReplySource
    content: tuple[ContentItem, ...]
    message_id: int | None = None  # the user's message, if any

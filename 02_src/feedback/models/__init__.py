"""Core data models for the feedback bridge."""

from .content import ContentItem, ImageItem, Reply, ReplySource, TextItem
from .questions import CorrelationMode, Question
from .updates import (
    ButtonClick,
    Document,
    PhotoSize,
    TextOrMediaMessage,
    Update,
    UpdateBatch,
)

__all__ = [
    # Questions
    "CorrelationMode",
    "Question",
    # Updates
    "Update",
    "UpdateBatch",
    "TextOrMediaMessage",
    "ButtonClick",
    "PhotoSize",
    "Document",
    # Content
    "ContentItem",
    "TextItem",
    "ImageItem",
    "Reply",
    "ReplySource",
]

"""Telegram feedback bridge: ask a human, wait for the correlated reply."""

from .app import FeedbackService, IFeedbackService
from .config import Settings
from .errors import (
    ConfigurationError,
    FeedbackError,
    NoQuestionError,
    ReplyTimeout,
    TransportError,
)
from .ledger import ILedger, Ledger
from .models import (
    ButtonClick,
    CorrelationMode,
    ImageItem,
    Question,
    Reply,
    ReplySource,
    TextItem,
    TextOrMediaMessage,
    Update,
    UpdateBatch,
)
from .polling import LongPollLoop, ReplyMatcher, UpdateCursor
from .session import Heartbeat, SessionState, TimeoutPolicy, WaitSession
from .transport import ITransport, TelegramTransport

__all__ = [
    # Application
    "FeedbackService",
    "IFeedbackService",
    "Settings",
    # Errors
    "FeedbackError",
    "ConfigurationError",
    "TransportError",
    "ReplyTimeout",
    "NoQuestionError",
    # Models
    "CorrelationMode",
    "Question",
    "Update",
    "UpdateBatch",
    "TextOrMediaMessage",
    "ButtonClick",
    "Reply",
    "ReplySource",
    "TextItem",
    "ImageItem",
    # Components
    "ITransport",
    "TelegramTransport",
    "UpdateCursor",
    "ReplyMatcher",
    "LongPollLoop",
    "ILedger",
    "Ledger",
    "TimeoutPolicy",
    "Heartbeat",
    "SessionState",
    "WaitSession",
]

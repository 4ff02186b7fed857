"""Question-related data models."""

from dataclasses import dataclass
from enum import Enum


class CorrelationMode(str, Enum):
    """How an incoming message is tied to a question."""

    STRICT = "strict"  # reply must reference the question message
    LOOSE = "loose"  # any newer message after the issue time counts


@dataclass(frozen=True)
class Question:
    """An outgoing prompt awaiting exactly one reply."""

    message_id: int  # transport-assigned, increasing within the chat
    issued_at: int  # unix seconds
    mode: CorrelationMode
    urgent: bool = False

"""Polling module: update cursor, reply matcher and long-poll loop."""

from .cursor import UpdateCursor
from .loop import LongPollLoop
from .matcher import ReplyMatcher

__all__ = ["UpdateCursor", "LongPollLoop", "ReplyMatcher"]

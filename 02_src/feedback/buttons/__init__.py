"""Buttons module."""

from .buttons import (
    QuickReply,
    acknowledge_click,
    build_inline_keyboard,
    correlation_mode_for,
    reply_from_click,
)

__all__ = [
    "QuickReply",
    "acknowledge_click",
    "build_inline_keyboard",
    "correlation_mode_for",
    "reply_from_click",
]

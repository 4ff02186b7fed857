"""Transport module."""

from .telegram import ITransport, TelegramTransport
from .wire import parse_update, parse_updates

__all__ = ["ITransport", "TelegramTransport", "parse_update", "parse_updates"]

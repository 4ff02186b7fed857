"""MCP server module."""

from .server import (
    create_mcp_server,
    get_service,
    get_last_feedback_response,
    run,
    set_service,
    telegram_chat,
)

__all__ = [
    "create_mcp_server",
    "get_service",
    "get_last_feedback_response",
    "run",
    "set_service",
    "telegram_chat",
]

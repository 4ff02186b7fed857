"""Structured logging for the feedback bridge.

Records are written as one JSON object per line. stdout belongs to the
MCP stdio transport, so nothing here may write to it.
"""

import json
import logging
import logging.config
import logging.handlers
import os
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from .config import DEFAULT_LOG_PATH

# FEEDBACK_LOG_FILE value that turns the file handler off
CONSOLE_ONLY = "-"

LOG_FILE_MAX_BYTES = 10 * 1024 * 1024
LOG_FILE_BACKUPS = 5


class JSONFormatter(logging.Formatter):
    """Renders a record, its exception and any `context` extra as JSON."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)

        # logger.info(..., extra={"context": {"message_id": 42}})
        context = getattr(record, "context", None)
        if context is not None:
            payload["context"] = context

        return json.dumps(payload, ensure_ascii=False, default=str)


def _file_handler(log_file: str) -> dict[str, Any]:
    Path(log_file).parent.mkdir(parents=True, exist_ok=True)
    return {
        "class": "logging.handlers.RotatingFileHandler",
        "filename": log_file,
        "maxBytes": LOG_FILE_MAX_BYTES,
        "backupCount": LOG_FILE_BACKUPS,
        "formatter": "json",
        "encoding": "utf-8",
    }


def setup_logging(
    log_level: str | None = None,
    log_file: str | None = None,
) -> None:
    """
    Configure the root logger with a stderr handler and a rotating file.

    Args:
        log_level: DEBUG, INFO, WARNING, ERROR or CRITICAL.
                   Defaults to the LOG_LEVEL env var or INFO.
        log_file: Log file path. Defaults to the FEEDBACK_LOG_FILE env var
                  or 04_logs/app.log; "-" logs to stderr only.
    """
    level = (log_level or os.getenv("LOG_LEVEL") or "INFO").upper()
    target = log_file or os.getenv("FEEDBACK_LOG_FILE") or str(DEFAULT_LOG_PATH)

    handlers: dict[str, dict[str, Any]] = {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "json",
            "stream": "ext://sys.stderr",
        },
    }
    if target != CONSOLE_ONLY:
        handlers["file"] = _file_handler(target)

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "json": {"()": "feedback.logging_config.JSONFormatter"},
            },
            "handlers": handlers,
            "root": {"level": level, "handlers": list(handlers)},
        }
    )


def get_logger(name: str) -> logging.Logger:
    """Logger for a module; pass __name__."""
    return logging.getLogger(name)

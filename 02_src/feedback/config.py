"""Project-level configuration and path helpers."""

import os
from dataclasses import dataclass
from pathlib import Path

from .errors import ConfigurationError

PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
LOGS_DIR = PROJECT_ROOT / "04_logs"
DEFAULT_LOG_PATH = LOGS_DIR / "app.log"
DEFAULT_ENV_PATH = PROJECT_ROOT / ".env"

DEFAULT_NON_EMERGENCY_TIMEOUT_TEXT = (
    "The user has not replied yet (the non-urgent request timed out). "
    "You can continue with other work; to keep waiting, call "
    "get_last_feedback_response later or ask again with emergency=true."
)

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}
_DISABLED_PARSE_MODES = {"0", "false", "off", "none", "disable", "disabled"}


def _env_number(name: str, default: float, allow_zero: bool = False) -> float:
    """Read a numeric env var, falling back on unset, non-numeric or out-of-range values."""
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError:
        return default
    if value != value or value in (float("inf"), float("-inf")):
        return default
    if value < 0 or (value == 0 and not allow_zero):
        return default
    return value


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    return default


def _require_env(name: str) -> str:
    value = os.getenv(name)
    if not value:
        raise ConfigurationError(f"Missing required environment variable: {name}")
    return value


def normalize_parse_mode(raw: str | None) -> str | None:
    """Return the parse mode to send, or None when formatting is disabled/unset."""
    value = str(raw or "").strip()
    if not value:
        return None
    if value.lower() in _DISABLED_PARSE_MODES:
        return None
    return value


@dataclass(frozen=True)
class Settings:
    """Runtime settings, read once from the environment."""

    bot_token: str
    chat_id: str
    api_base: str = "https://api.telegram.org"
    poll_interval_seconds: float = 2.0
    getupdates_timeout_seconds: float = 25.0
    emergency_timeout_seconds: float = 6048000.0
    non_emergency_timeout_seconds: float = 180.0
    non_emergency_timeout_text: str = DEFAULT_NON_EMERGENCY_TIMEOUT_TEXT
    max_images: int = 8
    include_images: bool = True
    force_reply: bool = True
    clock_skew_seconds: float = 120.0
    read_receipt_enabled: bool = True
    read_receipt_text: str = "Received"
    read_receipt_silent: bool = True
    heartbeat_interval_seconds: float = 5.0
    parse_mode: str | None = "HTML"

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from environment variables."""
        default_timeout = _env_number("TELEGRAM_DEFAULT_TIMEOUT_SECONDS", 6048000)

        raw_parse_mode = os.getenv("TELEGRAM_PARSE_MODE", "").strip()
        # Unset means HTML; an explicit "off" value disables formatting
        parse_mode = normalize_parse_mode(raw_parse_mode) if raw_parse_mode else "HTML"

        return cls(
            bot_token=_require_env("TELEGRAM_BOT_TOKEN"),
            chat_id=_require_env("TELEGRAM_CHAT_ID"),
            api_base=os.getenv("TELEGRAM_API_BASE", "https://api.telegram.org").rstrip("/"),
            poll_interval_seconds=_env_number("TELEGRAM_POLL_INTERVAL_MS", 2000) / 1000,
            getupdates_timeout_seconds=_env_number(
                "TELEGRAM_GETUPDATES_TIMEOUT_SECONDS", 25, allow_zero=True
            ),
            emergency_timeout_seconds=_env_number(
                "TELEGRAM_EMERGENCY_TIMEOUT_SECONDS", default_timeout
            ),
            non_emergency_timeout_seconds=_env_number(
                "TELEGRAM_NON_EMERGENCY_TIMEOUT_SECONDS", 180
            ),
            non_emergency_timeout_text=(
                os.getenv("TELEGRAM_NON_EMERGENCY_TIMEOUT_TEXT")
                or DEFAULT_NON_EMERGENCY_TIMEOUT_TEXT
            ),
            max_images=int(_env_number("TELEGRAM_MAX_IMAGES", 8)),
            include_images=_env_bool("TELEGRAM_INCLUDE_IMAGES", True),
            force_reply=_env_bool("TELEGRAM_FORCE_REPLY", True),
            clock_skew_seconds=_env_number("TELEGRAM_CLOCK_SKEW_SECONDS", 120, allow_zero=True),
            read_receipt_enabled=_env_bool("TELEGRAM_READ_RECEIPT_ENABLED", True),
            read_receipt_text=os.getenv("TELEGRAM_READ_RECEIPT_TEXT", "Received").strip(),
            read_receipt_silent=_env_bool("TELEGRAM_READ_RECEIPT_SILENT", True),
            heartbeat_interval_seconds=_env_number("TELEGRAM_HEARTBEAT_INTERVAL_MS", 5000) / 1000,
            parse_mode=parse_mode,
        )

"""Error types raised by the feedback bridge."""


class FeedbackError(Exception):
    """Base class for all bridge errors."""


class ConfigurationError(FeedbackError):
    """Invalid or missing configuration. Fatal at startup."""


class TransportError(FeedbackError):
    """A Telegram Bot API call failed."""

    def __init__(self, method: str, description: str):
        super().__init__(f"Telegram {method} failed: {description}")
        self.method = method
        self.description = description

    @property
    def is_parse_error(self) -> bool:
        """True when Telegram rejected the message markup."""
        lower = self.description.lower()
        return "parse" in lower and "entit" in lower


class ReplyTimeout(FeedbackError):
    """No reply arrived before the wait deadline."""

    def __init__(self, duration_seconds: float, urgent: bool = False):
        seconds = duration_seconds
        if float(duration_seconds).is_integer():
            seconds = int(duration_seconds)
        super().__init__(f"Timed out waiting for user reply ({seconds} seconds)")
        self.duration_seconds = duration_seconds
        self.urgent = urgent


class NoQuestionError(FeedbackError):
    """Resume was requested but no question has been asked yet."""

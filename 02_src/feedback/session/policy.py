"""Timeout policy selection."""

from dataclasses import dataclass

DEFAULT_URGENT_SECONDS = 6048000.0
DEFAULT_NORMAL_SECONDS = 180.0


def _positive_or(value: object, default: float) -> float:
    try:
        number = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return default
    if number != number or number <= 0 or number == float("inf"):
        return default
    return number


@dataclass(frozen=True)
class TimeoutPolicy:
    """Maps the urgency flag to one of two wait durations."""

    urgent_seconds: float = DEFAULT_URGENT_SECONDS
    normal_seconds: float = DEFAULT_NORMAL_SECONDS

    def __post_init__(self):
        object.__setattr__(
            self, "urgent_seconds", _positive_or(self.urgent_seconds, DEFAULT_URGENT_SECONDS)
        )
        object.__setattr__(
            self, "normal_seconds", _positive_or(self.normal_seconds, DEFAULT_NORMAL_SECONDS)
        )

    def select(self, urgent: bool) -> float:
        """Return the wait duration in seconds."""
        return self.urgent_seconds if urgent else self.normal_seconds

"""UpdateCursor implementation."""


class UpdateCursor:
    """Highest update id already consumed from the feed. Never decreases."""

    def __init__(self, value: int | None = None):
        self._value = value

    @property
    def value(self) -> int | None:
        """Current cursor, or None before the first fetch."""
        return self._value

    def advance(self, observed_max: int | None) -> None:
        """Move the cursor to max(cursor, observed_max)."""
        if observed_max is None:
            return
        if self._value is None or observed_max > self._value:
            self._value = observed_max

    def next_fetch_floor(self) -> int | None:
        """Lowest update id the next fetch should return; None means unbounded."""
        if self._value is None:
            return None
        return self._value + 1

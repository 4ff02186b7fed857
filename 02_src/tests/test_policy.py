"""Tests for TimeoutPolicy."""

from feedback.session import TimeoutPolicy
from feedback.session.policy import DEFAULT_NORMAL_SECONDS, DEFAULT_URGENT_SECONDS


class TestTimeoutPolicy:
    """Tests for urgency-based timeout selection."""

    def test_select(self):
        """Test that urgency picks the matching duration."""
        policy = TimeoutPolicy(urgent_seconds=3600, normal_seconds=180)
        assert policy.select(True) == 3600
        assert policy.select(False) == 180

    def test_defaults(self):
        """Test the built-in fallback durations."""
        policy = TimeoutPolicy()
        assert policy.select(True) == DEFAULT_URGENT_SECONDS
        assert policy.select(False) == DEFAULT_NORMAL_SECONDS

    def test_non_positive_values_fall_back(self):
        """Test that zero or negative durations are replaced by defaults."""
        policy = TimeoutPolicy(urgent_seconds=0, normal_seconds=-5)
        assert policy.select(True) == DEFAULT_URGENT_SECONDS
        assert policy.select(False) == DEFAULT_NORMAL_SECONDS

    def test_non_numeric_values_fall_back(self):
        """Test that garbage durations are replaced by defaults."""
        policy = TimeoutPolicy(urgent_seconds="soon", normal_seconds=None)
        assert policy.select(True) == DEFAULT_URGENT_SECONDS
        assert policy.select(False) == DEFAULT_NORMAL_SECONDS

"""Session module: timeout policy, liveness heartbeat and wait session."""

from .heartbeat import Heartbeat, Notifier
from .policy import TimeoutPolicy
from .session import SessionState, WaitSession

__all__ = ["Heartbeat", "Notifier", "TimeoutPolicy", "SessionState", "WaitSession"]

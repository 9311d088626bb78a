"""
Recovery strategy classifications for error handling.

These base classes describe how playback keeps going when a signal
cannot be presented.
"""

from typing import Any, Optional


class GracefulDegradationError(Exception):
    """Base for errors that allow continued operation with reduced functionality."""

    def __init__(self, message: str, degraded_functionality: Optional[str] = None,
                 fallback_strategy: Optional[str] = None, **kwargs):
        super().__init__(message)
        self.degraded_functionality = degraded_functionality
        self.fallback_strategy = fallback_strategy
        self.allows_degradation = True


class PlaybackFaultError(GracefulDegradationError):
    """A signal could not be presented; playback skips ahead as if it timed out."""

    def __init__(self, message: str, signal: Any = None, **kwargs):
        kwargs.setdefault("degraded_functionality", "signal_presentation")
        kwargs.setdefault("fallback_strategy", "treat_as_timeout")
        super().__init__(message, **kwargs)
        self.signal = signal

"""
Input quality error classifications.

These exceptions describe values arriving from outside the core (player
selections, configuration files) that cannot be used as given.
"""

from typing import Optional, Dict, Any


class InputQualityError(Exception):
    """Base class for bad external input that can be handled gracefully."""

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.context = context or {}
        self.recoverable = True


class UnknownSignalError(InputQualityError):
    """A selected signal is outside the configured alphabet."""

    def __init__(self, message: str, signal: Any = None,
                 alphabet_size: Optional[int] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.signal = signal
        self.alphabet_size = alphabet_size


class MalformedConfigError(InputQualityError):
    """Configuration values failed validation."""

    def __init__(self, message: str, errors: Optional[list] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.errors = errors or []

"""
Error classification system for the Simon game engine.

Errors are grouped by how they are recovered: input quality problems are
dropped, playback faults degrade gracefully, and system failures signal a
broken invariant or an unavailable collaborator.
"""

from .input_quality import (
    InputQualityError,
    UnknownSignalError,
    MalformedConfigError,
)
from .system_failures import (
    SystemFailureError,
    StateTransitionError,
    PersistenceError,
)
from .recovery import (
    GracefulDegradationError,
    PlaybackFaultError,
)

__all__ = [
    # Input Quality Errors
    "InputQualityError",
    "UnknownSignalError",
    "MalformedConfigError",
    # System Failures
    "SystemFailureError",
    "StateTransitionError",
    "PersistenceError",
    # Recovery Categories
    "GracefulDegradationError",
    "PlaybackFaultError",
]

"""Base classes for signal presentation."""

from abc import ABC, abstractmethod
from typing import Any, Callable, Optional, Sequence

from ..logging.config import get_playback_logger
from ..state.models import Signal


class PlaybackHandle:
    """Handle to a signal that is being presented."""

    def stop(self) -> None:
        """Stop presentation early without reporting a natural end."""
        pass


class BaseSignalPlayer(ABC):
    """Base class for anything that can present a signal to the player."""

    def __init__(self, name: str, signal_names: Optional[Sequence[str]] = None):
        self.name = name
        self.signal_names = tuple(signal_names) if signal_names else ()
        self.logger = get_playback_logger(f"simon_app.playback.{name}")
        self._play_count = 0
        self._stop_count = 0

    @abstractmethod
    def play(self, signal: Signal, on_finished: Callable[[], None]) -> PlaybackHandle:
        """
        Start presenting a signal.

        Args:
            signal: Signal to present
            on_finished: Called once if the signal ends naturally

        Returns:
            Handle that stops the presentation early

        Raises:
            PlaybackFaultError: If the signal cannot be presented at all
        """
        pass

    def label(self, signal: Signal) -> str:
        """Display name for a signal."""
        if 0 <= signal < len(self.signal_names):
            return self.signal_names[signal]
        return f"signal-{signal}"

    def get_stats(self) -> dict[str, Any]:
        """Get presentation statistics."""
        return {
            "name": self.name,
            "play_count": self._play_count,
            "stop_count": self._stop_count,
        }

    def reset_stats(self) -> None:
        """Reset presentation statistics."""
        self._play_count = 0
        self._stop_count = 0

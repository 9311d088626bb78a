"""Signal player whose signals end after a fixed duration on a clock."""

from typing import Callable, Mapping, Optional, Sequence, Union

from ..errors import PlaybackFaultError
from ..state.models import Signal
from ..utils.timers import Clock, TimerHandle
from .base import BaseSignalPlayer, PlaybackHandle


class TimedPlaybackHandle(PlaybackHandle):
    """Handle that cancels the pending natural end of a timed signal."""

    def __init__(self, player: "TimedSignalPlayer", on_finished: Callable[[], None]):
        self._player = player
        self._on_finished = on_finished
        self._timer: Optional[TimerHandle] = None
        self._done = False

    def stop(self) -> None:
        if self._done:
            return
        self._done = True
        if self._timer is not None:
            self._timer.cancel()
        self._player._stop_count += 1

    def _finish(self) -> None:
        if self._done:
            return
        self._done = True
        self._on_finished()


class TimedSignalPlayer(BaseSignalPlayer):
    """
    Presents each signal for a known duration.

    Durations stand in for the length of each bird call. A signal with no
    duration is treated as a missing asset and raises PlaybackFaultError.
    """

    def __init__(
        self,
        clock: Clock,
        durations: Union[float, Mapping[Signal, float]] = 1.0,
        signal_names: Optional[Sequence[str]] = None,
        name: str = "timed"
    ):
        super().__init__(name, signal_names)
        self.clock = clock
        self.durations = durations

    def duration_for(self, signal: Signal) -> Optional[float]:
        if isinstance(self.durations, Mapping):
            return self.durations.get(signal)
        return float(self.durations)

    def play(self, signal: Signal, on_finished: Callable[[], None]) -> PlaybackHandle:
        duration = self.duration_for(signal)
        if duration is None:
            raise PlaybackFaultError(
                f"No presentation available for {self.label(signal)}",
                signal=signal
            )

        self._play_count += 1
        self.on_play(signal, duration)
        handle = TimedPlaybackHandle(self, on_finished)
        handle._timer = self.clock.call_later(duration, handle._finish)
        return handle

    def on_play(self, signal: Signal, duration: float) -> None:
        """Hook for subclasses that render the signal somewhere."""
        self.logger.debug(
            "Presenting signal",
            player=self.name,
            signal=signal,
            label=self.label(signal),
            duration=duration
        )

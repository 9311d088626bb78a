"""Standard output signal player."""

import json
import sys
from typing import Mapping, Optional, Sequence, Union

from ..state.models import Signal
from ..utils.timers import Clock
from .timed_player import TimedSignalPlayer


class StdoutSignalPlayer(TimedSignalPlayer):
    """Timed player that announces each signal on stdout."""

    def __init__(
        self,
        clock: Clock,
        durations: Union[float, Mapping[Signal, float]] = 1.0,
        signal_names: Optional[Sequence[str]] = None,
        output_format: str = "pretty",
        stream=None
    ):
        super().__init__(clock, durations, signal_names, name="stdout")
        self.output_format = output_format
        self.stream = stream or sys.stdout

    def on_play(self, signal: Signal, duration: float) -> None:
        print(self._format_signal(signal, duration), file=self.stream, flush=True)

    def _format_signal(self, signal: Signal, duration: float) -> str:
        """Format a signal announcement."""
        if self.output_format == "pretty":
            return f"[{self.clock.now():8.2f}] SIGNAL: {self.label(signal)} ({duration:.1f}s)"
        return json.dumps({
            "time": self.clock.now(),
            "signal": signal,
            "label": self.label(signal),
            "duration": duration,
        })

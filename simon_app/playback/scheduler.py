"""
Timed, cancellable presentation of a signal sequence.

A run walks the sequence one signal at a time:

    lead-in → [start, hold, end, pause] × n → grace → complete

A signal is held until its player reports a natural end or until
``max_signal_duration`` elapses, whichever comes first. The pause after the
last signal is replaced by the grace pause. Completion is reported exactly
once per run, and never for a run that was cancelled.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Optional, Sequence

from ..config.defaults import PlaybackParams
from ..errors import PlaybackFaultError, StateTransitionError
from ..logging.config import get_playback_logger
from ..state.models import Signal
from ..utils.timers import Clock, TimerHandle
from .base import BaseSignalPlayer, PlaybackHandle

logger = get_playback_logger(__name__)


@dataclass(frozen=True)
class HighlightEvent:
    """A signal started or stopped being presented."""
    run_id: int
    position: int
    signal: Signal
    active: bool


@dataclass
class _PlaybackRun:
    run_id: int
    signals: tuple[Signal, ...]
    on_complete: Callable[[int], None]
    grace_pause: float
    position: int = 0
    step_open: bool = False
    timer: Optional[TimerHandle] = None
    handle: Optional[PlaybackHandle] = None
    faults: list[str] = field(default_factory=list)


class PlaybackScheduler:
    """Plays one sequence at a time through a signal player."""

    def __init__(
        self,
        player: BaseSignalPlayer,
        clock: Clock,
        params: PlaybackParams,
        on_highlight: Optional[Callable[[HighlightEvent], None]] = None
    ):
        self.player = player
        self.clock = clock
        self.params = params
        self.on_highlight = on_highlight
        self.logger = logger

        self._run: Optional[_PlaybackRun] = None
        self._next_run_id = 0
        self._stats = {"started": 0, "completed": 0, "cancelled": 0, "faults": 0}

    @property
    def active(self) -> bool:
        return self._run is not None

    @property
    def current_run_id(self) -> Optional[int]:
        return self._run.run_id if self._run else None

    def play(
        self,
        signals: Sequence[Signal],
        on_complete: Callable[[int], None],
        lead_in: Optional[float] = None,
        grace_pause: Optional[float] = None
    ) -> int:
        """
        Start presenting signals.

        Args:
            signals: Signals to present, in order
            on_complete: Called with the run id once the run finishes
            lead_in: Pause before the first signal (defaults to params)
            grace_pause: Pause after the last signal (defaults to params)

        Returns:
            Id of the new run

        Raises:
            StateTransitionError: If a run is already active
        """
        if self._run is not None:
            raise StateTransitionError(
                "Playback run already active",
                current_state=f"run:{self._run.run_id}",
                attempted_transition="play"
            )

        self._next_run_id += 1
        run = _PlaybackRun(
            run_id=self._next_run_id,
            signals=tuple(signals),
            on_complete=on_complete,
            grace_pause=self.params.grace_pause if grace_pause is None else grace_pause,
        )
        self._run = run
        self._stats["started"] += 1

        self.logger.info(
            "Playback run started",
            run_id=run.run_id,
            length=len(run.signals),
            signals=list(run.signals)
        )

        delay = self.params.lead_in if lead_in is None else lead_in
        if run.signals:
            run.timer = self.clock.call_later(delay, self._begin_step, run)
        else:
            run.timer = self.clock.call_later(delay + run.grace_pause, self._complete, run)
        return run.run_id

    def cancel(self) -> bool:
        """
        Abandon the active run without further events.

        Returns:
            True if a run was cancelled
        """
        run = self._run
        if run is None:
            return False

        self._run = None
        if run.timer is not None:
            run.timer.cancel()
        if run.handle is not None:
            self._stop_handle(run)
        self._stats["cancelled"] += 1

        self.logger.info(
            "Playback run cancelled",
            run_id=run.run_id,
            position=run.position,
            length=len(run.signals)
        )
        return True

    def get_stats(self) -> dict[str, Any]:
        """Get run statistics."""
        return dict(self._stats, active=self.active)

    def _begin_step(self, run: _PlaybackRun) -> None:
        if run is not self._run:
            return

        position = run.position
        signal = run.signals[position]
        run.step_open = True
        self._emit(run, signal, active=True)
        if run is not self._run:
            return

        run.timer = self.clock.call_later(
            self.params.max_signal_duration, self._end_step, run, position, "timeout"
        )

        try:
            handle = self.player.play(signal, lambda: self._end_step(run, position, "finished"))
        except PlaybackFaultError as e:
            self._record_fault(run, signal, str(e))
            self._end_step(run, position, "fault")
            return
        except Exception as e:
            self._record_fault(run, signal, f"{type(e).__name__}: {e}")
            self._end_step(run, position, "fault")
            return

        if run is not self._run:
            handle.stop()
        elif run.step_open and run.position == position:
            run.handle = handle

    def _end_step(self, run: _PlaybackRun, position: int, reason: str) -> None:
        if run is not self._run or run.position != position or not run.step_open:
            return

        run.step_open = False
        if run.timer is not None:
            run.timer.cancel()
            run.timer = None
        if run.handle is not None:
            if reason == "timeout":
                self._stop_handle(run)
            run.handle = None

        signal = run.signals[position]
        self.logger.debug(
            "Signal presentation ended",
            run_id=run.run_id,
            position=position,
            signal=signal,
            reason=reason
        )
        self._emit(run, signal, active=False)

        # A highlight listener may have cancelled the run
        if run is not self._run:
            return

        run.position += 1
        if run.position < len(run.signals):
            run.timer = self.clock.call_later(
                self.params.inter_signal_pause, self._begin_step, run
            )
        else:
            run.timer = self.clock.call_later(run.grace_pause, self._complete, run)

    def _complete(self, run: _PlaybackRun) -> None:
        if run is not self._run:
            return

        self._run = None
        run.timer = None
        self._stats["completed"] += 1

        self.logger.info(
            "Playback run completed",
            run_id=run.run_id,
            length=len(run.signals),
            faults=len(run.faults)
        )
        run.on_complete(run.run_id)

    def _emit(self, run: _PlaybackRun, signal: Signal, active: bool) -> None:
        if self.on_highlight is not None:
            self.on_highlight(HighlightEvent(
                run_id=run.run_id,
                position=run.position,
                signal=signal,
                active=active
            ))

    def _stop_handle(self, run: _PlaybackRun) -> None:
        handle, run.handle = run.handle, None
        try:
            handle.stop()
        except Exception as e:
            self.logger.warning(
                "Failed to stop signal presentation",
                run_id=run.run_id,
                position=run.position,
                error=str(e)
            )

    def _record_fault(self, run: _PlaybackRun, signal: Signal, reason: str) -> None:
        run.faults.append(reason)
        self._stats["faults"] += 1
        self.logger.warning(
            "Signal presentation failed, skipping ahead",
            run_id=run.run_id,
            position=run.position,
            signal=signal,
            error=reason
        )

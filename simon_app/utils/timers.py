"""
Cancellable timer primitives.

The engine and the scheduler never sleep. They ask a Clock to call them
back later and keep the returned handle so the callback can be cancelled
when a game is reset. ManualClock advances only when told to, which makes
whole games reproducible; AsyncioClock runs the same code on an event loop.
"""

import asyncio
import heapq
import itertools
from abc import ABC, abstractmethod
from typing import Any, Callable, Optional


class TimerHandle:
    """Handle to a scheduled callback."""

    def __init__(self, when: float, callback: Callable[..., Any], args: tuple = ()):
        self.when = when
        self._callback = callback
        self._args = args
        self._cancelled = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        """Prevent the callback from running. Safe to call more than once."""
        self._cancelled = True

    def _run(self) -> None:
        if not self._cancelled:
            self._callback(*self._args)


class Clock(ABC):
    """Source of time and delayed callbacks."""

    @abstractmethod
    def now(self) -> float:
        """Current time in seconds."""
        pass

    @abstractmethod
    def call_later(self, delay: float, callback: Callable[..., Any], *args: Any) -> TimerHandle:
        """
        Schedule callback(*args) after delay seconds.

        Args:
            delay: Seconds to wait, clamped to zero
            callback: Callable to run
            *args: Positional arguments for the callback

        Returns:
            Cancellable handle for the scheduled call
        """
        pass


class ManualClock(Clock):
    """Deterministic clock that only moves when advanced."""

    def __init__(self, start: float = 0.0):
        self._now = start
        self._queue: list[tuple[float, int, TimerHandle]] = []
        self._counter = itertools.count()

    def now(self) -> float:
        return self._now

    def call_later(self, delay: float, callback: Callable[..., Any], *args: Any) -> TimerHandle:
        handle = TimerHandle(self._now + max(0.0, delay), callback, args)
        heapq.heappush(self._queue, (handle.when, next(self._counter), handle))
        return handle

    @property
    def pending(self) -> int:
        """Number of scheduled callbacks that have not been cancelled."""
        return sum(1 for _, _, handle in self._queue if not handle.cancelled)

    def next_due(self) -> Optional[float]:
        """Due time of the earliest live callback, if any."""
        for when, _, handle in sorted(self._queue):
            if not handle.cancelled:
                return when
        return None

    def advance(self, seconds: float) -> int:
        """
        Move time forward, firing every callback that falls due.

        Callbacks scheduled by fired callbacks also run if they fall due
        within the same window.

        Returns:
            Number of callbacks fired
        """
        target = self._now + seconds
        fired = 0

        while self._queue and self._queue[0][0] <= target:
            when, _, handle = heapq.heappop(self._queue)
            if handle.cancelled:
                continue
            self._now = when
            handle._run()
            fired += 1

        self._now = target
        return fired

    def run_until_idle(self, max_callbacks: int = 10000) -> int:
        """Fire callbacks in order until nothing is scheduled."""
        fired = 0

        while self._queue:
            when, _, handle = heapq.heappop(self._queue)
            if handle.cancelled:
                continue
            if fired >= max_callbacks:
                raise RuntimeError(f"Clock still busy after {max_callbacks} callbacks")
            self._now = max(self._now, when)
            handle._run()
            fired += 1

        return fired


class _LoopTimerHandle(TimerHandle):
    """TimerHandle that also cancels the underlying event loop handle."""

    def __init__(self, when: float, callback: Callable[..., Any], args: tuple = ()):
        super().__init__(when, callback, args)
        self.loop_handle: Optional[asyncio.TimerHandle] = None

    def cancel(self) -> None:
        super().cancel()
        if self.loop_handle is not None:
            self.loop_handle.cancel()


class AsyncioClock(Clock):
    """Clock backed by an asyncio event loop."""

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None):
        self._loop = loop

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        return self._loop

    def now(self) -> float:
        return self.loop.time()

    def call_later(self, delay: float, callback: Callable[..., Any], *args: Any) -> TimerHandle:
        delay = max(0.0, delay)
        handle = _LoopTimerHandle(self.now() + delay, callback, args)
        handle.loop_handle = self.loop.call_later(delay, handle._run)
        return handle

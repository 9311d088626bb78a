"""
Main game engine coordinator.

Owns the sequence, the player's input and the round phase, and drives the
playback scheduler. Every change of state goes through ``dispatch``, which
looks the inbound event up in the transition table for the current phase.

Round flow:
Start → Generate → Present → Await input → Validate → (next level | win | loss)
"""

import uuid
from collections import deque
from typing import Any, Callable, Optional

from .config.defaults import GameConfig, get_default_config
from .errors import PersistenceError, UnknownSignalError
from .logging.config import get_logger, get_state_logger, log_state_transition
from .persistence.score_store import ScorePersistence, SqliteScoreStore
from .playback.base import BaseSignalPlayer
from .playback.scheduler import HighlightEvent, PlaybackScheduler
from .playback.timed_player import TimedSignalPlayer
from .sequence.generator import SequenceGenerator
from .sequence.random_source import RandomSource, SeededRandomSource
from .state.machine import check_input, improves_high_score, resolve_verdict
from .state.models import (
    AdvanceDue,
    GameEvent,
    GameEventKind,
    GameSnapshot,
    InputReceived,
    InputVerdict,
    PlaybackCompleted,
    ResetRequested,
    RoundOutcome,
    RoundResult,
    RoundState,
    Signal,
    StartRequested,
)
from .state.transitions import handler_for, validate_transition
from .utils.timers import Clock, TimerHandle

logger = get_logger(__name__)
state_logger = get_state_logger(__name__)

Subscriber = Callable[[GameEvent], None]


class SequenceEngine:
    """
    Memory sequence game engine.

    All calls must come from the control flow that drives the clock. Events
    dispatched while another event is being handled (for example from a
    subscriber) are queued and handled afterwards, in order.
    """

    def __init__(
        self,
        config: GameConfig,
        player: BaseSignalPlayer,
        clock: Clock,
        random_source: RandomSource,
        persistence: ScorePersistence
    ) -> None:
        """Initialize the engine with its collaborators."""
        self.logger = logger
        self.config = config
        self.clock = clock
        self.persistence = persistence

        self.generator = SequenceGenerator(
            random_source,
            alphabet_size=config.game.alphabet_size,
            params=config.generation,
            win_level=config.game.win_level
        )
        self.scheduler = PlaybackScheduler(
            player, clock, config.playback, on_highlight=self._on_highlight
        )

        self.state = RoundState.IDLE
        self.sequence: list[Signal] = []
        self.user_input: list[Signal] = []
        self.result: Optional[RoundResult] = None
        self.game_id = self._new_game_id()
        self.games_started = 0

        self._subscribers: list[Subscriber] = []
        self._advance_timer: Optional[TimerHandle] = None
        self._presentation_run: Optional[int] = None
        self._echo_run: Optional[int] = None
        self._pending: deque = deque()
        self._dispatching = False

        self.high_score = self._load_high_score()

        self.logger.info(
            "Sequence engine initialized",
            alphabet_size=config.game.alphabet_size,
            win_level=config.game.win_level,
            high_score=self.high_score
        )

    @classmethod
    def from_config(
        cls,
        clock: Clock,
        config: Optional[GameConfig] = None,
        player: Optional[BaseSignalPlayer] = None,
        random_source: Optional[RandomSource] = None,
        persistence: Optional[ScorePersistence] = None
    ) -> "SequenceEngine":
        """Build an engine, filling in default collaborators from config."""
        config = config or get_default_config()
        if player is None:
            player = TimedSignalPlayer(clock, signal_names=config.game.signal_names)
        if random_source is None:
            random_source = SeededRandomSource()
        if persistence is None:
            persistence = SqliteScoreStore(config.storage.db_path, config.storage.score_key)
        return cls(config, player, clock, random_source, persistence)

    @property
    def level(self) -> int:
        return len(self.sequence)

    @property
    def accepts_input(self) -> bool:
        return self.state == RoundState.AWAITING_INPUT

    def subscribe(self, subscriber: Subscriber) -> None:
        """Register a callback for game events."""
        self._subscribers.append(subscriber)

    def unsubscribe(self, subscriber: Subscriber) -> None:
        """Remove a previously registered callback."""
        if subscriber in self._subscribers:
            self._subscribers.remove(subscriber)

    def snapshot(self) -> GameSnapshot:
        """Get an immutable view of the current game."""
        return GameSnapshot(
            game_id=self.game_id,
            state=self.state,
            sequence=tuple(self.sequence),
            user_input=tuple(self.user_input),
            high_score=self.high_score,
            result=self.result
        )

    def start(self) -> bool:
        """Start a new game, abandoning any game in progress."""
        return self.dispatch(StartRequested())

    def reset(self) -> bool:
        """Abandon any game in progress and return to idle."""
        return self.dispatch(ResetRequested())

    def press(self, signal: Signal) -> bool:
        """Deliver a player selection."""
        return self.dispatch(InputReceived(signal))

    def dispatch(self, event: object) -> bool:
        """
        Handle one inbound event.

        Args:
            event: StartRequested, ResetRequested, InputReceived,
                PlaybackCompleted or AdvanceDue

        Returns:
            False if the event has no effect in the current phase, True if it
            was handled or queued behind the event being handled
        """
        if self._dispatching:
            self._pending.append(event)
            return True

        self._dispatching = True
        try:
            handled = self._handle(event)
            while self._pending:
                self._handle(self._pending.popleft())
        finally:
            self._dispatching = False
            self._pending.clear()

        return handled

    def get_stats(self) -> dict[str, Any]:
        """Get engine statistics."""
        return {
            "game_id": self.game_id,
            "state": self.state.value,
            "level": self.level,
            "high_score": self.high_score,
            "games_started": self.games_started,
            "generation_fallbacks": self.generator.fallback_count,
            "playback": self.scheduler.get_stats(),
        }

    def _handle(self, event: object) -> bool:
        handler_name = handler_for(self.state, event)
        if handler_name is None:
            self.logger.debug(
                "Event ignored in current phase",
                game_id=self.game_id,
                state=self.state.value,
                event_type=type(event).__name__
            )
            return False
        return getattr(self, handler_name)(event) is not False

    # Event handlers

    def _on_start(self, event: StartRequested) -> None:
        self._enter_idle(trigger="start")

        self.game_id = self._new_game_id()
        self.games_started += 1
        self._transition(RoundState.GENERATING, trigger="start")
        self._schedule_advance(self.config.game.start_delay)

    def _on_reset(self, event: ResetRequested) -> None:
        self._enter_idle(trigger="reset")

    def _on_advance_due(self, event: AdvanceDue) -> bool:
        if event.game_id != self.game_id:
            return False
        self._advance_timer = None

        generated = self.generator.generate(self.sequence)
        self.sequence.append(generated.signal)

        self._transition(
            RoundState.PRESENTING,
            trigger="signal_generated",
            context={
                "signal": generated.signal,
                "level": self.level,
                "attempts": generated.attempts,
                "fallback": generated.fallback,
                "coverage_applied": generated.coverage_applied,
            }
        )
        self._presentation_run = self.scheduler.play(
            self.sequence, on_complete=self._on_run_complete
        )
        return True

    def _on_presentation_complete(self, event: PlaybackCompleted) -> bool:
        if event.run_id != self._presentation_run:
            return False
        self._presentation_run = None

        self._transition(
            RoundState.AWAITING_INPUT,
            trigger="presentation_complete",
            context={"level": self.level}
        )
        return True

    def _on_input(self, event: InputReceived) -> bool:
        try:
            self._check_signal(event.signal)
        except UnknownSignalError as e:
            self.logger.warning(
                "Rejected input outside the alphabet",
                game_id=self.game_id,
                signal=e.signal,
                alphabet_size=e.alphabet_size
            )
            return False

        self._transition(
            RoundState.VALIDATING,
            trigger="input",
            context={"signal": event.signal, "position": len(self.user_input)}
        )
        self.user_input.append(event.signal)

        if self.config.game.echo_input:
            self._echo_run = self.scheduler.play(
                [event.signal], on_complete=self._on_run_complete,
                lead_in=0.0, grace_pause=0.0
            )
            return True

        self._validate_latest()
        return True

    def _on_echo_complete(self, event: PlaybackCompleted) -> bool:
        if event.run_id != self._echo_run:
            return False
        self._echo_run = None
        self._validate_latest()
        return True

    # Round logic

    def _validate_latest(self) -> None:
        verdict = check_input(self.sequence, self.user_input)

        if verdict == InputVerdict.IGNORED:
            self._transition(RoundState.AWAITING_INPUT, trigger="input_ignored")
            return

        target = resolve_verdict(verdict, self.level, self.config.game.win_level)

        if target == RoundState.ROUND_LOST:
            self._finish(RoundOutcome.LOST, RoundState.ROUND_LOST, verdict)
        elif target == RoundState.ROUND_WON:
            self._finish(RoundOutcome.WON, RoundState.ROUND_WON, verdict)
        elif target == RoundState.GENERATING:
            self._complete_round()
        else:
            self._transition(
                RoundState.AWAITING_INPUT,
                trigger="input_accepted",
                context={"progress": len(self.user_input), "level": self.level}
            )

    def _complete_round(self) -> None:
        completed_level = self.level
        self._record_high_score()
        self.user_input.clear()

        self._transition(
            RoundState.GENERATING,
            trigger="round_complete",
            context={"level": completed_level}
        )
        self._publish(GameEventKind.ROUND_COMPLETED)
        self._schedule_advance(self.config.game.advance_delay)

    def _finish(self, outcome: RoundOutcome, target: RoundState, verdict: InputVerdict) -> None:
        self._cancel_activity()
        new_high_score = self._record_high_score()

        self.result = RoundResult(
            outcome=outcome,
            level=self.level,
            high_score=self.high_score,
            new_high_score=new_high_score
        )
        self._transition(
            target,
            trigger=verdict.value,
            context={
                "level": self.level,
                "sequence": list(self.sequence),
                "user_input": list(self.user_input),
                "high_score": self.high_score,
            }
        )
        kind = GameEventKind.GAME_WON if outcome == RoundOutcome.WON else GameEventKind.GAME_LOST
        self._publish(kind, result=self.result)

    def _record_high_score(self) -> bool:
        """Raise and persist the high score if the current level beats it."""
        if not improves_high_score(self.level, self.high_score):
            return False

        previous = self.high_score
        self.high_score = self.level
        try:
            self.persistence.set(self.high_score)
        except PersistenceError as e:
            self.logger.error(
                "Failed to persist high score, keeping it in memory",
                game_id=self.game_id,
                high_score=self.high_score,
                error=str(e)
            )
        except Exception as e:
            self.logger.error(
                "Unexpected error persisting high score, keeping it in memory",
                game_id=self.game_id,
                high_score=self.high_score,
                error=str(e),
                error_type=type(e).__name__,
                exc_info=True
            )

        self._publish(
            GameEventKind.HIGH_SCORE_UPDATED,
            data={"previous": previous, "high_score": self.high_score}
        )
        return True

    def _load_high_score(self) -> int:
        try:
            stored = self.persistence.get()
            if stored is None:
                return 0
            return max(0, int(stored))
        except PersistenceError as e:
            self.logger.error("Failed to load high score, starting from zero", error=str(e))
            return 0
        except Exception as e:
            self.logger.error(
                "Unexpected error loading high score, starting from zero",
                error=str(e),
                error_type=type(e).__name__,
                exc_info=True
            )
            return 0

    # Helpers

    def _enter_idle(self, trigger: str) -> None:
        self._cancel_activity()
        if self.state != RoundState.IDLE:
            self._transition(RoundState.IDLE, trigger=trigger)
        self.sequence.clear()
        self.user_input.clear()
        self.result = None

    def _cancel_activity(self) -> None:
        """Cancel pending timers and in-flight playback."""
        if self._advance_timer is not None:
            self._advance_timer.cancel()
            self._advance_timer = None
        self.scheduler.cancel()
        self._presentation_run = None
        self._echo_run = None

    def _schedule_advance(self, delay: float) -> None:
        self._advance_timer = self.clock.call_later(
            delay, self.dispatch, AdvanceDue(self.game_id)
        )

    def _on_run_complete(self, run_id: int) -> None:
        self.dispatch(PlaybackCompleted(run_id))

    def _check_signal(self, signal: Signal) -> None:
        alphabet_size = self.config.game.alphabet_size
        if isinstance(signal, bool) or not isinstance(signal, int) or not 0 <= signal < alphabet_size:
            raise UnknownSignalError(
                f"Signal {signal!r} is not in the alphabet",
                signal=signal,
                alphabet_size=alphabet_size
            )

    def _transition(
        self,
        target: RoundState,
        trigger: str,
        context: Optional[dict[str, Any]] = None
    ) -> None:
        validate_transition(self.state, target)
        previous = self.state

        log_state_transition(
            state_logger,
            game_id=self.game_id,
            from_state=previous.value,
            to_state=target.value,
            trigger=trigger,
            context=context
        )
        self.state = target
        self._publish(
            GameEventKind.PHASE_CHANGED,
            data={"from_state": previous.value, "trigger": trigger}
        )

    def _on_highlight(self, highlight: HighlightEvent) -> None:
        kind = GameEventKind.HIGHLIGHT_STARTED if highlight.active else GameEventKind.HIGHLIGHT_ENDED
        self._publish(
            kind,
            signal=highlight.signal,
            data={
                "run_id": highlight.run_id,
                "position": highlight.position,
                "echo": highlight.run_id == self._echo_run,
            }
        )

    def _publish(
        self,
        kind: GameEventKind,
        signal: Optional[Signal] = None,
        result: Optional[RoundResult] = None,
        data: Optional[dict[str, Any]] = None
    ) -> None:
        event = GameEvent(
            kind=kind,
            game_id=self.game_id,
            level=self.level,
            state=self.state,
            signal=signal,
            result=result,
            data=data or {}
        )
        for subscriber in list(self._subscribers):
            try:
                subscriber(event)
            except Exception as e:
                self.logger.error(
                    "Game event subscriber failed",
                    game_id=self.game_id,
                    event_kind=kind.value,
                    error=str(e),
                    exc_info=True
                )

    @staticmethod
    def _new_game_id() -> str:
        return uuid.uuid4().hex[:12]

"""
State machine data models for the memory sequence game.

This module defines the round phases, the inbound events the engine
dispatches on, and the immutable records it hands to the outside world.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

Signal = int


class RoundState(str, Enum):
    """Phases of a single game instance."""
    IDLE = "idle"
    GENERATING = "generating"
    PRESENTING = "presenting"
    AWAITING_INPUT = "awaiting_input"
    VALIDATING = "validating"
    ROUND_WON = "round_won"
    ROUND_LOST = "round_lost"

    @property
    def is_terminal(self) -> bool:
        return self in (RoundState.ROUND_WON, RoundState.ROUND_LOST)


class RoundOutcome(str, Enum):
    """How a game instance ended."""
    WON = "won"
    LOST = "lost"


class InputVerdict(str, Enum):
    """Result of checking the newest input against the sequence."""
    IGNORED = "ignored"          # No sequence to compare against
    MISMATCH = "mismatch"
    PARTIAL = "partial"          # Correct so far, more input expected
    COMPLETE = "complete"        # Whole sequence repeated correctly


# Inbound events

@dataclass(frozen=True)
class StartRequested:
    """Player asked for a new game."""


@dataclass(frozen=True)
class ResetRequested:
    """Abandon the current game and return to idle."""


@dataclass(frozen=True)
class InputReceived:
    """Player selected a signal."""
    signal: Signal


@dataclass(frozen=True)
class PlaybackCompleted:
    """Scheduler finished presenting a run."""
    run_id: int


@dataclass(frozen=True)
class AdvanceDue:
    """Delay before generating the next signal has elapsed."""
    game_id: str


# Outbound records

class GameEventKind(str, Enum):
    """Notifications published to engine subscribers."""
    PHASE_CHANGED = "phase_changed"
    HIGHLIGHT_STARTED = "highlight_started"
    HIGHLIGHT_ENDED = "highlight_ended"
    HIGH_SCORE_UPDATED = "high_score_updated"
    ROUND_COMPLETED = "round_completed"
    GAME_WON = "game_won"
    GAME_LOST = "game_lost"


@dataclass(frozen=True)
class RoundResult:
    """Final result of a game instance."""
    outcome: RoundOutcome
    level: int
    high_score: int
    new_high_score: bool = False


@dataclass(frozen=True)
class GameEvent:
    """Notification emitted by the engine."""
    kind: GameEventKind
    game_id: str
    level: int
    state: RoundState
    signal: Optional[Signal] = None
    result: Optional[RoundResult] = None
    data: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class GameSnapshot:
    """Read-only view of the engine for presentation layers."""
    game_id: str
    state: RoundState
    sequence: tuple[Signal, ...]
    user_input: tuple[Signal, ...]
    high_score: int
    result: Optional[RoundResult] = None

    @property
    def level(self) -> int:
        return len(self.sequence)

    @property
    def progress(self) -> int:
        """1-based position of the next expected input."""
        return len(self.user_input) + 1

    @property
    def accepts_input(self) -> bool:
        return self.state == RoundState.AWAITING_INPUT

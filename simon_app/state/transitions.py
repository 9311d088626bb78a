"""
Transition tables for the game state machine.

ALLOWED_TRANSITIONS lists every legal phase change. DISPATCH_TABLE says
which engine handler runs for an inbound event in a given phase; an event
with no entry for the current phase is dropped.
"""

from typing import Optional

from ..errors import StateTransitionError
from .models import (
    AdvanceDue,
    InputReceived,
    PlaybackCompleted,
    ResetRequested,
    RoundState,
    StartRequested,
)

ALLOWED_TRANSITIONS: dict[RoundState, frozenset[RoundState]] = {
    RoundState.IDLE: frozenset({RoundState.GENERATING}),
    RoundState.GENERATING: frozenset({RoundState.PRESENTING, RoundState.IDLE}),
    RoundState.PRESENTING: frozenset({RoundState.AWAITING_INPUT, RoundState.IDLE}),
    RoundState.AWAITING_INPUT: frozenset({RoundState.VALIDATING, RoundState.IDLE}),
    RoundState.VALIDATING: frozenset({
        RoundState.AWAITING_INPUT,
        RoundState.GENERATING,
        RoundState.ROUND_WON,
        RoundState.ROUND_LOST,
        RoundState.IDLE,
    }),
    RoundState.ROUND_WON: frozenset({RoundState.IDLE}),
    RoundState.ROUND_LOST: frozenset({RoundState.IDLE}),
}

_EVERY_STATE = tuple(RoundState)

DISPATCH_TABLE: dict[tuple[RoundState, type], str] = {
    **{(state, StartRequested): "_on_start" for state in _EVERY_STATE},
    **{(state, ResetRequested): "_on_reset" for state in _EVERY_STATE},
    (RoundState.GENERATING, AdvanceDue): "_on_advance_due",
    (RoundState.PRESENTING, PlaybackCompleted): "_on_presentation_complete",
    (RoundState.AWAITING_INPUT, InputReceived): "_on_input",
    (RoundState.VALIDATING, PlaybackCompleted): "_on_echo_complete",
}


def validate_transition(current: RoundState, target: RoundState) -> None:
    """
    Ensure a phase change is legal.

    Raises:
        StateTransitionError: If target is not reachable from current
    """
    if target not in ALLOWED_TRANSITIONS[current]:
        raise StateTransitionError(
            f"Invalid state transition from {current.value} to {target.value}",
            current_state=current.value,
            attempted_transition=target.value
        )


def handler_for(state: RoundState, event: object) -> Optional[str]:
    """Name of the engine handler for event in state, or None to drop it."""
    return DISPATCH_TABLE.get((state, type(event)))

"""
Core round validation logic.

Pure functions that decide what a player's input means for the round.
They never mutate state; the engine applies their verdicts.
"""

from typing import Sequence

from .models import InputVerdict, RoundState, Signal


def check_input(sequence: Sequence[Signal], user_input: Sequence[Signal]) -> InputVerdict:
    """
    Compare the newest input against the sequence entry at the same position.

    Earlier entries were already accepted when they arrived, so only the last
    one is checked.

    Args:
        sequence: Current challenge sequence
        user_input: Player input collected this round, newest last

    Returns:
        Verdict for the newest input
    """
    if not sequence or not user_input:
        return InputVerdict.IGNORED

    index = len(user_input) - 1
    if index >= len(sequence):
        return InputVerdict.MISMATCH

    if user_input[index] != sequence[index]:
        return InputVerdict.MISMATCH

    if len(user_input) == len(sequence):
        return InputVerdict.COMPLETE

    return InputVerdict.PARTIAL


def resolve_verdict(verdict: InputVerdict, level: int, win_level: int) -> RoundState:
    """Map an input verdict to the phase the round moves to."""
    if verdict == InputVerdict.MISMATCH:
        return RoundState.ROUND_LOST
    if verdict == InputVerdict.COMPLETE:
        if level >= win_level:
            return RoundState.ROUND_WON
        return RoundState.GENERATING
    return RoundState.AWAITING_INPUT


def improves_high_score(level: int, high_score: int) -> bool:
    """Check if reaching level beats the stored best."""
    return level > high_score

"""Tests for state machine data models."""

import pytest

from simon_app.state.models import (
    GameSnapshot, RoundOutcome, RoundResult, RoundState
)


class TestRoundState:
    """Test RoundState enum."""

    def test_values(self):
        assert RoundState.AWAITING_INPUT.value == "awaiting_input"
        assert RoundState("round_lost") == RoundState.ROUND_LOST

    def test_terminal(self):
        terminal = {state for state in RoundState if state.is_terminal}
        assert terminal == {RoundState.ROUND_WON, RoundState.ROUND_LOST}


class TestGameSnapshot:
    """Test GameSnapshot derived values."""

    def test_level_and_progress(self):
        snapshot = GameSnapshot(
            game_id="g1",
            state=RoundState.AWAITING_INPUT,
            sequence=(0, 1, 2),
            user_input=(0,),
            high_score=4
        )

        assert snapshot.level == 3
        assert snapshot.progress == 2
        assert snapshot.accepts_input is True

    def test_immutable(self):
        snapshot = GameSnapshot("g1", RoundState.IDLE, (), (), 0)

        with pytest.raises(Exception):
            snapshot.high_score = 10


class TestRoundResult:
    """Test RoundResult."""

    def test_defaults(self):
        result = RoundResult(outcome=RoundOutcome.LOST, level=2, high_score=3)

        assert result.new_high_score is False
        assert result.outcome.value == "lost"

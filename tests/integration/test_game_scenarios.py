"""End-to-end game scenarios on a manual clock."""

import io

import pytest

from simon_app.persistence.score_store import MemoryScoreStore, SqliteScoreStore
from simon_app.playback.stdout_player import StdoutSignalPlayer
from simon_app.state.models import GameEventKind, RoundOutcome, RoundState


class TestGameScenarios:
    """Whole games driven through the public engine API."""

    def test_scripted_game_is_won_at_level_five(self, make_engine, clock, repeat_sequence):
        engine = make_engine(random_values=[0, 1, 2, 3, 0])
        engine.start()
        clock.run_until_idle()

        rounds = 0
        while engine.state == RoundState.AWAITING_INPUT:
            repeat_sequence(engine)
            rounds += 1

        assert rounds == 5
        assert engine.state == RoundState.ROUND_WON
        assert engine.sequence == [0, 1, 2, 3, 0]
        assert engine.level == 5
        assert engine.result.outcome == RoundOutcome.WON

    def test_wrong_second_input_loses_at_level_two(self, make_engine, clock, repeat_sequence):
        engine = make_engine(random_values=[0, 1])
        engine.start()
        clock.run_until_idle()
        repeat_sequence(engine)
        assert engine.sequence == [0, 1]

        engine.press(0)
        assert engine.state == RoundState.AWAITING_INPUT
        engine.press(2)

        assert engine.state == RoundState.ROUND_LOST
        assert engine.user_input == [0, 2]
        assert engine.result.level == 2

    def test_loss_below_high_score_is_not_persisted(self, make_engine, clock, repeat_sequence):
        store = MemoryScoreStore(initial=3)
        engine = make_engine(random_values=[0, 1], store=store)
        engine.start()
        clock.run_until_idle()
        repeat_sequence(engine)

        engine.press(3)

        assert engine.state == RoundState.ROUND_LOST
        assert engine.result.level == 2
        assert engine.high_score == 3
        assert engine.result.new_high_score is False
        assert store.writes == []

    def test_passing_level_two_persists_once(self, make_engine, clock, repeat_sequence):
        store = MemoryScoreStore(initial=1)
        engine = make_engine(random_values=[0, 1, 2], store=store)
        engine.start()
        clock.run_until_idle()

        repeat_sequence(engine)
        assert store.writes == []

        repeat_sequence(engine)

        assert engine.level == 3
        assert engine.high_score == 2
        assert store.writes == [2]

    def test_high_score_survives_restart(self, tmp_path, make_engine, clock, repeat_sequence):
        db_path = str(tmp_path / "scores.db")
        engine = make_engine(random_values=[1, 2], store=SqliteScoreStore(db_path))
        engine.start()
        clock.run_until_idle()
        repeat_sequence(engine)
        engine.press(0)
        assert engine.high_score == 2

        reopened = make_engine(store=SqliteScoreStore(db_path))

        assert reopened.high_score == 2


class TestConsolePlayback:
    """A game presented through the console player."""

    def test_labels_printed_in_order(self, make_engine, clock, repeat_sequence):
        stream = io.StringIO()
        player = StdoutSignalPlayer(
            clock, durations=1.0,
            signal_names=("Tero", "Hornero", "Benteveo", "Cardenal"),
            stream=stream
        )
        engine = make_engine(random_values=[3, 1], player=player)
        engine.start()
        clock.run_until_idle()
        repeat_sequence(engine)

        lines = stream.getvalue().splitlines()

        assert len(lines) == 3
        assert "Cardenal" in lines[0]
        assert "Cardenal" in lines[1]
        assert "Hornero" in lines[2]

    @pytest.mark.parametrize("level", [1, 2, 3])
    def test_one_highlight_pair_per_signal(self, make_engine, clock, repeat_sequence, level):
        engine = make_engine(random_values=[0, 1, 2])
        highlights = []
        engine.subscribe(lambda event: highlights.append(event.kind)
                         if event.kind == GameEventKind.HIGHLIGHT_STARTED else None)
        engine.start()
        clock.run_until_idle()
        for _ in range(level - 1):
            repeat_sequence(engine)

        assert engine.level == level
        assert len(highlights) == sum(range(1, level + 1))

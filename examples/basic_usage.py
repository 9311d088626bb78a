#!/usr/bin/env python3
"""
Basic Usage Example - Simon Bird-Call Memory Game

This script plays two simulated games against the sequence engine. It shows
how to:
- Build an engine from configuration with a console signal player
- Drive time with a ManualClock
- Feed player selections and follow game events
- Read the high score back from storage

Run: python examples/basic_usage.py
"""

import tempfile
from pathlib import Path
from typing import Optional

from simon_app.config.loader import ConfigLoader
from simon_app.engine import SequenceEngine
from simon_app.logging.config import configure_logging
from simon_app.persistence.score_store import SqliteScoreStore
from simon_app.playback.stdout_player import StdoutSignalPlayer
from simon_app.sequence.random_source import SeededRandomSource
from simon_app.state.models import GameEvent, GameEventKind, RoundState
from simon_app.utils.timers import ManualClock


def print_event(event: GameEvent) -> None:
    """Print the game events a UI would react to."""
    if event.kind == GameEventKind.ROUND_COMPLETED:
        print(f"   ✅ Level {event.level} repeated correctly")
    elif event.kind == GameEventKind.HIGH_SCORE_UPDATED:
        print(f"   🏆 New high score: {event.data['high_score']}")
    elif event.kind == GameEventKind.GAME_WON:
        print(f"   🎉 Game won at level {event.result.level}")
    elif event.kind == GameEventKind.GAME_LOST:
        print(f"   ❌ Game lost at level {event.result.level}")


def play_game(engine: SequenceEngine, clock: ManualClock, mistake_at_level: Optional[int] = None) -> None:
    """Repeat every sequence back, optionally slipping up at one level."""
    engine.start()
    clock.run_until_idle()

    while engine.state == RoundState.AWAITING_INPUT:
        names = [engine.config.game.signal_names[s] for s in engine.sequence]
        print(f"   Level {engine.level}: repeating {' → '.join(names)}")

        for position, signal in enumerate(list(engine.sequence)):
            if engine.level == mistake_at_level and position == engine.level - 1:
                signal = (signal + 1) % engine.config.game.alphabet_size
            engine.press(signal)
            clock.run_until_idle()
            if engine.state != RoundState.AWAITING_INPUT:
                break


def main():
    """Main demonstration function."""
    print("🐦 Simon Bird-Call Memory Game - Basic Usage Demo")
    print("=" * 60)

    config = ConfigLoader.create().load()
    configure_logging(level=config.logging.level, format_json=config.logging.format_json)
    clock = ManualClock()
    db_path = Path(tempfile.mkdtemp()) / "simon_scores.db"

    print("1. Initializing the sequence engine...")
    engine = SequenceEngine(
        config=config,
        player=StdoutSignalPlayer(clock, durations=1.2, signal_names=config.game.signal_names),
        clock=clock,
        random_source=SeededRandomSource(2024),
        persistence=SqliteScoreStore(str(db_path), config.storage.score_key)
    )
    engine.subscribe(print_event)
    print(f"   Signals: {', '.join(config.game.signal_names)}")
    print(f"   Win level: {config.game.win_level}, high score: {engine.high_score}")
    print()

    print("2. Playing a game with a slip at level 3...")
    play_game(engine, clock, mistake_at_level=3)
    print()

    print("3. Playing a perfect game...")
    play_game(engine, clock)
    print()

    stats = engine.get_stats()
    print("4. Final engine stats:")
    print(f"   Games started: {stats['games_started']}")
    print(f"   Playback runs completed: {stats['playback']['completed']}")
    print(f"   Stored high score: {SqliteScoreStore(str(db_path)).get()}")
    print(f"   Simulated time: {clock.now():.1f}s")
    print()

    print("✅ Demo completed successfully!")


if __name__ == "__main__":
    main()

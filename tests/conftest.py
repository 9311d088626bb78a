"""Pytest configuration and shared fixtures."""

from dataclasses import replace
from typing import Callable, Iterable, Optional

import pytest

from simon_app.config.defaults import GameConfig, get_default_config
from simon_app.engine import SequenceEngine
from simon_app.persistence.score_store import MemoryScoreStore, ScorePersistence
from simon_app.playback.timed_player import TimedSignalPlayer
from simon_app.sequence.random_source import ScriptedRandomSource, SeededRandomSource
from simon_app.utils.timers import ManualClock


@pytest.fixture
def clock() -> ManualClock:
    """Deterministic clock starting at zero."""
    return ManualClock()


@pytest.fixture
def default_config() -> GameConfig:
    """Built-in default configuration."""
    return get_default_config()


@pytest.fixture
def make_config() -> Callable[..., GameConfig]:
    """Build a configuration with per-section field overrides."""
    def _make(**sections) -> GameConfig:
        config = get_default_config()
        for section, overrides in sections.items():
            config = replace(config, **{section: replace(getattr(config, section), **overrides)})
        return config
    return _make


@pytest.fixture
def score_store() -> MemoryScoreStore:
    """Empty in-memory high score store."""
    return MemoryScoreStore()


@pytest.fixture
def make_engine(clock, default_config) -> Callable[..., SequenceEngine]:
    """Build an engine on the shared manual clock."""
    def _make(
        random_values: Optional[Iterable[int]] = None,
        config: Optional[GameConfig] = None,
        store: Optional[ScorePersistence] = None,
        player=None,
        seed: int = 7
    ) -> SequenceEngine:
        config = config or default_config
        random_source = (
            ScriptedRandomSource(random_values) if random_values is not None
            else SeededRandomSource(seed)
        )
        return SequenceEngine(
            config=config,
            player=player or TimedSignalPlayer(clock, durations=1.0,
                                               signal_names=config.game.signal_names),
            clock=clock,
            random_source=random_source,
            persistence=store if store is not None else MemoryScoreStore()
        )
    return _make


@pytest.fixture
def repeat_sequence(clock) -> Callable[[SequenceEngine], None]:
    """Enter the current sequence correctly and let the clock settle."""
    def _repeat(engine: SequenceEngine) -> None:
        for signal in list(engine.sequence):
            engine.press(signal)
            clock.run_until_idle()
    return _repeat

"""Default configuration parameters for the memory sequence game."""

from dataclasses import dataclass


DEFAULT_SIGNAL_NAMES = ("Tero", "Hornero", "Benteveo", "Cardenal")


@dataclass(frozen=True)
class GameParams:
    """Round pacing and win condition."""
    alphabet_size: int = 4                           # Number of selectable signals
    signal_names: tuple = DEFAULT_SIGNAL_NAMES       # Display labels, one per signal
    win_level: int = 5                               # Completing this level wins the game
    start_delay: float = 0.8                         # Seconds from start to first generation
    advance_delay: float = 1.0                       # Seconds between a completed round and the next
    echo_input: bool = False                         # Present each selection before validating it


@dataclass(frozen=True)
class GenerationParams:
    """Sequence generation policy."""
    no_repeat_window: int = 1                        # New signal differs from this many predecessors
    coverage_preference: bool = True                 # Prefer signals not yet in the sequence
    coverage_level: int = 0                          # Level by which all signals should appear (0 = win_level)
    max_attempts: int = 16                           # Resampling budget before fallback


@dataclass(frozen=True)
class PlaybackParams:
    """Sequence presentation timing, in seconds."""
    lead_in: float = 0.5                             # Pause before the first signal
    max_signal_duration: float = 1.5                 # Cap on a single signal's presentation
    inter_signal_pause: float = 0.3                  # Pause between consecutive signals
    grace_pause: float = 0.5                         # Pause after the last signal before input opens


@dataclass(frozen=True)
class StorageParams:
    """High score persistence."""
    db_path: str = "simon_scores.db"
    score_key: str = "simonBirdHighScore"


@dataclass(frozen=True)
class LoggingParams:
    """Structured logging output."""
    level: str = "INFO"
    format_json: bool = False


@dataclass(frozen=True)
class GameConfig:
    """Complete default configuration."""
    game: GameParams
    generation: GenerationParams
    playback: PlaybackParams
    storage: StorageParams
    logging: LoggingParams


def get_default_config() -> GameConfig:
    """Get the default configuration instance."""
    return GameConfig(
        game=GameParams(),
        generation=GenerationParams(),
        playback=PlaybackParams(),
        storage=StorageParams(),
        logging=LoggingParams(),
    )

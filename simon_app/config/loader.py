"""Configuration loader with 3-tier parameter precedence."""

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

import yaml

from ..errors import MalformedConfigError
from .defaults import (
    GameConfig,
    GameParams,
    GenerationParams,
    LoggingParams,
    PlaybackParams,
    StorageParams,
    get_default_config,
)
from .validation import ConfigValidator

CONFIG_FILENAME = "game.yaml"


@dataclass(frozen=True)
class ConfigLoader:
    """Manages configuration loading with 3-tier precedence."""

    config_dir: Path
    defaults: GameConfig

    @classmethod
    def create(cls, config_dir: Optional[Path] = None) -> "ConfigLoader":
        """Create a ConfigLoader instance."""
        if config_dir is None:
            config_dir = Path(__file__).parent.parent.parent / "config"

        return cls(
            config_dir=Path(config_dir),
            defaults=get_default_config(),
        )

    def load_file_config(self) -> dict[str, Any]:
        """Load overrides from the game configuration file, if present."""
        config_file = self.config_dir / CONFIG_FILENAME

        if not config_file.exists():
            return {}

        with open(config_file) as f:
            file_config = yaml.safe_load(f)

        if file_config is None:
            return {}
        if not isinstance(file_config, dict):
            raise MalformedConfigError(
                f"{config_file} must contain a mapping",
                context={"path": str(config_file)}
            )
        return file_config

    def merge_config(self, overrides: Optional[dict[str, Any]] = None) -> dict[str, Any]:
        """
        Merge configuration with 3-tier precedence.

        Priority order:
        1. Explicit overrides (highest priority)
        2. Game configuration file
        3. Built-in defaults (lowest priority)
        """
        config = self._dataclass_to_dict(self.defaults)
        config = self._deep_merge(config, self.load_file_config())

        if overrides:
            config = self._deep_merge(config, overrides)

        return config

    def load(self, overrides: Optional[dict[str, Any]] = None) -> GameConfig:
        """Merge, validate and build a typed configuration."""
        config = self.merge_config(overrides)

        errors = ConfigValidator.validate_config(config)
        if errors:
            raise MalformedConfigError(
                "Invalid game configuration: " + "; ".join(
                    f"{err.field}: {err.message} (got: {err.value!r})" for err in errors
                ),
                errors=errors
            )

        return build_game_config(config)

    def _dataclass_to_dict(self, obj: Any) -> dict[str, Any]:
        """Convert nested dataclasses to dictionary."""
        if hasattr(obj, '__dataclass_fields__'):
            result = {}
            for field_name in obj.__dataclass_fields__:
                value = getattr(obj, field_name)
                if hasattr(value, '__dataclass_fields__'):
                    result[field_name] = self._dataclass_to_dict(value)
                else:
                    result[field_name] = value
            return result
        return obj  # type: ignore[no-any-return]

    def _deep_merge(self, base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
        """Deep merge two dictionaries."""
        result = base.copy()

        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._deep_merge(result[key], value)
            else:
                result[key] = value

        return result


def build_game_config(config: dict[str, Any]) -> GameConfig:
    """Build a GameConfig from a merged, validated configuration dictionary."""
    game = dict(config.get("game", {}))
    if "signal_names" in game:
        game["signal_names"] = tuple(game["signal_names"])

    return GameConfig(
        game=GameParams(**game),
        generation=GenerationParams(**config.get("generation", {})),
        playback=PlaybackParams(**config.get("playback", {})),
        storage=StorageParams(**config.get("storage", {})),
        logging=LoggingParams(**config.get("logging", {})),
    )

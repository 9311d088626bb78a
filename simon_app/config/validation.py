"""Configuration validation utilities."""

from dataclasses import dataclass, fields
from typing import Any

from .defaults import GameParams, GenerationParams, LoggingParams, PlaybackParams, StorageParams

_SECTIONS = {
    "game": GameParams,
    "generation": GenerationParams,
    "playback": PlaybackParams,
    "storage": StorageParams,
    "logging": LoggingParams,
}

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True)
class ValidationError:
    """Represents a configuration validation error."""
    field: str
    message: str
    value: Any


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


class ConfigValidator:
    """Validates configuration parameters."""

    @staticmethod
    def validate_game_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate round pacing and win condition parameters."""
        errors = []

        if "alphabet_size" in params:
            value = params["alphabet_size"]
            if not _is_int(value) or value < 2:
                errors.append(ValidationError(
                    field="alphabet_size",
                    message="Must be an integer of at least 2",
                    value=value
                ))

        if "signal_names" in params:
            value = params["signal_names"]
            if not isinstance(value, (list, tuple)) or not all(isinstance(n, str) and n for n in value):
                errors.append(ValidationError(
                    field="signal_names",
                    message="Must be a list of non-empty strings",
                    value=value
                ))
            elif _is_int(params.get("alphabet_size")) and len(value) != params["alphabet_size"]:
                errors.append(ValidationError(
                    field="signal_names",
                    message="Must name every signal in the alphabet",
                    value=value
                ))

        if "win_level" in params:
            value = params["win_level"]
            if not _is_int(value) or value < 1:
                errors.append(ValidationError(
                    field="win_level",
                    message="Must be a positive integer",
                    value=value
                ))

        for name in ("start_delay", "advance_delay"):
            if name in params:
                value = params[name]
                if not _is_number(value) or value < 0:
                    errors.append(ValidationError(
                        field=name,
                        message="Must be a non-negative number of seconds",
                        value=value
                    ))

        if "echo_input" in params:
            value = params["echo_input"]
            if not isinstance(value, bool):
                errors.append(ValidationError(
                    field="echo_input",
                    message="Must be a boolean",
                    value=value
                ))

        return errors

    @staticmethod
    def validate_generation_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate sequence generation policy parameters."""
        errors = []

        if "no_repeat_window" in params:
            value = params["no_repeat_window"]
            if not _is_int(value) or value < 0:
                errors.append(ValidationError(
                    field="no_repeat_window",
                    message="Must be a non-negative integer",
                    value=value
                ))

        if "coverage_preference" in params:
            value = params["coverage_preference"]
            if not isinstance(value, bool):
                errors.append(ValidationError(
                    field="coverage_preference",
                    message="Must be a boolean",
                    value=value
                ))

        if "coverage_level" in params:
            value = params["coverage_level"]
            if not _is_int(value) or value < 0:
                errors.append(ValidationError(
                    field="coverage_level",
                    message="Must be a non-negative integer",
                    value=value
                ))

        if "max_attempts" in params:
            value = params["max_attempts"]
            if not _is_int(value) or value < 1:
                errors.append(ValidationError(
                    field="max_attempts",
                    message="Must be a positive integer",
                    value=value
                ))

        return errors

    @staticmethod
    def validate_playback_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate playback timing parameters."""
        errors = []

        if "max_signal_duration" in params:
            value = params["max_signal_duration"]
            if not _is_number(value) or value <= 0:
                errors.append(ValidationError(
                    field="max_signal_duration",
                    message="Must be a positive number of seconds",
                    value=value
                ))

        for name in ("lead_in", "inter_signal_pause", "grace_pause"):
            if name in params:
                value = params[name]
                if not _is_number(value) or value < 0:
                    errors.append(ValidationError(
                        field=name,
                        message="Must be a non-negative number of seconds",
                        value=value
                    ))

        return errors

    @staticmethod
    def validate_storage_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate high score storage parameters."""
        errors = []

        for name in ("db_path", "score_key"):
            if name in params:
                value = params[name]
                if not isinstance(value, str) or not value:
                    errors.append(ValidationError(
                        field=name,
                        message="Must be a non-empty string",
                        value=value
                    ))

        return errors

    @staticmethod
    def validate_logging_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate logging parameters."""
        errors = []

        if "level" in params:
            value = params["level"]
            if not isinstance(value, str) or value.upper() not in _LOG_LEVELS:
                errors.append(ValidationError(
                    field="level",
                    message=f"Must be one of {', '.join(_LOG_LEVELS)}",
                    value=value
                ))

        if "format_json" in params:
            value = params["format_json"]
            if not isinstance(value, bool):
                errors.append(ValidationError(
                    field="format_json",
                    message="Must be a boolean",
                    value=value
                ))

        return errors

    @staticmethod
    def validate_unknown_fields(config: dict[str, Any]) -> list[ValidationError]:
        """Reject sections and fields the configuration does not define."""
        errors = []

        for section, params in config.items():
            if section not in _SECTIONS:
                errors.append(ValidationError(
                    field=section,
                    message="Unknown configuration section",
                    value=params
                ))
                continue
            if not isinstance(params, dict):
                errors.append(ValidationError(
                    field=section,
                    message="Must be a mapping",
                    value=params
                ))
                continue
            known = {f.name for f in fields(_SECTIONS[section])}
            for name in params:
                if name not in known:
                    errors.append(ValidationError(
                        field=f"{section}.{name}",
                        message="Unknown configuration field",
                        value=params[name]
                    ))

        return errors

    @staticmethod
    def validate_config(config: dict[str, Any]) -> list[ValidationError]:
        """Validate complete configuration."""
        errors = ConfigValidator.validate_unknown_fields(config)
        if errors:
            return errors

        game = config.get("game", {})
        generation = config.get("generation", {})

        errors.extend(ConfigValidator.validate_game_params(game))
        errors.extend(ConfigValidator.validate_generation_params(generation))
        errors.extend(ConfigValidator.validate_playback_params(config.get("playback", {})))
        errors.extend(ConfigValidator.validate_storage_params(config.get("storage", {})))
        errors.extend(ConfigValidator.validate_logging_params(config.get("logging", {})))

        # The no-repeat window must leave at least one legal candidate
        alphabet_size = game.get("alphabet_size")
        window = generation.get("no_repeat_window")
        if _is_int(alphabet_size) and _is_int(window) and window >= alphabet_size:
            errors.append(ValidationError(
                field="no_repeat_window",
                message="Must be smaller than alphabet_size",
                value=window
            ))

        return errors

"""Tests for logging integration in state machine and playback components."""

import logging
from unittest.mock import Mock, patch

import structlog

from simon_app.config.defaults import GenerationParams, PlaybackParams
from simon_app.config.loader import ConfigLoader
from simon_app.logging.config import (
    configure_logging, get_playback_logger, get_state_logger, log_state_transition
)
from simon_app.playback.scheduler import PlaybackScheduler
from simon_app.playback.timed_player import TimedSignalPlayer
from simon_app.sequence.generator import SequenceGenerator
from simon_app.sequence.random_source import ScriptedRandomSource
from simon_app.state.models import RoundState
from simon_app.utils.timers import ManualClock


class TestLoggingIntegration:
    """Test logging for state transitions, playback faults and fallbacks."""

    def setup_method(self):
        """Set up a mock logger that records every call."""
        self.log_messages = []
        self.mock_logger = Mock()

        def capture(level):
            def _capture(message, **kwargs):
                self.log_messages.append({
                    'message': message,
                    'level': level,
                    'kwargs': kwargs
                })
            return _capture

        self.mock_logger.info = capture('info')
        self.mock_logger.warning = capture('warning')
        self.mock_logger.debug = capture('debug')
        self.mock_logger.error = capture('error')

    def teardown_method(self):
        structlog.reset_defaults()

    def test_state_transition_record(self):
        """Transition records carry the game and both states."""
        logger = Mock()
        bound = logger.bind.return_value
        with_context = bound.bind.return_value

        log_state_transition(
            logger,
            game_id="g1",
            from_state="awaiting_input",
            to_state="validating",
            trigger="input",
            context={"signal": 2}
        )

        logger.bind.assert_called_once_with(
            game_id="g1",
            from_state="awaiting_input",
            to_state="validating",
            trigger="input"
        )
        bound.bind.assert_called_once_with(context={"signal": 2})
        with_context.info.assert_called_once_with("State transition")

    def test_state_transition_without_context(self):
        logger = Mock()

        log_state_transition(logger, "g1", "idle", "generating", "start")

        logger.bind.return_value.bind.assert_not_called()
        logger.bind.return_value.info.assert_called_once_with("State transition")

    def test_playback_fault_logged_as_warning(self):
        clock = ManualClock()
        player = TimedSignalPlayer(clock, durations={})
        scheduler = PlaybackScheduler(player, clock, PlaybackParams())
        scheduler.logger = self.mock_logger

        scheduler.play([1], lambda run_id: None)
        clock.run_until_idle()

        warnings = [m for m in self.log_messages if m['level'] == 'warning']
        assert len(warnings) == 1
        assert warnings[0]['message'] == "Signal presentation failed, skipping ahead"
        assert warnings[0]['kwargs']['signal'] == 1
        messages = [m['message'] for m in self.log_messages]
        assert messages[0] == "Playback run started"
        assert messages[-1] == "Playback run completed"

    def test_unknown_signal_logged(self, make_engine, clock):
        engine = make_engine(random_values=[0])
        engine.start()
        clock.run_until_idle()
        engine.logger = self.mock_logger

        engine.press(9)

        assert engine.state == RoundState.AWAITING_INPUT
        assert self.log_messages[-1]['level'] == 'warning'
        assert self.log_messages[-1]['kwargs']['signal'] == 9
        assert self.log_messages[-1]['kwargs']['alphabet_size'] == 4

    def test_generation_fallback_logged(self):
        generator = SequenceGenerator(
            ScriptedRandomSource([0]),
            alphabet_size=4,
            params=GenerationParams(coverage_preference=False, max_attempts=2),
            win_level=5
        )

        with patch("simon_app.sequence.generator.logger") as logger_mock:
            result = generator.generate([0])

        assert result.signal == 1
        assert result.fallback is True
        logger_mock.warning.assert_called_once()
        assert logger_mock.warning.call_args.kwargs["chosen"] == 1

    def test_subsystem_loggers_bind_context(self):
        """Subsystem loggers tag their records."""
        configure_logging(level="DEBUG", format_json=True)

        state_logger = get_state_logger("test").bind()
        playback_logger = get_playback_logger("test").bind()

        assert state_logger._context["subsystem"] == "state_machine"
        assert state_logger._context["audit_trail"] is True
        assert playback_logger._context["subsystem"] == "playback"


class TestLoggingConfiguration:
    """Test that the logging config section controls log output."""

    def setup_method(self):
        self.root_level = logging.getLogger().level

    def teardown_method(self):
        logging.getLogger().setLevel(self.root_level)
        structlog.reset_defaults()

    def test_configured_level_applies(self, tmp_path):
        config = ConfigLoader.create(tmp_path).load({"logging": {"level": "ERROR"}})

        configure_logging(level=config.logging.level, format_json=config.logging.format_json)

        assert logging.getLogger().level == logging.ERROR
        assert logging.getLogger("simon_app.engine").isEnabledFor(logging.INFO) is False
        assert logging.getLogger("simon_app.engine").isEnabledFor(logging.ERROR) is True

    def test_module_loggers_pick_up_later_configuration(self):
        """Loggers created at import time follow configure_logging."""
        from simon_app import engine

        configure_logging(level="WARNING", format_json=True)

        assert isinstance(engine.state_logger.bind(), structlog.stdlib.BoundLogger)
        assert isinstance(engine.logger.bind(), structlog.stdlib.BoundLogger)

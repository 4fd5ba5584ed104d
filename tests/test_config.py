"""
Tests for the configuration module.

Tests cover:
- Default values match the service contract
- Derived window size
- Validation in __post_init__
"""

import pytest

from config import Config


class TestConfigDefaults:
    """Tests for default configuration values."""

    def test_canvas_defaults(self):
        """The canvas is 800x600 by default."""
        config = Config()
        assert config.CANVAS_WIDTH == 800
        assert config.CANVAS_HEIGHT == 600

    def test_window_includes_panel(self):
        """Window width is canvas plus side panel."""
        config = Config(CANVAS_WIDTH=500, PANEL_WIDTH=200)
        assert config.SCREEN_WIDTH == 700
        assert config.SCREEN_HEIGHT == config.CANVAS_HEIGHT

    def test_poll_interval_is_one_second(self):
        """State is polled every 1000 ms."""
        assert Config().POLL_INTERVAL_MS == 1000

    def test_no_request_timeout_by_default(self):
        """Requests wait for the transport unless a timeout is configured."""
        assert Config().REQUEST_TIMEOUT is None

    def test_default_patterns_are_xor(self):
        """Default patterns use the service's wire keys."""
        patterns = Config().DEFAULT_PATTERNS
        assert len(patterns) == 4
        assert all(set(p) == {'features', 'multipleExpectation'} for p in patterns)

    def test_default_patterns_not_shared(self):
        """Each Config gets its own pattern list."""
        a, b = Config(), Config()
        a.DEFAULT_PATTERNS.append({'features': [1, 1], 'multipleExpectation': [1]})
        assert len(b.DEFAULT_PATTERNS) == 4

    def test_service_defaults(self):
        """Reference service serves a 2-4-1 network with lr 0.5."""
        config = Config()
        assert config.SERVICE_LAYER_SIZES == [2, 4, 1]
        assert config.SERVICE_LEARNING_RATE == 0.5


class TestConfigValidation:
    """Tests for __post_init__ validation."""

    @pytest.mark.parametrize("overrides", [
        {'CANVAS_WIDTH': 0},
        {'POLL_INTERVAL_MS': 0},
        {'REQUEST_TIMEOUT': 0},
        {'IO_WORKERS': 0},
        {'DEFAULT_EPOCHS': 0},
        {'LABEL_PRECISION': -1},
        {'MIN_CONNECTION_WIDTH': 5, 'MAX_CONNECTION_WIDTH': 2},
        {'LOG_LEVEL': 'LOUD'},
        {'SERVICE_LAYER_SIZES': [2]},
        {'SERVICE_LAYER_SIZES': [2, 0, 1]},
        {'SERVICE_LEARNING_RATE': 0.0},
    ])
    def test_invalid_values_rejected(self, overrides):
        """Invalid settings fail fast."""
        with pytest.raises(AssertionError):
            Config(**overrides)

    def test_positive_timeout_accepted(self):
        """A positive timeout is valid."""
        assert Config(REQUEST_TIMEOUT=2.5).REQUEST_TIMEOUT == 2.5

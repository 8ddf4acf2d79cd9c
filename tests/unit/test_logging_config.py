"""Tests for calstream.logging_config module."""

import logging
import os
from unittest.mock import patch

import pytest

from calstream.logging_config import CALSTREAM_MODULES, configure_logging, get_logging_status

pytestmark = pytest.mark.unit


@pytest.fixture(autouse=True)
def clean_env():
    with patch.dict(os.environ, {}, clear=False):
        os.environ.pop("CALSTREAM_DEBUG", None)
        os.environ.pop("CALSTREAM_LOG_LEVEL", None)
        yield


class TestConfigureLogging:
    """Tests for configure_logging function."""

    def test_default_production_mode(self):
        """Test default production mode configuration."""
        configure_logging()

        assert logging.getLogger().level == logging.INFO
        assert logging.getLogger("calstream").level == logging.INFO
        assert logging.getLogger("icalendar").level == logging.INFO

    def test_debug_mode(self):
        """Test debug mode configuration."""
        configure_logging(debug_mode=True)

        assert logging.getLogger().level == logging.DEBUG
        for module in CALSTREAM_MODULES:
            assert logging.getLogger(module).level == logging.DEBUG

        # Parser logs stay quiet even in debug mode
        assert logging.getLogger("icalendar").level == logging.INFO

    def test_force_debug_overrides_debug_mode(self):
        configure_logging(debug_mode=False, force_debug=True)

        assert logging.getLogger("calstream.recurrence").level == logging.DEBUG

    def test_force_debug_false_wins_over_env(self):
        with patch.dict(os.environ, {"CALSTREAM_DEBUG": "1"}):
            configure_logging(force_debug=False)

        assert logging.getLogger("calstream").level == logging.INFO

    @pytest.mark.parametrize("value", ["1", "true", "YES"])
    def test_debug_env_var(self, value):
        with patch.dict(os.environ, {"CALSTREAM_DEBUG": value}):
            configure_logging()

        assert logging.getLogger("calstream").level == logging.DEBUG

    def test_log_level_env_var(self):
        with patch.dict(os.environ, {"CALSTREAM_LOG_LEVEL": "warning"}):
            configure_logging(debug_mode=True)

        assert logging.getLogger().level == logging.WARNING
        assert logging.getLogger("calstream").level == logging.DEBUG

    @pytest.mark.parametrize(
        "level,expected", [("WARNING", logging.WARNING), ("error", logging.ERROR)]
    )
    def test_level_argument_sets_root_level(self, level, expected):
        configure_logging(level=level)

        assert logging.getLogger().level == expected
        assert logging.getLogger("calstream").level == logging.INFO

    def test_invalid_level_argument_ignored(self):
        configure_logging(debug_mode=True, level="LOUD")

        assert logging.getLogger().level == logging.DEBUG

    def test_env_var_wins_over_level_argument(self):
        with patch.dict(os.environ, {"CALSTREAM_LOG_LEVEL": "ERROR"}):
            configure_logging(level="WARNING")

        assert logging.getLogger().level == logging.ERROR

    def test_invalid_log_level_env_var_ignored(self):
        with patch.dict(os.environ, {"CALSTREAM_LOG_LEVEL": "LOUD"}):
            configure_logging()

        assert logging.getLogger().level == logging.INFO


def test_get_logging_status():
    configure_logging(debug_mode=True)

    status = get_logging_status()

    assert status == {"root": "DEBUG", "calstream": "DEBUG", "icalendar": "INFO"}

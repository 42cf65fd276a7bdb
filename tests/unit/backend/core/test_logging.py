"""
Unit Tests for Centralized Logging.

Tests the logging configuration, handler setup, and source handling.
"""

import logging
from unittest.mock import MagicMock, patch

import pytest

from burpnote.backend.core import logging as logging_module


TEST_CONFIG = {
    "level": "INFO",
    "format": "json",
    "handlers": {
        "console": {"enabled": True},
        "file": {
            "enabled": False,
            "path": "logs/system.jsonl",
            "max_bytes": 1024,
            "backup_count": 1,
        },
    },
}


@pytest.fixture(autouse=True)
def _restore_root_logger():
    """Keep handler changes from leaking into other tests."""
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    saved_config = logging_module._logging_config
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
    logging_module._logging_config = saved_config


class TestValidSources:
    """Tests for VALID_SOURCES constant."""

    def test_valid_sources_contains_expected_values(self):
        """Should contain all recognized log source values."""
        expected = frozenset({"cli", "tui", "plugin", "internal", "unknown"})
        assert logging_module.VALID_SOURCES == expected

    def test_valid_sources_is_frozenset(self):
        """Should be a frozenset (immutable)."""
        assert isinstance(logging_module.VALID_SOURCES, frozenset)


class TestLoggingConfigLoading:
    """Tests for logging configuration loading from YAML."""

    def test_load_logging_config_reads_yaml_file(self):
        """Should load configuration from logging.yaml once."""
        logging_module._logging_config = None

        with patch("burpnote.backend.core.logging.load_yaml_config", return_value=TEST_CONFIG) as mock_load:
            first = logging_module._load_logging_config()
            second = logging_module._load_logging_config()

        assert first["level"] == "INFO"
        assert first is second
        mock_load.assert_called_once_with("logging.yaml")

    def test_project_logging_yaml_is_valid(self):
        """Should find the shipped logging.yaml with a file handler."""
        logging_module._logging_config = None
        config = logging_module._load_logging_config()
        assert config["handlers"]["file"]["path"] == "logs/system.jsonl"


class TestSetupLogging:
    """Tests for setup_logging handler wiring."""

    def test_console_only(self):
        """Should install one stream handler when file logging is off."""
        logging_module._logging_config = TEST_CONFIG

        logging_module.setup_logging()

        root = logging.getLogger()
        assert root.level == logging.INFO
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0], logging.StreamHandler)

    def test_level_override(self):
        """Should prefer the level argument over the YAML value."""
        logging_module._logging_config = TEST_CONFIG

        logging_module.setup_logging(level="DEBUG")

        assert logging.getLogger().level == logging.DEBUG

    def test_console_disabled_for_tui(self):
        """Should install no console handler when the TUI owns the terminal."""
        logging_module._logging_config = TEST_CONFIG

        logging_module.setup_logging(enable_console=False)

        assert logging.getLogger().handlers == []

    def test_file_handler_writes_under_project_root(self, tmp_path):
        """Should create the log directory and a rotating file handler."""
        logging_module._logging_config = TEST_CONFIG

        with patch(
            "burpnote.backend.core.logging._log_file_path",
            return_value=tmp_path / "logs" / "system.jsonl",
        ):
            logging_module.setup_logging(enable_console=False, enable_file_logging=True)

        handlers = logging.getLogger().handlers
        assert len(handlers) == 1
        assert handlers[0].maxBytes == 1024
        assert (tmp_path / "logs").is_dir()
        handlers[0].close()

    def test_driver_loggers_are_quietened(self):
        """Should raise SQLAlchemy and driver loggers to WARNING."""
        logging_module._logging_config = TEST_CONFIG

        logging_module.setup_logging(level="DEBUG")

        assert logging.getLogger("sqlalchemy.engine").level == logging.WARNING
        assert logging.getLogger("aiomysql").level == logging.WARNING


class TestLogWithSource:
    """Tests for explicit source logging."""

    def test_passes_source_and_context(self):
        """Should call the level method with source and extra fields."""
        logger = MagicMock()

        logging_module.log_with_source(logger, "plugin", "INFO", "BurpNote extension loaded.", tab="BurpNote")

        logger.info.assert_called_once_with(
            "BurpNote extension loaded.", source="plugin", tab="BurpNote"
        )

    def test_invalid_level_raises(self):
        """Should raise AttributeError for an unknown level."""
        with pytest.raises(AttributeError):
            logging_module.log_with_source(object(), "cli", "loud", "x")

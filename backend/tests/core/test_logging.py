"""
Tests for logging configuration.
"""

import logging

import pytest

from eventstream.core.errors import ConfigurationError
from eventstream.core.logging import LogConfig, LogFormat, configure_logging, get_logger


class TestLogConfig:
    """Test suite for LogConfig."""

    def test_defaults(self):
        config = LogConfig()

        assert config.level == "INFO"
        assert config.format == LogFormat.JSON
        assert config.numeric_level == logging.INFO

    def test_level_is_normalized(self):
        config = LogConfig(level="debug")

        assert config.level == "DEBUG"
        assert config.numeric_level == logging.DEBUG

    def test_unknown_level_rejected(self):
        with pytest.raises(ConfigurationError):
            LogConfig(level="LOUD")

    def test_from_env(self):
        """Test level and format come from the environment."""
        config = LogConfig.from_env(
            {"EVENTSTREAM_LOG_LEVEL": "warning", "EVENTSTREAM_LOG_FORMAT": "console"}
        )

        assert config.level == "WARNING"
        assert config.format == LogFormat.CONSOLE

    def test_from_env_unknown_format(self):
        with pytest.raises(ConfigurationError):
            LogConfig.from_env({"EVENTSTREAM_LOG_FORMAT": "xml"})

    def test_to_dict(self):
        data = LogConfig(format=LogFormat.PLAIN).to_dict()

        assert data == {
            "level": "INFO",
            "format": "plain",
            "enable_timestamps": True,
            "enable_exception_info": True,
        }


class TestConfigureLogging:
    """Test suite for configure_logging."""

    def test_quiets_botocore(self):
        configure_logging(LogConfig(level="DEBUG", format=LogFormat.CONSOLE))

        assert logging.getLogger("botocore").level == logging.WARNING
        assert logging.getLogger("aiobotocore").level == logging.WARNING

        configure_logging(LogConfig())

    def test_get_logger_logs_keyword_context(self, caplog):
        """Test loggers render keyword context through stdlib logging."""
        configure_logging(LogConfig(format=LogFormat.JSON))
        logger = get_logger("tests.logging")

        with caplog.at_level(logging.INFO):
            logger.info("Factory ready", stream="user-events")

        assert "Factory ready" in caplog.text
        assert "user-events" in caplog.text

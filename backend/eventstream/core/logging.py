# ruff: noqa: A005
"""Structured logging configuration.

Every module obtains its logger through ``get_logger(__name__)`` and logs
with keyword context::

    logger = get_logger(__name__)
    logger.debug("Delivering record", stream=stream, size=len(data))

The first ``get_logger`` call configures structlog with defaults unless
``configure_logging`` was called explicitly during bootstrap.
"""

import logging
import os
import sys
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

import structlog
from structlog.contextvars import merge_contextvars

from eventstream.core.errors import ConfigurationError


class LogFormat(Enum):
    """Log output format options."""

    JSON = "json"
    CONSOLE = "console"
    PLAIN = "plain"

    def __str__(self) -> str:
        return self.value


@dataclass
class LogConfig:
    """
    Logging configuration.

    Usage Example:
        config = LogConfig(level="DEBUG", format=LogFormat.CONSOLE)
        configure_logging(config)
    """

    level: str = field(default="INFO")
    format: LogFormat = field(default=LogFormat.JSON)
    enable_timestamps: bool = field(default=True)
    enable_exception_info: bool = field(default=True)

    def __post_init__(self):
        self.level = self.level.upper()
        self.validate()

    def validate(self) -> None:
        """
        Validate logging configuration parameters.

        Raises:
            ConfigurationError: If the level name is unknown
        """
        if not isinstance(logging.getLevelName(self.level), int):
            raise ConfigurationError(
                f"Unknown log level: {self.level}", config_key="log_level"
            )

    @property
    def numeric_level(self) -> int:
        return logging.getLevelName(self.level)

    @classmethod
    def from_env(cls, environ: dict[str, str] | None = None) -> "LogConfig":
        """Build a config from the ``EVENTSTREAM_LOG_*`` variables."""
        environ = os.environ if environ is None else environ
        raw_format = environ.get("EVENTSTREAM_LOG_FORMAT", LogFormat.JSON.value)
        try:
            log_format = LogFormat(raw_format.lower())
        except ValueError:
            raise ConfigurationError(
                f"Unknown log format: {raw_format}", config_key="log_format"
            )
        return cls(
            level=environ.get("EVENTSTREAM_LOG_LEVEL", "INFO"),
            format=log_format,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "level": self.level,
            "format": self.format.value,
            "enable_timestamps": self.enable_timestamps,
            "enable_exception_info": self.enable_exception_info,
        }


_configured = False


def configure_logging(config: LogConfig | None = None) -> None:
    """
    Configure structlog and the stdlib root handler.

    Args:
        config: Logging configuration (uses defaults if not provided)
    """
    global _configured  # noqa: PLW0603

    config = config or LogConfig()

    processors = [
        merge_contextvars,
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
    ]

    if config.enable_timestamps:
        processors.append(structlog.processors.TimeStamper(fmt="iso"))

    if config.enable_exception_info:
        processors.extend(
            [
                structlog.processors.StackInfoRenderer(),
                structlog.processors.format_exc_info,
            ]
        )

    processors.append(structlog.processors.UnicodeDecoder())

    if config.format == LogFormat.JSON:
        processors.append(structlog.processors.JSONRenderer())
    elif config.format == LogFormat.CONSOLE:
        processors.append(structlog.dev.ConsoleRenderer(colors=False))
    else:
        processors.append(structlog.processors.KeyValueRenderer())

    structlog.configure(
        processors=processors,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=config.numeric_level,
    )
    logging.getLogger().setLevel(config.numeric_level)

    # botocore is chatty at DEBUG
    logging.getLogger("botocore").setLevel(logging.WARNING)
    logging.getLogger("aiobotocore").setLevel(logging.WARNING)

    _configured = True


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """
    Get structured logger instance.

    Args:
        name: Logger name (usually __name__)

    Returns:
        structlog.stdlib.BoundLogger: Configured logger instance
    """
    if not _configured:
        configure_logging()

    return structlog.get_logger(name)

"""Core infrastructure shared by the event store: errors, logging, configuration
and the unit of work.
"""

from .config import EventStoreSettings, get_settings
from .errors import (
    ApplicationError,
    ConfigurationError,
    DataIntegrityError,
    EventStreamError,
    ExternalServiceError,
    InfrastructureError,
    OperationTimeoutError,
    ValidationError,
)
from .logging import LogConfig, configure_logging, get_logger

__all__ = [
    "ApplicationError",
    "ConfigurationError",
    "DataIntegrityError",
    "EventStoreSettings",
    "EventStreamError",
    "ExternalServiceError",
    "InfrastructureError",
    "LogConfig",
    "OperationTimeoutError",
    "ValidationError",
    "configure_logging",
    "get_logger",
    "get_settings",
]

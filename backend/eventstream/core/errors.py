"""Error classes shared by every eventstream module."""

import logging
import time
import uuid
from enum import Enum
from typing import Any


class ErrorSeverity(Enum):
    """Error severity levels for monitoring and alerting."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class EventStreamError(Exception):
    """
    Base exception for all eventstream errors.

    Carries an error id, severity, retry hint and structured details, and
    logs itself on construction.
    """

    default_code: str = "ERROR"
    severity: ErrorSeverity = ErrorSeverity.MEDIUM
    retryable: bool = False

    def __init__(self, message: str, **kwargs: Any) -> None:
        super().__init__(message)
        self.message = message
        self.code = kwargs.get("code") or self.default_code
        self.details = kwargs.get("details") or {}
        self.error_id = str(uuid.uuid4())
        self.timestamp = time.time()
        self.user_message = kwargs.get("user_message") or message
        self.recovery_hint = kwargs.get("recovery_hint")
        self.context = kwargs.get("context") or {}
        if kwargs.get("cause") is not None:
            self.__cause__ = kwargs["cause"]

        self._log_error()

    def _log_error(self) -> None:
        """Log error with structured data."""
        logger = logging.getLogger(f"eventstream.errors.{self.__class__.__name__}")
        log_data = {
            "error_id": self.error_id,
            "code": self.code,
            "error_message": self.message,
            "severity": self.severity.value,
            "retryable": self.retryable,
            "details": self._sanitize_details(self.details),
            "error_class": self.__class__.__name__,
        }

        if self.severity == ErrorSeverity.CRITICAL:
            logger.critical("Critical error occurred", extra=log_data)
        elif self.severity == ErrorSeverity.HIGH:
            logger.error("High severity error", extra=log_data)
        elif self.severity == ErrorSeverity.MEDIUM:
            logger.warning("Medium severity error", extra=log_data)
        else:
            logger.info("Low severity error", extra=log_data)

    def _sanitize_details(self, details: dict) -> dict:
        """Mask detail values whose keys look like credentials."""
        if not details:
            return {}

        sensitive_keys = {"password", "token", "secret", "credential", "authorization"}
        sanitized = {}

        for key, value in details.items():
            if any(sensitive in key.lower() for sensitive in sensitive_keys):
                sanitized[key] = "***REDACTED***"
            elif isinstance(value, dict):
                sanitized[key] = self._sanitize_details(value)
            else:
                sanitized[key] = value

        return sanitized

    def to_dict(
        self, include_details: bool = True, include_internal: bool = False
    ) -> dict[str, Any]:
        """
        Serialize error for logging or an API response.

        Args:
            include_details: Include error details
            include_internal: Include internal debugging info (error_id, severity)
        """
        data = {
            "error": self.code,
            "message": self.user_message,
            "timestamp": self.timestamp,
        }

        if include_details and self.details:
            data["details"] = {
                k: v for k, v in self.details.items() if not k.startswith("_")
            }

        if self.recovery_hint:
            data["recovery_hint"] = self.recovery_hint

        if self.retryable:
            data["retryable"] = True

        if include_internal:
            data.update(
                {
                    "error_id": self.error_id,
                    "severity": self.severity.value,
                    "internal_message": self.message,
                    "context": self.context,
                }
            )

        return data

    def with_context(self, **context: Any) -> "EventStreamError":
        """Add context to error and return self for chaining."""
        self.context.update(context)
        return self

    def __str__(self) -> str:
        return f"{self.code}: {self.message}"


class ApplicationError(EventStreamError):
    """Base class for application layer errors."""

    default_code = "APPLICATION_ERROR"
    severity = ErrorSeverity.MEDIUM


class InfrastructureError(EventStreamError):
    """Base class for infrastructure errors."""

    default_code = "INFRASTRUCTURE_ERROR"
    severity = ErrorSeverity.HIGH
    retryable = True


class ValidationError(ApplicationError):
    """Invalid input at an API boundary."""

    default_code = "VALIDATION_ERROR"
    severity = ErrorSeverity.LOW

    def __init__(self, message: str, field: str | None = None, **kwargs: Any) -> None:
        super().__init__(message, **kwargs)
        if field:
            self.details["field"] = field


class OperationTimeoutError(InfrastructureError):
    """Operation timeout error."""

    default_code = "TIMEOUT"
    severity = ErrorSeverity.HIGH
    retryable = True

    def __init__(self, operation: str, timeout_seconds: float, **kwargs: Any) -> None:
        message = kwargs.pop("message", None) or (
            f"{operation} timed out after {timeout_seconds}s"
        )
        super().__init__(
            message,
            user_message="The operation took too long to complete",
            recovery_hint="Please try again. If the problem persists, contact support.",
            **kwargs,
        )
        self.details.update(
            {"operation": operation, "timeout_seconds": timeout_seconds}
        )


class ConfigurationError(InfrastructureError):
    """Configuration error."""

    default_code = "CONFIGURATION_ERROR"
    severity = ErrorSeverity.CRITICAL
    retryable = False

    def __init__(
        self, message: str, config_key: str | None = None, **kwargs: Any
    ) -> None:
        super().__init__(message, user_message="Service configuration issue", **kwargs)
        if config_key:
            self.details["config_key"] = config_key


class ExternalServiceError(InfrastructureError):
    """External service error."""

    default_code = "EXTERNAL_SERVICE_ERROR"
    severity = ErrorSeverity.HIGH
    retryable = True

    def __init__(
        self,
        service: str,
        message: str,
        service_error_code: str | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(
            f"{service} error: {message}",
            user_message="External service temporarily unavailable",
            recovery_hint="Please try again in a few moments",
            **kwargs,
        )
        self.service = service
        self.details.update(
            {"service": service, "service_error_code": service_error_code}
        )


class DataIntegrityError(InfrastructureError):
    """Stored data does not match the shape the reader expects."""

    default_code = "DATA_INTEGRITY_ERROR"
    severity = ErrorSeverity.MEDIUM
    retryable = False

    def __init__(
        self, message: str, constraint: str | None = None, **kwargs: Any
    ) -> None:
        super().__init__(
            message, user_message="Data integrity constraint violated", **kwargs
        )
        if constraint:
            self.details["constraint"] = constraint

"""
Tests for the core error hierarchy.
"""

import pytest

from eventstream.core.errors import (
    ConfigurationError,
    DataIntegrityError,
    ErrorSeverity,
    EventStreamError,
    ExternalServiceError,
    InfrastructureError,
    OperationTimeoutError,
    ValidationError,
)


class TestEventStreamError:
    """Test suite for the base error."""

    def test_defaults(self):
        """Test code, user message and details defaults."""
        error = EventStreamError("something broke")

        assert error.code == "ERROR"
        assert error.message == "something broke"
        assert error.user_message == "something broke"
        assert error.details == {}
        assert error.error_id
        assert str(error) == "ERROR: something broke"

    def test_cause_is_chained(self):
        """Test the cause kwarg sets __cause__."""
        cause = ValueError("root cause")

        error = EventStreamError("wrapped", cause=cause)

        assert error.__cause__ is cause

    def test_to_dict_hides_internal_by_default(self):
        """Test public serialization omits internal fields."""
        error = EventStreamError("boom", details={"table": "events", "_hidden": 1})

        data = error.to_dict()

        assert data["error"] == "ERROR"
        assert data["details"] == {"table": "events"}
        assert "error_id" not in data

    def test_to_dict_with_internal(self):
        """Test internal serialization includes severity and context."""
        error = EventStreamError("boom").with_context(request_id="r-1")

        data = error.to_dict(include_internal=True)

        assert data["severity"] == ErrorSeverity.MEDIUM.value
        assert data["context"] == {"request_id": "r-1"}
        assert data["internal_message"] == "boom"

    def test_sensitive_details_redacted(self):
        """Test credential-like keys are masked when sanitized."""
        error = EventStreamError("boom")

        sanitized = error._sanitize_details(
            {"aws_secret_access_key": "abc", "nested": {"token": "t"}, "stream": "s"}
        )

        assert sanitized["aws_secret_access_key"] == "***REDACTED***"
        assert sanitized["nested"]["token"] == "***REDACTED***"
        assert sanitized["stream"] == "s"


class TestErrorSubclasses:
    """Test suite for the specialised errors."""

    def test_validation_error_records_field(self):
        error = ValidationError("limit must be positive", field="limit")

        assert error.code == "VALIDATION_ERROR"
        assert error.details["field"] == "limit"
        assert error.severity == ErrorSeverity.LOW

    def test_external_service_error(self):
        """Test service name is prefixed and recorded."""
        error = ExternalServiceError(
            "athena", "throttled", service_error_code="Throttling"
        )

        assert error.message == "athena error: throttled"
        assert error.service == "athena"
        assert error.details["service_error_code"] == "Throttling"
        assert error.retryable is True
        assert isinstance(error, InfrastructureError)

    def test_timeout_error_default_message(self):
        error = OperationTimeoutError("athena query", 2.5)

        assert error.message == "athena query timed out after 2.5s"
        assert error.details["timeout_seconds"] == 2.5

    def test_timeout_error_custom_message(self):
        error = OperationTimeoutError("athena query", 2.5, message="gave up")

        assert error.message == "gave up"

    def test_configuration_error_is_not_retryable(self):
        error = ConfigurationError("missing database", config_key="athena_database")

        assert error.retryable is False
        assert error.severity == ErrorSeverity.CRITICAL
        assert error.details["config_key"] == "athena_database"

    def test_data_integrity_error_constraint(self):
        error = DataIntegrityError("bad row", constraint="time")

        assert error.details["constraint"] == "time"
        assert error.retryable is False

    def test_errors_are_raisable(self):
        with pytest.raises(InfrastructureError):
            raise DataIntegrityError("bad row")

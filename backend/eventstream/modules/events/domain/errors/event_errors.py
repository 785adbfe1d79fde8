"""Event store errors.

Delivery-side errors are raised by the Firehose adapter and flattener and
are always caught by the sink. Query-side errors always reach the caller.
"""

from typing import Any

from eventstream.core.errors import (
    DataIntegrityError,
    ExternalServiceError,
    InfrastructureError,
    OperationTimeoutError,
)


class DeliveryError(ExternalServiceError):
    """A record could not be put onto a Firehose delivery stream."""

    default_code = "EVENT_DELIVERY_FAILED"

    def __init__(self, stream: str, message: str, **kwargs: Any):
        super().__init__("firehose", message, **kwargs)
        self.stream = stream
        self.details["stream"] = stream


class FlatEventSerializationError(DataIntegrityError):
    """An event could not be turned into its flat record."""

    default_code = "EVENT_SERIALIZATION_FAILED"


class QueryBackendError(ExternalServiceError):
    """A call to the query backend itself failed."""

    default_code = "QUERY_BACKEND_ERROR"

    def __init__(self, operation: str, message: str, **kwargs: Any):
        super().__init__("athena", f"{operation} failed: {message}", **kwargs)
        self.operation = operation
        self.details["operation"] = operation


class QueryExecutionFailedError(ExternalServiceError):
    """The backend reported the query as FAILED or CANCELLED."""

    default_code = "QUERY_EXECUTION_FAILED"
    retryable = False

    def __init__(
        self,
        execution_id: str,
        state: str,
        reason: str | None = None,
        **kwargs: Any,
    ):
        super().__init__(
            "athena",
            f"Athena query {execution_id} finished with state {state}: {reason}",
            **kwargs,
        )
        self.execution_id = execution_id
        self.state = state
        self.reason = reason
        self.details.update(
            {"execution_id": execution_id, "state": state, "reason": reason}
        )


class QueryTimeoutError(OperationTimeoutError):
    """The query was still running after every poll attempt was used."""

    default_code = "QUERY_TIMEOUT"
    retryable = False

    def __init__(
        self,
        execution_id: str,
        attempts: int,
        poll_interval_ms: int,
        **kwargs: Any,
    ):
        super().__init__(
            "athena query",
            attempts * poll_interval_ms / 1000,
            message=(
                f"Timed out after {attempts} attempts while waiting for "
                f"Athena query {execution_id} to finish"
            ),
            **kwargs,
        )
        self.execution_id = execution_id
        self.attempts = attempts
        self.details.update({"execution_id": execution_id, "attempts": attempts})


class QueryInterruptedError(InfrastructureError):
    """The task waiting on a query was cancelled between polls."""

    default_code = "QUERY_INTERRUPTED"
    retryable = False

    def __init__(self, execution_id: str, **kwargs: Any):
        super().__init__(
            f"Interrupted while waiting for Athena query {execution_id} to finish",
            **kwargs,
        )
        self.execution_id = execution_id
        self.details["execution_id"] = execution_id


class RowDecodeError(DataIntegrityError):
    """A result row cannot be represented as an event."""

    default_code = "ROW_DECODE_FAILED"

    def __init__(
        self,
        message: str,
        column: str | None = None,
        value: str | None = None,
        **kwargs: Any,
    ):
        super().__init__(message, constraint=column, **kwargs)
        self.column = column
        self.value = value
        if value is not None:
            self.details["value"] = value


class DetailsSerializationError(RowDecodeError):
    """A details payload is not a flat string-to-string JSON object."""

    default_code = "DETAILS_DECODE_FAILED"

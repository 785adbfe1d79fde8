from .event_errors import (
    DeliveryError,
    DetailsSerializationError,
    FlatEventSerializationError,
    QueryBackendError,
    QueryExecutionFailedError,
    QueryInterruptedError,
    QueryTimeoutError,
    RowDecodeError,
)

__all__ = [
    "DeliveryError",
    "DetailsSerializationError",
    "FlatEventSerializationError",
    "QueryBackendError",
    "QueryExecutionFailedError",
    "QueryInterruptedError",
    "QueryTimeoutError",
    "RowDecodeError",
]

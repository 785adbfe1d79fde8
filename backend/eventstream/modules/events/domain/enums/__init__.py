"""Event domain enumerations."""

from .event_enums import (
    EventType,
    OperationType,
    QueryExecutionState,
    ResourceType,
    SortOrder,
)

__all__ = [
    "EventType",
    "OperationType",
    "QueryExecutionState",
    "ResourceType",
    "SortOrder",
]

"""Filter criteria for event queries.

The query builders accumulate caller input and snapshot it into one of
these immutable values; SQL is always compiled from the snapshot.
"""

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import UTC, datetime

from eventstream.modules.events.domain.enums import (
    EventType,
    OperationType,
    ResourceType,
    SortOrder,
)


def to_epoch_millis(value: datetime | int) -> int:
    """Epoch milliseconds for a datetime (naive means UTC) or an int passthrough."""
    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return int(value.timestamp() * 1000)
    return int(value)


def normalize_first_result(first_result: int | None) -> int | None:
    """Negative offsets mean "no offset"."""
    if first_result is None or first_result < 0:
        return None
    return first_result


def normalize_max_results(max_results: int | None) -> int | None:
    """Non-positive limits mean "no limit"."""
    if max_results is None or max_results <= 0:
        return None
    return max_results


def unique_members(current: tuple, members: Iterable) -> tuple:
    """Append members to ``current`` keeping first-seen order without duplicates."""
    merged = list(current)
    for member in members:
        if member is not None and member not in merged:
            merged.append(member)
    return tuple(merged)


@dataclass(frozen=True)
class EventFilter:
    """
    Criteria for end-user event queries.

    Attributes:
        event_types: Event kinds to include; empty means any
        realm_id: Realm equality filter
        client_id: Client equality filter
        user_id: User equality filter
        ip_address: Source address equality filter
        from_time: Inclusive lower time bound, epoch ms
        to_time: Inclusive upper time bound, epoch ms
        first_result: Rows to skip
        max_results: Maximum rows to return
        order: Ordering by time
    """

    event_types: tuple[EventType, ...] = ()
    realm_id: str | None = None
    client_id: str | None = None
    user_id: str | None = None
    ip_address: str | None = None
    from_time: int | None = None
    to_time: int | None = None
    first_result: int | None = None
    max_results: int | None = None
    order: SortOrder = SortOrder.DESC


@dataclass(frozen=True)
class AdminEventFilter:
    """Criteria for administrative event queries."""

    operation_types: tuple[OperationType, ...] = ()
    resource_types: tuple[ResourceType, ...] = ()
    realm_id: str | None = None
    auth_realm_id: str | None = None
    auth_client_id: str | None = None
    auth_user_id: str | None = None
    auth_ip_address: str | None = None
    resource_path: str | None = None
    from_time: int | None = None
    to_time: int | None = None
    first_result: int | None = None
    max_results: int | None = None
    order: SortOrder = SortOrder.DESC

"""SQL builder for Athena event queries.

This module provides a fluent interface for assembling the single statement
shape the event store issues:

    SELECT <columns> FROM "<table>" [WHERE ...] ORDER BY time <dir> [LIMIT n] [OFFSET n]

Every caller-supplied string goes through ``quote_literal``; nothing else in
the package renders SQL literals.
"""

from collections.abc import Iterable, Sequence
from enum import Enum
from typing import Any

from eventstream.core.errors import ValidationError
from eventstream.modules.events.domain.enums import SortOrder


def quote_literal(value: Any) -> str:
    """Render a value as a SQL string literal, doubling embedded quotes."""
    if value is None:
        return "NULL"
    if isinstance(value, Enum):
        value = value.name
    return "'" + str(value).replace("'", "''") + "'"


def _require_int(name: str, value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(f"{name} must be an integer, got {value!r}", field=name)
    return value


def _require_count(name: str, value: Any) -> int:
    if _require_int(name, value) < 0:
        raise ValidationError(
            f"{name} must be a non-negative integer, got {value!r}", field=name
        )
    return value


class SqlQueryBuilder:
    """
    Builder for one SELECT statement over an events table.

    Conditions are AND-ed together in the order they are added.
    """

    def __init__(self, table: str, columns: Sequence[str]):
        self._table = table
        self._columns = tuple(columns)
        self._conditions: list[str] = []
        self._order = SortOrder.DESC
        self._limit: int | None = None
        self._offset: int | None = None

    # Conditions
    def where_in(self, column: str, values: Iterable[Any]) -> "SqlQueryBuilder":
        """Add ``column IN (...)`` when there is at least one value."""
        values = list(values or ())
        if values:
            rendered = ",".join(quote_literal(value) for value in values)
            self._conditions.append(f"{column} IN ({rendered})")
        return self

    def where_equals(self, column: str, value: Any) -> "SqlQueryBuilder":
        """Add ``column = 'value'`` when a value is given."""
        if value is not None:
            self._conditions.append(f"{column} = {quote_literal(value)}")
        return self

    def where_time_range(
        self, from_time: int | None = None, to_time: int | None = None
    ) -> "SqlQueryBuilder":
        """Add inclusive epoch-millisecond bounds on ``time``."""
        if from_time is not None:
            self._conditions.append(f"time >= {_require_int('from_time', from_time)}")
        if to_time is not None:
            self._conditions.append(f"time <= {_require_int('to_time', to_time)}")
        return self

    # Ordering and paging
    def order_by_time(self, order: SortOrder) -> "SqlQueryBuilder":
        self._order = order
        return self

    def limit(self, limit: int | None) -> "SqlQueryBuilder":
        self._limit = None if limit is None else _require_count("limit", limit)
        return self

    def offset(self, offset: int | None) -> "SqlQueryBuilder":
        self._offset = None if offset is None else _require_count("offset", offset)
        return self

    def build(self) -> str:
        """Render the statement."""
        parts = [f'SELECT {", ".join(self._columns)} FROM "{self._table}"']
        if self._conditions:
            parts.append("WHERE " + " AND ".join(self._conditions))
        parts.append(f"ORDER BY time {self._order.value}")
        if self._limit is not None:
            parts.append(f"LIMIT {self._limit}")
        if self._offset:
            parts.append(f"OFFSET {self._offset}")
        return " ".join(parts)

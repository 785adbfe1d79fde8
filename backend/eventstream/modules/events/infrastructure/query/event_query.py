"""Fluent query over the user-events table."""

from collections.abc import Iterator
from dataclasses import replace
from datetime import datetime

from eventstream.core.logging import get_logger
from eventstream.modules.events.domain.entities import Event, EventFilter
from eventstream.modules.events.domain.entities.event_filter import (
    normalize_first_result,
    normalize_max_results,
    to_epoch_millis,
    unique_members,
)
from eventstream.modules.events.domain.enums import EventType, SortOrder
from eventstream.modules.events.infrastructure.query.query_engine import (
    AthenaQueryEngine,
)
from eventstream.modules.events.infrastructure.query.row_decoder import decode_event_row
from eventstream.modules.events.infrastructure.query.schema import EVENT_COLUMNS
from eventstream.modules.events.infrastructure.query.sql_builder import SqlQueryBuilder

logger = get_logger(__name__)


def compile_event_query(table: str, criteria: EventFilter) -> str:
    """Render the SELECT for ``criteria`` against ``table``."""
    return (
        SqlQueryBuilder(table, EVENT_COLUMNS)
        .where_in("eventtype", criteria.event_types)
        .where_equals("realmid", criteria.realm_id)
        .where_equals("clientid", criteria.client_id)
        .where_equals("userid", criteria.user_id)
        .where_equals("ipaddress", criteria.ip_address)
        .where_time_range(criteria.from_time, criteria.to_time)
        .order_by_time(criteria.order)
        .limit(criteria.max_results)
        .offset(criteria.first_result)
        .build()
    )


class EventQuery:
    """
    Builder for user event searches.

    Each method narrows the search and returns the builder, so calls chain:

        events = await (
            provider.create_query()
            .realm("acme")
            .type(EventType.LOGIN, EventType.LOGIN_ERROR)
            .max_results(50)
            .get_result_stream()
        )
    """

    def __init__(self, engine: AthenaQueryEngine, table: str):
        self._engine = engine
        self._table = table
        self._criteria = EventFilter()

    def _update(self, **changes) -> "EventQuery":
        self._criteria = replace(self._criteria, **changes)
        return self

    def type(self, *event_types: EventType | None) -> "EventQuery":
        return self._update(
            event_types=unique_members(self._criteria.event_types, event_types)
        )

    def realm(self, realm_id: str | None) -> "EventQuery":
        return self._update(realm_id=realm_id)

    def client(self, client_id: str | None) -> "EventQuery":
        return self._update(client_id=client_id)

    def user(self, user_id: str | None) -> "EventQuery":
        return self._update(user_id=user_id)

    def ip_address(self, ip_address: str | None) -> "EventQuery":
        return self._update(ip_address=ip_address)

    def from_date(self, from_date: datetime | int | None) -> "EventQuery":
        return self._update(
            from_time=None if from_date is None else to_epoch_millis(from_date)
        )

    def to_date(self, to_date: datetime | int | None) -> "EventQuery":
        return self._update(
            to_time=None if to_date is None else to_epoch_millis(to_date)
        )

    def first_result(self, first_result: int | None) -> "EventQuery":
        return self._update(first_result=normalize_first_result(first_result))

    def max_results(self, max_results: int | None) -> "EventQuery":
        return self._update(max_results=normalize_max_results(max_results))

    def order_by_desc_time(self) -> "EventQuery":
        return self._update(order=SortOrder.DESC)

    def order_by_asc_time(self) -> "EventQuery":
        return self._update(order=SortOrder.ASC)

    def criteria(self) -> EventFilter:
        """Snapshot of the criteria accumulated so far."""
        return self._criteria

    def build_sql(self) -> str:
        return compile_event_query(self._table, self._criteria)

    async def get_result_stream(self) -> Iterator[Event]:
        """Run the query and return matching events in query order."""
        sql = self.build_sql()
        logger.debug("Running user event query", sql=sql)
        return await self._engine.execute(sql, decode_event_row)

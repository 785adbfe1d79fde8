"""Fluent query over the admin-events table."""

from collections.abc import Iterator
from dataclasses import replace
from datetime import datetime

from eventstream.core.logging import get_logger
from eventstream.modules.events.domain.entities import AdminEvent, AdminEventFilter
from eventstream.modules.events.domain.entities.event_filter import (
    normalize_first_result,
    normalize_max_results,
    to_epoch_millis,
    unique_members,
)
from eventstream.modules.events.domain.enums import (
    OperationType,
    ResourceType,
    SortOrder,
)
from eventstream.modules.events.infrastructure.query.query_engine import (
    AthenaQueryEngine,
)
from eventstream.modules.events.infrastructure.query.row_decoder import (
    decode_admin_event_row,
)
from eventstream.modules.events.infrastructure.query.schema import ADMIN_EVENT_COLUMNS
from eventstream.modules.events.infrastructure.query.sql_builder import SqlQueryBuilder

logger = get_logger(__name__)


def compile_admin_event_query(table: str, criteria: AdminEventFilter) -> str:
    """Render the SELECT for ``criteria`` against ``table``."""
    return (
        SqlQueryBuilder(table, ADMIN_EVENT_COLUMNS)
        .where_in("operationtype", criteria.operation_types)
        .where_in("resourcetype", criteria.resource_types)
        .where_equals("realmid", criteria.realm_id)
        .where_equals("authrealmid", criteria.auth_realm_id)
        .where_equals("authclientid", criteria.auth_client_id)
        .where_equals("authuserid", criteria.auth_user_id)
        .where_equals("authipaddress", criteria.auth_ip_address)
        .where_equals("resourcepath", criteria.resource_path)
        .where_time_range(criteria.from_time, criteria.to_time)
        .order_by_time(criteria.order)
        .limit(criteria.max_results)
        .offset(criteria.first_result)
        .build()
    )


class AdminEventQuery:
    """Builder for administrative event searches."""

    def __init__(self, engine: AthenaQueryEngine, table: str):
        self._engine = engine
        self._table = table
        self._criteria = AdminEventFilter()

    def _update(self, **changes) -> "AdminEventQuery":
        self._criteria = replace(self._criteria, **changes)
        return self

    # Kind filters
    def operation(self, *operation_types: OperationType | None) -> "AdminEventQuery":
        return self._update(
            operation_types=unique_members(
                self._criteria.operation_types, operation_types
            )
        )

    def resource_type(self, *resource_types: ResourceType | None) -> "AdminEventQuery":
        return self._update(
            resource_types=unique_members(self._criteria.resource_types, resource_types)
        )

    # Equality filters
    def realm(self, realm_id: str | None) -> "AdminEventQuery":
        return self._update(realm_id=realm_id)

    def auth_realm(self, auth_realm_id: str | None) -> "AdminEventQuery":
        return self._update(auth_realm_id=auth_realm_id)

    def auth_client(self, auth_client_id: str | None) -> "AdminEventQuery":
        return self._update(auth_client_id=auth_client_id)

    def auth_user(self, auth_user_id: str | None) -> "AdminEventQuery":
        return self._update(auth_user_id=auth_user_id)

    def auth_ip_address(self, ip_address: str | None) -> "AdminEventQuery":
        return self._update(auth_ip_address=ip_address)

    def resource_path(self, resource_path: str | None) -> "AdminEventQuery":
        return self._update(resource_path=resource_path)

    # Time range
    def from_time(self, from_time: datetime | int | None) -> "AdminEventQuery":
        return self._update(
            from_time=None if from_time is None else to_epoch_millis(from_time)
        )

    def to_time(self, to_time: datetime | int | None) -> "AdminEventQuery":
        return self._update(
            to_time=None if to_time is None else to_epoch_millis(to_time)
        )

    # Paging and ordering
    def first_result(self, first_result: int | None) -> "AdminEventQuery":
        return self._update(first_result=normalize_first_result(first_result))

    def max_results(self, max_results: int | None) -> "AdminEventQuery":
        return self._update(max_results=normalize_max_results(max_results))

    def order_by_desc_time(self) -> "AdminEventQuery":
        return self._update(order=SortOrder.DESC)

    def order_by_asc_time(self) -> "AdminEventQuery":
        return self._update(order=SortOrder.ASC)

    def criteria(self) -> AdminEventFilter:
        return self._criteria

    def build_sql(self) -> str:
        return compile_admin_event_query(self._table, self._criteria)

    async def get_result_stream(self) -> Iterator[AdminEvent]:
        """Run the query and return matching admin events in query order."""
        sql = self.build_sql()
        logger.debug("Running admin event query", sql=sql)
        return await self._engine.execute(sql, decode_admin_event_row)

"""Event store provider.

This module provides the per-transaction facade the host platform talks to:
events go in through the transactional sink and come back out through the
Athena query builders.
"""

from eventstream.core.config import EventStoreSettings
from eventstream.core.infrastructure.unit_of_work import TransactionContext
from eventstream.core.logging import get_logger
from eventstream.modules.events.domain.entities import AdminEvent, Event
from eventstream.modules.events.infrastructure.adapters import (
    AthenaQueryClient,
    FirehoseDeliveryClient,
)
from eventstream.modules.events.infrastructure.query import (
    AdminEventQuery,
    AthenaQueryEngine,
    EventQuery,
)
from eventstream.modules.events.infrastructure.sink import TransactionalEventSink

logger = get_logger(__name__)


class EventStoreProvider:
    """
    Event store bound to one unit of work.

    Recording is deferred until the unit of work commits; queries run
    immediately against Athena and do not see events of the current
    transaction.
    """

    def __init__(
        self,
        transaction: TransactionContext,
        delivery: FirehoseDeliveryClient,
        query_client: AthenaQueryClient,
        settings: EventStoreSettings,
    ):
        """
        Initialize the provider.

        Args:
            transaction: Unit of work the recorded events belong to
            delivery: Shared Firehose adapter
            query_client: Shared Athena adapter
            settings: Stream, table and polling configuration
        """
        self._settings = settings
        self._sink = TransactionalEventSink(
            transaction,
            delivery,
            user_events_stream=settings.firehose_user_events_stream,
            admin_events_stream=settings.firehose_admin_events_stream,
        )
        self._engine = AthenaQueryEngine(
            query_client,
            settings.athena_database,
            work_group=settings.athena_work_group,
            output_location=settings.athena_output_location,
            poll_interval_ms=settings.athena_query_poll_interval_millis,
            max_attempts=settings.athena_query_max_attempts,
        )

    @property
    def sink(self) -> TransactionalEventSink:
        return self._sink

    def on_event(self, event: Event) -> None:
        """Record a user event for delivery on commit."""
        self._sink.record_event(event)

    def on_admin_event(
        self, admin_event: AdminEvent, include_representation: bool = True
    ) -> None:
        """Record an admin event for delivery on commit."""
        self._sink.record_admin_event(admin_event, include_representation)

    def create_query(self) -> EventQuery:
        return EventQuery(self._engine, self._settings.athena_user_events_table)

    def create_admin_query(self) -> AdminEventQuery:
        return AdminEventQuery(self._engine, self._settings.athena_admin_events_table)

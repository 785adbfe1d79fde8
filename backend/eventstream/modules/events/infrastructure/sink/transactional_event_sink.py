"""
Transactional event sink.

Buffers events recorded during a unit of work and ships them to Firehose
only once the unit of work commits. Rolled back work delivers nothing.
Delivery is best effort: a record that cannot be flattened or delivered is
logged and skipped, and never affects the committed transaction.
"""

from dataclasses import dataclass

from eventstream.core.infrastructure.unit_of_work import TransactionContext
from eventstream.core.logging import get_logger
from eventstream.modules.events.domain.entities import AdminEvent, Event
from eventstream.modules.events.infrastructure.adapters import FirehoseDeliveryClient
from eventstream.modules.events.infrastructure.serialization import (
    encode_record,
    flatten_admin_event,
    flatten_event,
)

logger = get_logger(__name__)


@dataclass(frozen=True)
class _PendingEvent:
    event: Event


@dataclass(frozen=True)
class _PendingAdminEvent:
    admin_event: AdminEvent
    include_representation: bool


class TransactionalEventSink:
    """Commit-gated buffer in front of the Firehose delivery client."""

    def __init__(
        self,
        transaction: TransactionContext,
        delivery: FirehoseDeliveryClient,
        user_events_stream: str,
        admin_events_stream: str,
    ):
        self._delivery = delivery
        self._user_events_stream = user_events_stream
        self._admin_events_stream = admin_events_stream
        self._pending: list[_PendingEvent | _PendingAdminEvent] = []

        transaction.on_commit(self._after_commit)
        transaction.on_rollback(self._after_rollback)

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    def record_event(self, event: Event) -> None:
        logger.debug("Queueing user event", event_id=event.id)
        self._pending.append(_PendingEvent(event))

    def record_admin_event(
        self, admin_event: AdminEvent, include_representation: bool = True
    ) -> None:
        logger.debug("Queueing admin event", event_id=admin_event.id)
        self._pending.append(_PendingAdminEvent(admin_event, include_representation))

    async def _after_commit(self) -> None:
        pending, self._pending = self._pending, []
        if not pending:
            return

        logger.debug("Delivering committed events", count=len(pending))
        for item in pending:
            if isinstance(item, _PendingEvent):
                await self._deliver_event(item.event)
            else:
                await self._deliver_admin_event(
                    item.admin_event, item.include_representation
                )

    async def _after_rollback(self) -> None:
        if self._pending:
            logger.debug(
                "Discarding events of rolled back transaction",
                count=len(self._pending),
            )
        self._pending = []

    async def _deliver_event(self, event: Event) -> None:
        try:
            line = flatten_event(event)
        except Exception as e:
            logger.warning(
                "Error serializing user event",
                event_id=event.id,
                error=str(e),
                exc_info=True,
            )
            return
        await self._put(self._user_events_stream, line, event.id)

    async def _deliver_admin_event(
        self, admin_event: AdminEvent, include_representation: bool
    ) -> None:
        try:
            line = flatten_admin_event(admin_event, include_representation)
        except Exception as e:
            logger.warning(
                "Error serializing admin event",
                event_id=admin_event.id,
                error=str(e),
                exc_info=True,
            )
            return
        await self._put(self._admin_events_stream, line, admin_event.id)

    async def _put(self, stream: str, line: str, event_id: str | None) -> None:
        try:
            await self._delivery.put_record(stream, encode_record(line))
        except Exception as e:
            logger.warning(
                "Error sending to firehose",
                stream=stream,
                event_id=event_id,
                error=str(e),
                exc_info=True,
            )

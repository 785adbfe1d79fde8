"""Factory for event store providers.

Owns the process-wide AWS clients. ``init`` opens one Firehose and one
Athena client from a single aioboto3 session; every provider created
afterwards shares them until ``close``.
"""

from contextlib import AsyncExitStack

import aioboto3

from eventstream.core.config import EventStoreSettings
from eventstream.core.errors import ConfigurationError
from eventstream.core.infrastructure.unit_of_work import TransactionContext
from eventstream.core.logging import get_logger
from eventstream.modules.events.application.services import EventStoreProvider
from eventstream.modules.events.infrastructure.adapters import (
    AthenaQueryClient,
    FirehoseDeliveryClient,
)

logger = get_logger(__name__)


class EventStoreProviderFactory:
    """Creates ``EventStoreProvider`` instances over shared AWS clients."""

    PROVIDER_ID = "ext-event-aws-firehose-store"

    def __init__(self):
        self._settings: EventStoreSettings | None = None
        self._exit_stack: AsyncExitStack | None = None
        self._delivery: FirehoseDeliveryClient | None = None
        self._query_client: AthenaQueryClient | None = None

    @property
    def id(self) -> str:
        return self.PROVIDER_ID

    @property
    def initialized(self) -> bool:
        return self._exit_stack is not None

    @staticmethod
    def is_supported(settings: EventStoreSettings) -> bool:
        return settings.firehose_enabled

    async def init(self, settings: EventStoreSettings) -> None:
        """Open the AWS clients."""
        if self.initialized:
            await self.close()

        session_config = {}
        if settings.aws_profile:
            session_config["profile_name"] = settings.aws_profile
        if settings.aws_region:
            session_config["region_name"] = settings.aws_region
        session = aioboto3.Session(**session_config)

        exit_stack = AsyncExitStack()
        try:
            firehose = await exit_stack.enter_async_context(session.client("firehose"))
            athena = await exit_stack.enter_async_context(session.client("athena"))
        except Exception:
            await exit_stack.aclose()
            raise

        self._settings = settings
        self._exit_stack = exit_stack
        self._delivery = FirehoseDeliveryClient(firehose)
        self._query_client = AthenaQueryClient(athena)

        logger.info(
            "Event store provider factory initialized",
            provider_id=self.PROVIDER_ID,
            user_events_stream=settings.firehose_user_events_stream,
            admin_events_stream=settings.firehose_admin_events_stream,
            database=settings.athena_database,
            user_events_table=settings.athena_user_events_table,
            admin_events_table=settings.athena_admin_events_table,
            work_group=settings.athena_work_group,
            output_location=settings.athena_output_location,
            poll_interval_ms=settings.athena_query_poll_interval_millis,
            max_attempts=settings.athena_query_max_attempts,
        )

    def create(self, transaction: TransactionContext) -> EventStoreProvider:
        """
        Create a provider bound to ``transaction``.

        Raises:
            ConfigurationError: If called before ``init``
        """
        if not self.initialized:
            raise ConfigurationError(
                "Event store provider factory is not initialized",
                config_key=self.PROVIDER_ID,
            )
        return EventStoreProvider(
            transaction, self._delivery, self._query_client, self._settings
        )

    async def close(self) -> None:
        """Close the AWS clients. Safe to call more than once."""
        exit_stack, self._exit_stack = self._exit_stack, None
        self._delivery = None
        self._query_client = None
        if exit_stack is None:
            return
        await exit_stack.aclose()
        logger.info("Event store provider factory closed", provider_id=self.PROVIDER_ID)

"""
Asynchronous Athena query execution.

Athena queries run server side. The engine submits a statement, polls its
status on a fixed interval with a bounded number of attempts, then pages
through the result set and decodes every data row.
"""

import asyncio
from collections.abc import Callable, Iterator, Sequence
from typing import TypeVar

from eventstream.core.config import (
    DEFAULT_MAX_ATTEMPTS,
    DEFAULT_POLL_INTERVAL_MILLIS,
)
from eventstream.core.errors import ValidationError
from eventstream.core.logging import get_logger
from eventstream.modules.events.domain.enums import QueryExecutionState
from eventstream.modules.events.domain.errors import (
    QueryExecutionFailedError,
    QueryInterruptedError,
    QueryTimeoutError,
)
from eventstream.modules.events.infrastructure.adapters import AthenaQueryClient

logger = get_logger(__name__)

T = TypeVar("T")

RowDecoder = Callable[[Sequence[str | None]], T]


class AthenaQueryEngine:
    """Runs SQL against Athena and returns decoded rows."""

    def __init__(
        self,
        client: AthenaQueryClient,
        database: str,
        work_group: str | None = None,
        output_location: str | None = None,
        poll_interval_ms: int | None = DEFAULT_POLL_INTERVAL_MILLIS,
        max_attempts: int | None = DEFAULT_MAX_ATTEMPTS,
    ):
        """
        Initialize the engine.

        Args:
            client: Athena adapter
            database: Glue database the tables live in
            work_group: Optional Athena work group
            output_location: Optional S3 location for query results
            poll_interval_ms: Delay between status polls; non-positive means default
            max_attempts: Status polls before giving up; non-positive means default
        """
        if not database or not database.strip():
            raise ValidationError("Athena database is required", field="database")

        self._client = client
        self._database = database
        self._work_group = work_group
        self._output_location = output_location
        self._poll_interval_ms = (
            poll_interval_ms
            if poll_interval_ms and poll_interval_ms > 0
            else DEFAULT_POLL_INTERVAL_MILLIS
        )
        self._max_attempts = (
            max_attempts
            if max_attempts and max_attempts > 0
            else DEFAULT_MAX_ATTEMPTS
        )

    @property
    def poll_interval_ms(self) -> int:
        return self._poll_interval_ms

    @property
    def max_attempts(self) -> int:
        return self._max_attempts

    async def execute(self, sql: str, decoder: RowDecoder[T]) -> Iterator[T]:
        """
        Run ``sql`` and decode every data row.

        Raises:
            QueryBackendError: If a call to Athena fails
            QueryExecutionFailedError: If the query ends FAILED or CANCELLED
            QueryTimeoutError: If the query is still running after every attempt
            QueryInterruptedError: If the waiting task is cancelled
            RowDecodeError: If any row cannot be decoded
        """
        execution_id = await self._client.start_query(
            sql,
            self._database,
            work_group=self._work_group,
            output_location=self._output_location,
        )
        logger.debug("Submitted Athena query", execution_id=execution_id)

        await self._wait_for_completion(execution_id)
        results = await self._fetch_results(execution_id, decoder)

        logger.debug(
            "Athena query completed", execution_id=execution_id, rows=len(results)
        )
        return iter(results)

    async def _wait_for_completion(self, execution_id: str) -> None:
        attempts = 0
        while attempts < self._max_attempts:
            status = await self._client.get_status(execution_id)

            if status.state.is_terminal:
                if status.state is not QueryExecutionState.SUCCEEDED:
                    raise QueryExecutionFailedError(
                        execution_id, status.state.value, status.reason
                    )
                return

            logger.debug(
                "Athena query not finished",
                execution_id=execution_id,
                state=status.state.value,
                attempt=attempts + 1,
            )
            try:
                await asyncio.sleep(self._poll_interval_ms / 1000)
            except asyncio.CancelledError as e:
                raise QueryInterruptedError(execution_id) from e
            attempts += 1

        raise QueryTimeoutError(execution_id, attempts, self._poll_interval_ms)

    async def _fetch_results(
        self, execution_id: str, decoder: RowDecoder[T]
    ) -> list[T]:
        results: list[T] = []
        next_token: str | None = None
        first_page = True

        while True:
            page = await self._client.get_results_page(execution_id, next_token)
            rows = page.rows[1:] if first_page else page.rows
            first_page = False

            for row in rows:
                if not row:
                    continue
                results.append(decoder(row))

            next_token = page.next_token
            if not next_token:
                return results

"""Athena adapter.

Thin translation between the aioboto3 ``athena`` client and the shapes the
query engine works with: execution ids, ``QueryStatus`` and ``ResultPage``.
"""

from dataclasses import dataclass, field
from typing import Any

from botocore.exceptions import BotoCoreError, ClientError

from eventstream.modules.events.domain.enums import QueryExecutionState
from eventstream.modules.events.domain.errors import QueryBackendError


@dataclass(frozen=True)
class QueryStatus:
    """State of a submitted query and the backend's reason for it."""

    state: QueryExecutionState
    reason: str | None = None


@dataclass(frozen=True)
class ResultPage:
    """One page of result rows, each row a list of cell texts."""

    rows: list[list[str | None]] = field(default_factory=list)
    next_token: str | None = None


class AthenaQueryClient:
    """Submits queries, polls their status and pages through results."""

    def __init__(self, client: Any):
        """
        Initialize the adapter.

        Args:
            client: An entered aioboto3 ``athena`` client
        """
        self._client = client

    async def start_query(
        self,
        sql: str,
        database: str,
        work_group: str | None = None,
        output_location: str | None = None,
    ) -> str:
        """
        Submit ``sql`` for execution.

        Returns:
            The query execution id
        """
        request: dict[str, Any] = {
            "QueryString": sql,
            "QueryExecutionContext": {"Database": database},
        }
        if output_location and output_location.strip():
            request["ResultConfiguration"] = {"OutputLocation": output_location}
        if work_group and work_group.strip():
            request["WorkGroup"] = work_group

        response = await self._call("start_query_execution", **request)
        return response["QueryExecutionId"]

    async def get_status(self, execution_id: str) -> QueryStatus:
        response = await self._call(
            "get_query_execution", QueryExecutionId=execution_id
        )
        status = response["QueryExecution"]["Status"]
        try:
            state = QueryExecutionState(status["State"])
        except ValueError as e:
            message = f"Unknown query state: {status['State']!r}"
            raise QueryBackendError("get_query_execution", message, cause=e)
        return QueryStatus(state=state, reason=status.get("StateChangeReason"))

    async def get_results_page(
        self, execution_id: str, next_token: str | None = None
    ) -> ResultPage:
        request: dict[str, Any] = {"QueryExecutionId": execution_id}
        if next_token is not None:
            request["NextToken"] = next_token

        response = await self._call("get_query_results", **request)
        rows = response.get("ResultSet", {}).get("Rows") or []
        return ResultPage(
            rows=[
                [datum.get("VarCharValue") for datum in row.get("Data") or []]
                for row in rows
            ],
            next_token=response.get("NextToken"),
        )

    async def _call(self, operation: str, **request: Any) -> dict[str, Any]:
        try:
            return await getattr(self._client, operation)(**request)
        except ClientError as e:
            error_code = e.response.get("Error", {}).get("Code")
            raise QueryBackendError(
                operation, str(e), service_error_code=error_code, cause=e
            )
        except BotoCoreError as e:
            raise QueryBackendError(operation, str(e), cause=e)

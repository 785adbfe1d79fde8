"""
Tests for the Athena query engine.
"""

import asyncio
from collections.abc import Iterator

import pytest

from eventstream.core.errors import ValidationError
from eventstream.modules.events.domain.enums import QueryExecutionState
from eventstream.modules.events.domain.errors import (
    QueryExecutionFailedError,
    QueryInterruptedError,
    QueryTimeoutError,
    RowDecodeError,
)
from eventstream.modules.events.infrastructure.adapters import QueryStatus, ResultPage
from eventstream.modules.events.infrastructure.query import (
    AthenaQueryEngine,
    decode_event_row,
)

from tests.fakes import FakeAthenaClient, event_row

RUNNING = QueryStatus(QueryExecutionState.RUNNING)
QUEUED = QueryStatus(QueryExecutionState.QUEUED)
SUCCEEDED = QueryStatus(QueryExecutionState.SUCCEEDED)


def first_cell(row):
    return row[0]


def make_engine(client, **kwargs):
    kwargs.setdefault("poll_interval_ms", 1)
    kwargs.setdefault("max_attempts", 5)
    return AthenaQueryEngine(client, "audit", **kwargs)


class TestEngineConstruction:
    """Test suite for engine defaults."""

    @pytest.mark.parametrize("value", [None, 0, -10])
    def test_non_positive_values_use_defaults(self, value):
        engine = AthenaQueryEngine(
            FakeAthenaClient(), "audit", poll_interval_ms=value, max_attempts=value
        )

        assert engine.poll_interval_ms == 1000
        assert engine.max_attempts == 60

    @pytest.mark.parametrize("database", ["", "  ", None])
    def test_database_required(self, database):
        with pytest.raises(ValidationError):
            AthenaQueryEngine(FakeAthenaClient(), database)


class TestPolling:
    """Test suite for status polling."""

    @pytest.mark.asyncio
    async def test_submission_parameters(self):
        client = FakeAthenaClient()
        engine = make_engine(client, work_group="primary", output_location="s3://out/")

        await engine.execute("SELECT 1", first_cell)

        assert client.started == [
            {
                "sql": "SELECT 1",
                "database": "audit",
                "work_group": "primary",
                "output_location": "s3://out/",
            }
        ]

    @pytest.mark.asyncio
    async def test_waits_until_succeeded(self):
        client = FakeAthenaClient(statuses=[QUEUED, RUNNING, SUCCEEDED])

        await make_engine(client).execute("SELECT 1", first_cell)

        assert client.status_calls == 3

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "state", [QueryExecutionState.FAILED, QueryExecutionState.CANCELLED]
    )
    async def test_failed_states_raise(self, state):
        """Test FAILED and CANCELLED carry the backend reason."""
        client = FakeAthenaClient(
            statuses=[RUNNING, QueryStatus(state, "SYNTAX_ERROR: line 1:8")]
        )

        with pytest.raises(QueryExecutionFailedError) as exc_info:
            await make_engine(client).execute("SELECT", first_cell)

        assert exc_info.value.execution_id == "exec-1"
        assert exc_info.value.state == state.value
        assert exc_info.value.reason == "SYNTAX_ERROR: line 1:8"
        assert client.page_tokens == []

    @pytest.mark.asyncio
    async def test_timeout_after_max_attempts(self):
        """Test a query that never finishes is polled exactly max_attempts times."""
        client = FakeAthenaClient(statuses=[RUNNING])

        with pytest.raises(QueryTimeoutError) as exc_info:
            await make_engine(client, max_attempts=3).execute("SELECT 1", first_cell)

        assert client.status_calls == 3
        assert exc_info.value.attempts == 3
        assert exc_info.value.execution_id == "exec-1"

    @pytest.mark.asyncio
    async def test_succeeds_on_last_attempt(self):
        client = FakeAthenaClient(statuses=[RUNNING, RUNNING, SUCCEEDED])

        await make_engine(client, max_attempts=3).execute("SELECT 1", first_cell)

        assert client.status_calls == 3

    @pytest.mark.asyncio
    async def test_cancellation_while_waiting(self):
        """Test cancelling the awaiting task surfaces as an interruption."""
        # Arrange
        client = FakeAthenaClient(statuses=[RUNNING])
        engine = make_engine(client, poll_interval_ms=10_000, max_attempts=60)
        captured = {}

        async def run():
            try:
                await engine.execute("SELECT 1", first_cell)
            except QueryInterruptedError as e:
                captured["error"] = e

        task = asyncio.create_task(run())
        while client.status_calls == 0:
            await asyncio.sleep(0)

        # Act
        task.cancel()
        await task

        # Assert
        error = captured["error"]
        assert error.execution_id == "exec-1"
        assert isinstance(error.__cause__, asyncio.CancelledError)
        assert client.status_calls == 1


class TestPagination:
    """Test suite for result paging."""

    @pytest.mark.asyncio
    async def test_header_skipped_on_first_page_only(self):
        """Test three pages yield every row except the single header."""
        # Arrange
        client = FakeAthenaClient(
            pages=[
                ResultPage(rows=[["id"], ["r1"], ["r2"]], next_token="t1"),
                ResultPage(rows=[["r3"], ["r4"]], next_token="t2"),
                ResultPage(rows=[["r5"]]),
            ]
        )

        # Act
        results = await make_engine(client).execute("SELECT id", first_cell)

        # Assert
        assert list(results) == ["r1", "r2", "r3", "r4", "r5"]
        assert client.page_tokens == [None, "t1", "t2"]

    @pytest.mark.asyncio
    async def test_empty_rows_skipped(self):
        client = FakeAthenaClient(
            pages=[
                ResultPage(rows=[["id"], [], ["r1"], []], next_token="t1"),
                ResultPage(rows=[[], ["r2"]]),
            ]
        )

        results = await make_engine(client).execute("SELECT id", first_cell)

        assert list(results) == ["r1", "r2"]

    @pytest.mark.asyncio
    async def test_header_only(self):
        client = FakeAthenaClient(pages=[ResultPage(rows=[["id"]])])

        results = await make_engine(client).execute("SELECT id", first_cell)

        assert list(results) == []

    @pytest.mark.asyncio
    async def test_returns_single_pass_iterator(self):
        client = FakeAthenaClient(pages=[ResultPage(rows=[["id"], ["r1"]])])

        results = await make_engine(client).execute("SELECT id", first_cell)

        assert isinstance(results, Iterator)
        assert list(results) == ["r1"]
        assert list(results) == []

    @pytest.mark.asyncio
    async def test_decode_failure_aborts(self):
        """Test one bad row fails the whole query."""
        client = FakeAthenaClient(
            pages=[
                ResultPage(
                    rows=[
                        event_row(id="id", eventtype="eventtype"),
                        event_row(id="e-1", eventtype="LOGIN"),
                        event_row(id="e-2", eventtype="NOT_A_KIND"),
                    ]
                )
            ]
        )

        with pytest.raises(RowDecodeError):
            await make_engine(client).execute("SELECT", decode_event_row)

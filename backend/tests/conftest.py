"""
Shared fixtures for event store tests.
"""

import pytest

from eventstream.core.config import EventStoreSettings
from eventstream.core.infrastructure.unit_of_work import UnitOfWork

from tests.fakes import FakeAthenaClient, FakeFirehoseClient


@pytest.fixture
def settings():
    """Settings with a short poll interval."""
    return EventStoreSettings(
        firehose_enabled=True,
        athena_work_group="primary",
        athena_output_location="s3://query-results/",
        athena_query_poll_interval_millis=1,
        athena_query_max_attempts=5,
    )


@pytest.fixture
def unit_of_work():
    """Unit of work without a database session."""
    return UnitOfWork()


@pytest.fixture
def firehose():
    return FakeFirehoseClient()


@pytest.fixture
def athena():
    return FakeAthenaClient()

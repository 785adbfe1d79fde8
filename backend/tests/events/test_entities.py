"""
Tests for event store domain entities.
"""

from datetime import UTC, datetime, timedelta, timezone

import pytest

from eventstream.modules.events.domain.entities import (
    AdminEvent,
    AuthDetails,
    Event,
    ResourceKind,
)
from eventstream.modules.events.domain.entities.event_filter import (
    normalize_first_result,
    normalize_max_results,
    to_epoch_millis,
    unique_members,
)
from eventstream.modules.events.domain.enums import (
    EventType,
    QueryExecutionState,
    ResourceType,
)


class TestEvent:
    """Test suite for Event."""

    def test_details_are_read_only(self):
        event = Event(id="e-1", details={"k": "v"})

        with pytest.raises(TypeError):
            event.details["k"] = "changed"

    def test_details_default_to_empty(self):
        assert dict(Event(details=None).details) == {}

    def test_details_are_copied(self):
        details = {"k": "v"}
        event = Event(details=details)

        details["k"] = "changed"

        assert event.details["k"] == "v"

    def test_error_kinds(self):
        assert EventType.LOGIN_ERROR.is_error is True
        assert EventType.LOGIN.is_error is False


class TestResourceKind:
    """Test suite for ResourceKind."""

    def test_parse_known(self):
        kind = ResourceKind.parse("CLIENT")

        assert kind.is_known is True
        assert kind.known is ResourceType.CLIENT
        assert str(kind) == "CLIENT"

    def test_parse_unknown_keeps_raw(self):
        kind = ResourceKind.parse("SOMETHING_NEW")

        assert kind.is_known is False
        assert kind.raw == "SOMETHING_NEW"
        assert kind.name == "SOMETHING_NEW"

    def test_requires_exactly_one_value(self):
        with pytest.raises(ValueError):
            ResourceKind()
        with pytest.raises(ValueError):
            ResourceKind(known=ResourceType.USER, raw="USER")

    def test_admin_event_resource_type(self):
        known = AdminEvent(resource_kind=ResourceKind.of(ResourceType.GROUP))
        unknown = AdminEvent(resource_kind=ResourceKind.parse("NEW_KIND"))

        assert known.resource_type is ResourceType.GROUP
        assert unknown.resource_type is None
        assert unknown.resource_type_name == "NEW_KIND"
        assert AdminEvent().resource_type_name is None


class TestAuthDetails:
    """Test suite for AuthDetails."""

    def test_all_empty_is_none(self):
        assert AuthDetails.from_fields() is None

    def test_any_field_creates_details(self):
        details = AuthDetails.from_fields(ip_address="10.0.0.1")

        assert details == AuthDetails(ip_address="10.0.0.1")


class TestFilterHelpers:
    """Test suite for filter normalization helpers."""

    def test_epoch_millis_from_aware_datetime(self):
        moment = datetime(2024, 1, 1, 1, 0, tzinfo=timezone(timedelta(hours=1)))

        assert to_epoch_millis(moment) == 1704067200000

    def test_epoch_millis_naive_is_utc(self):
        assert to_epoch_millis(datetime(2024, 1, 1)) == to_epoch_millis(
            datetime(2024, 1, 1, tzinfo=UTC)
        )

    def test_epoch_millis_passthrough(self):
        assert to_epoch_millis(1234) == 1234

    @pytest.mark.parametrize(
        "value, expected", [(None, None), (-1, None), (0, 0), (25, 25)]
    )
    def test_first_result(self, value, expected):
        assert normalize_first_result(value) == expected

    @pytest.mark.parametrize(
        "value, expected", [(None, None), (-5, None), (0, None), (100, 100)]
    )
    def test_max_results(self, value, expected):
        assert normalize_max_results(value) == expected

    def test_unique_members(self):
        assert unique_members(("A",), ["B", None, "A", "C"]) == ("A", "B", "C")


class TestQueryExecutionState:
    def test_terminal_states(self):
        assert QueryExecutionState.SUCCEEDED.is_terminal
        assert QueryExecutionState.FAILED.is_terminal
        assert QueryExecutionState.CANCELLED.is_terminal
        assert not QueryExecutionState.RUNNING.is_terminal
        assert not QueryExecutionState.QUEUED.is_terminal

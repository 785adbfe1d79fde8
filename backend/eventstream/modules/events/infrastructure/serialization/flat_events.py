"""Flat record codec.

Events are written to Firehose as one JSON object per line. Nested values
are flattened: auth details become ``auth*`` columns and the details map is
serialized to a JSON string stored in ``detailsJson``, so the Athena tables
only ever hold scalar columns.
"""

from collections.abc import Mapping

from pydantic import BaseModel, ConfigDict, TypeAdapter
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel

from eventstream.modules.events.domain.entities import AdminEvent, Event
from eventstream.modules.events.domain.errors import (
    DetailsSerializationError,
    FlatEventSerializationError,
)

_DETAILS_ADAPTER = TypeAdapter(dict[str, str])

RECORD_SEPARATOR = "\n"


class _FlatRecord(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, frozen=True
    )

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True)


class FlatEvent(_FlatRecord):
    """Flat form of an end-user event."""

    id: str | None = None
    time: int | None = None
    event_type: str | None = None
    realm_id: str | None = None
    realm_name: str | None = None
    client_id: str | None = None
    user_id: str | None = None
    session_id: str | None = None
    ip_address: str | None = None
    error: str | None = None
    details_json: str | None = None

    @classmethod
    def from_event(cls, event: Event) -> "FlatEvent":
        return cls(
            id=event.id,
            time=event.time,
            event_type=event.type.value if event.type else None,
            realm_id=event.realm_id,
            realm_name=event.realm_name,
            client_id=event.client_id,
            user_id=event.user_id,
            session_id=event.session_id,
            ip_address=event.ip_address,
            error=event.error,
            details_json=serialize_details(event.details),
        )


class FlatAdminEvent(_FlatRecord):
    """Flat form of an administrative event."""

    id: str | None = None
    time: int | None = None
    realm_id: str | None = None
    realm_name: str | None = None
    operation_type: str | None = None
    resource_type: str | None = None
    resource_path: str | None = None
    representation: str | None = None
    error: str | None = None
    auth_realm_id: str | None = None
    auth_realm_name: str | None = None
    auth_client_id: str | None = None
    auth_user_id: str | None = None
    auth_ip_address: str | None = None
    details_json: str | None = None

    @classmethod
    def from_admin_event(
        cls, admin_event: AdminEvent, include_representation: bool = True
    ) -> "FlatAdminEvent":
        auth = admin_event.auth_details
        return cls(
            id=admin_event.id,
            time=admin_event.time,
            realm_id=admin_event.realm_id,
            realm_name=admin_event.realm_name,
            operation_type=(
                admin_event.operation_type.value if admin_event.operation_type else None
            ),
            resource_type=admin_event.resource_type_name,
            resource_path=admin_event.resource_path,
            representation=(
                admin_event.representation if include_representation else None
            ),
            error=admin_event.error,
            auth_realm_id=auth.realm_id if auth else None,
            auth_realm_name=auth.realm_name if auth else None,
            auth_client_id=auth.client_id if auth else None,
            auth_user_id=auth.user_id if auth else None,
            auth_ip_address=auth.ip_address if auth else None,
            details_json=serialize_details(admin_event.details),
        )


def serialize_details(details: Mapping[str, str] | None) -> str | None:
    """
    Serialize a details map to JSON text.

    Raises:
        FlatEventSerializationError: If a key or value is not a string
    """
    if details is None:
        return None
    try:
        validated = _DETAILS_ADAPTER.validate_python(dict(details), strict=True)
    except PydanticValidationError as e:
        raise FlatEventSerializationError(
            f"Unable to serialize event details: {e.error_count()} invalid entries",
            constraint="details",
            cause=e,
        )
    return _DETAILS_ADAPTER.dump_json(validated).decode("utf-8")


def deserialize_details(details_json: str | None) -> dict[str, str] | None:
    """
    Parse a ``detailsJson`` cell back into a details map.

    Returns ``None`` for an absent or blank cell.

    Raises:
        DetailsSerializationError: If the text is not a flat string-to-string object
    """
    if details_json is None or not details_json.strip():
        return None
    try:
        return _DETAILS_ADAPTER.validate_json(details_json, strict=True)
    except PydanticValidationError as e:
        raise DetailsSerializationError(
            "Unable to deserialize event details",
            column="detailsjson",
            value=details_json,
            cause=e,
        )


def flatten_event(event: Event) -> str:
    """One-line JSON text for an end-user event."""
    return FlatEvent.from_event(event).to_json()


def flatten_admin_event(
    admin_event: AdminEvent, include_representation: bool = True
) -> str:
    """One-line JSON text for an administrative event."""
    flat = FlatAdminEvent.from_admin_event(admin_event, include_representation)
    return flat.to_json()


def encode_record(line: str) -> bytes:
    """Newline-terminated UTF-8 bytes, the unit put onto a delivery stream."""
    return (line + RECORD_SEPARATOR).encode("utf-8")

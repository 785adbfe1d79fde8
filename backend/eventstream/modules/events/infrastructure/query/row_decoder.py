"""Decoders from Athena result rows to event entities.

Athena returns every cell as text. Cells are looked up by column name via
the schema index, so decoders stay correct as long as the compiler selects
the columns listed in ``schema``.
"""

import re
from collections.abc import Mapping, Sequence
from enum import Enum
from typing import TypeVar

from eventstream.modules.events.domain.entities import (
    AdminEvent,
    AuthDetails,
    Event,
    ResourceKind,
)
from eventstream.modules.events.domain.enums import EventType, OperationType
from eventstream.modules.events.domain.errors import RowDecodeError
from eventstream.modules.events.infrastructure.query.schema import (
    ADMIN_EVENT_COLUMN_INDEX,
    EVENT_COLUMN_INDEX,
)
from eventstream.modules.events.infrastructure.serialization import deserialize_details

E = TypeVar("E", bound=Enum)

Row = Sequence[str | None]

_EPOCH_MILLIS = re.compile(r"[+-]?[0-9]+")


def _cell(row: Row, index: Mapping[str, int], column: str) -> str | None:
    position = index.get(column)
    if position is None or position >= len(row):
        return None
    value = row[position]
    if value is None or not value.strip():
        return None
    return value


def _parse_time(value: str | None) -> int | None:
    if value is None:
        return None
    text = value.strip()
    if not _EPOCH_MILLIS.fullmatch(text):
        raise RowDecodeError(
            f"Invalid event time: {value!r}", column="time", value=value
        )
    return int(text)


def _parse_enum(enum_cls: type[E], column: str, value: str | None) -> E | None:
    if value is None:
        return None
    try:
        return enum_cls(value)
    except ValueError as e:
        raise RowDecodeError(
            f"Unknown {enum_cls.__name__}: {value!r}",
            column=column,
            value=value,
            cause=e,
        )


def decode_event_row(row: Row) -> Event:
    """Decode one user-events row."""

    def cell(column: str) -> str | None:
        return _cell(row, EVENT_COLUMN_INDEX, column)

    return Event(
        id=cell("id"),
        type=_parse_enum(EventType, "eventtype", cell("eventtype")),
        realm_id=cell("realmid"),
        realm_name=cell("realmname"),
        client_id=cell("clientid"),
        user_id=cell("userid"),
        session_id=cell("sessionid"),
        ip_address=cell("ipaddress"),
        error=cell("error"),
        time=_parse_time(cell("time")),
        details=deserialize_details(cell("detailsjson")),
    )


def decode_admin_event_row(row: Row) -> AdminEvent:
    """Decode one admin-events row.

    Unknown resource types are kept as raw text rather than failing the row.
    """

    def cell(column: str) -> str | None:
        return _cell(row, ADMIN_EVENT_COLUMN_INDEX, column)

    resource_type = cell("resourcetype")
    return AdminEvent(
        id=cell("id"),
        time=_parse_time(cell("time")),
        realm_id=cell("realmid"),
        realm_name=cell("realmname"),
        operation_type=_parse_enum(
            OperationType, "operationtype", cell("operationtype")
        ),
        resource_kind=ResourceKind.parse(resource_type) if resource_type else None,
        resource_path=cell("resourcepath"),
        representation=cell("representation"),
        error=cell("error"),
        auth_details=AuthDetails.from_fields(
            realm_id=cell("authrealmid"),
            realm_name=cell("authrealmname"),
            client_id=cell("authclientid"),
            user_id=cell("authuserid"),
            ip_address=cell("authipaddress"),
        ),
        details=deserialize_details(cell("detailsjson")),
    )

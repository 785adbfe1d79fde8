from .flat_events import (
    FlatAdminEvent,
    FlatEvent,
    deserialize_details,
    encode_record,
    flatten_admin_event,
    flatten_event,
    serialize_details,
)

__all__ = [
    "FlatAdminEvent",
    "FlatEvent",
    "deserialize_details",
    "encode_record",
    "flatten_admin_event",
    "flatten_event",
    "serialize_details",
]

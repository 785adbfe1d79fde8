"""End-user event entity."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from eventstream.modules.events.domain.enums import EventType


def freeze_details(details: Mapping[str, str] | None) -> Mapping[str, str]:
    """Read-only copy of a details map; ``None`` becomes an empty map."""
    return MappingProxyType(dict(details or {}))


@dataclass(frozen=True)
class Event:
    """
    A single end-user occurrence (login, logout, token refresh, ...).

    Attributes:
        id: Event identifier
        type: Event kind
        realm_id: Realm the event happened in
        realm_name: Human readable realm name
        client_id: Client that triggered the event
        user_id: User the event is about
        session_id: User session the event belongs to
        ip_address: Source address of the request
        error: Error code for ``*_ERROR`` kinds
        time: Occurrence time in epoch milliseconds
        details: Free-form string details
    """

    id: str | None = None
    type: EventType | None = None
    realm_id: str | None = None
    realm_name: str | None = None
    client_id: str | None = None
    user_id: str | None = None
    session_id: str | None = None
    ip_address: str | None = None
    error: str | None = None
    time: int | None = None
    details: Mapping[str, str] = field(default_factory=dict, hash=False)

    def __post_init__(self):
        object.__setattr__(self, "details", freeze_details(self.details))

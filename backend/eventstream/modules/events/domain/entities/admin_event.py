"""Administrative event entity.

Resource kinds are stored as text and the platform adds new kinds over
time, so ``ResourceKind`` keeps unknown values as raw strings instead of
rejecting the row.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field

from eventstream.modules.events.domain.entities.event import freeze_details
from eventstream.modules.events.domain.enums import OperationType, ResourceType


@dataclass(frozen=True)
class ResourceKind:
    """Either a known ``ResourceType`` or the raw text of an unknown one."""

    known: ResourceType | None = None
    raw: str | None = None

    def __post_init__(self):
        if (self.known is None) == (self.raw is None):
            raise ValueError("ResourceKind needs exactly one of known or raw")

    @classmethod
    def of(cls, resource_type: ResourceType) -> "ResourceKind":
        return cls(known=resource_type)

    @classmethod
    def parse(cls, value: str) -> "ResourceKind":
        try:
            return cls(known=ResourceType(value))
        except ValueError:
            return cls(raw=value)

    @property
    def is_known(self) -> bool:
        return self.known is not None

    @property
    def name(self) -> str:
        return self.known.value if self.known is not None else self.raw

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class AuthDetails:
    """Who performed an administrative operation."""

    realm_id: str | None = None
    realm_name: str | None = None
    client_id: str | None = None
    user_id: str | None = None
    ip_address: str | None = None

    @classmethod
    def from_fields(
        cls,
        realm_id: str | None = None,
        realm_name: str | None = None,
        client_id: str | None = None,
        user_id: str | None = None,
        ip_address: str | None = None,
    ) -> "AuthDetails | None":
        """Build auth details, or ``None`` when every field is empty."""
        if all(
            value is None
            for value in (realm_id, realm_name, client_id, user_id, ip_address)
        ):
            return None
        return cls(realm_id, realm_name, client_id, user_id, ip_address)


@dataclass(frozen=True)
class AdminEvent:
    """
    A single administrative operation on a realm resource.

    Attributes:
        id: Event identifier
        time: Occurrence time in epoch milliseconds
        realm_id: Realm the operation happened in
        realm_name: Human readable realm name
        operation_type: CREATE / UPDATE / DELETE / ACTION
        resource_kind: Kind of resource touched, known or raw
        resource_path: Path of the resource within the realm
        representation: Opaque serialized body of the resource
        error: Error code if the operation failed
        auth_details: Caller identity, if any part of it is known
        details: Free-form string details
    """

    id: str | None = None
    time: int | None = None
    realm_id: str | None = None
    realm_name: str | None = None
    operation_type: OperationType | None = None
    resource_kind: ResourceKind | None = None
    resource_path: str | None = None
    representation: str | None = None
    error: str | None = None
    auth_details: AuthDetails | None = None
    details: Mapping[str, str] = field(default_factory=dict, hash=False)

    def __post_init__(self):
        object.__setattr__(self, "details", freeze_details(self.details))

    @property
    def resource_type(self) -> ResourceType | None:
        """The known resource type, ``None`` if absent or not recognised."""
        return self.resource_kind.known if self.resource_kind else None

    @property
    def resource_type_name(self) -> str | None:
        return self.resource_kind.name if self.resource_kind else None

from .admin_event import AdminEvent, AuthDetails, ResourceKind
from .event import Event
from .event_filter import AdminEventFilter, EventFilter

__all__ = [
    "AdminEvent",
    "AdminEventFilter",
    "AuthDetails",
    "Event",
    "EventFilter",
    "ResourceKind",
]

"""Event store application services."""

from .event_store_service import EventStoreProvider

__all__ = ["EventStoreProvider"]

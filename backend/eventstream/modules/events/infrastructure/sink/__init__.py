from .transactional_event_sink import TransactionalEventSink

__all__ = ["TransactionalEventSink"]

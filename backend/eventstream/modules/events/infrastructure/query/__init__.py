"""Athena-backed event queries."""

from .admin_event_query import AdminEventQuery, compile_admin_event_query
from .event_query import EventQuery, compile_event_query
from .query_engine import AthenaQueryEngine
from .row_decoder import decode_admin_event_row, decode_event_row
from .schema import ADMIN_EVENT_COLUMNS, EVENT_COLUMNS
from .sql_builder import SqlQueryBuilder, quote_literal

__all__ = [
    "ADMIN_EVENT_COLUMNS",
    "EVENT_COLUMNS",
    "AdminEventQuery",
    "AthenaQueryEngine",
    "EventQuery",
    "SqlQueryBuilder",
    "compile_admin_event_query",
    "compile_event_query",
    "decode_admin_event_row",
    "decode_event_row",
    "quote_literal",
]

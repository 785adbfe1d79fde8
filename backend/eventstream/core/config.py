"""Application configuration management.

Settings are resolved once at startup, either from the process environment
(``EVENTSTREAM_`` prefix) or from any string mapping supplied by the host
platform's own configuration scope. Numeric options are parsed leniently:
an invalid value is logged and replaced by its default rather than aborting
startup.
"""

import os
from collections.abc import Mapping
from dataclasses import asdict, dataclass
from functools import lru_cache
from typing import Any

from eventstream.core.logging import get_logger

ENV_PREFIX = "EVENTSTREAM_"

DEFAULT_USER_EVENTS_STREAM = "keycloak-events-user-events"
DEFAULT_ADMIN_EVENTS_STREAM = "keycloak-events-admin-events"
DEFAULT_DATABASE = "keycloak-events"
DEFAULT_USER_EVENTS_TABLE = "keycloak-events-user-events"
DEFAULT_ADMIN_EVENTS_TABLE = "keycloak-events-admin-events"
DEFAULT_POLL_INTERVAL_MILLIS = 1000
DEFAULT_MAX_ATTEMPTS = 60

_TRUE_VALUES = {"true", "1", "yes", "on"}

logger = get_logger(__name__)


class EnvironmentLoader:
    """Typed reads over a string mapping, with blank values treated as unset."""

    def __init__(self, values: Mapping[str, str], prefix: str = ""):
        self._values = values
        self._prefix = prefix

    def get_str(self, key: str, default: str | None = None) -> str | None:
        value = self._values.get(f"{self._prefix}{key}")
        if value is None or not str(value).strip():
            return default
        return str(value).strip()

    def get_int(self, key: str, default: int) -> int:
        value = self.get_str(key)
        if value is None:
            return default
        try:
            return int(value)
        except ValueError:
            logger.warning(
                "Invalid numeric configuration",
                key=self._prefix + key,
                value=value,
            )
            return default

    def get_bool(self, key: str, default: bool = False) -> bool:
        value = self.get_str(key)
        if value is None:
            return default
        return value.lower() in _TRUE_VALUES


@dataclass(frozen=True)
class EventStoreSettings:
    """
    Settings for the Firehose-backed event store.

    Attributes:
        firehose_enabled: Whether the provider should be activated at all
        firehose_user_events_stream: Delivery stream for end-user events
        firehose_admin_events_stream: Delivery stream for admin events
        athena_database: Athena database holding both tables
        athena_user_events_table: Table queried for end-user events
        athena_admin_events_table: Table queried for admin events
        athena_work_group: Optional Athena work group
        athena_output_location: Optional S3 location for query results
        athena_query_poll_interval_millis: Delay between status polls
        athena_query_max_attempts: Status polls before giving up
        aws_profile: Optional named credentials profile
        aws_region: Optional AWS region
    """

    firehose_enabled: bool = False
    firehose_user_events_stream: str = DEFAULT_USER_EVENTS_STREAM
    firehose_admin_events_stream: str = DEFAULT_ADMIN_EVENTS_STREAM
    athena_database: str = DEFAULT_DATABASE
    athena_user_events_table: str = DEFAULT_USER_EVENTS_TABLE
    athena_admin_events_table: str = DEFAULT_ADMIN_EVENTS_TABLE
    athena_work_group: str | None = None
    athena_output_location: str | None = None
    athena_query_poll_interval_millis: int = DEFAULT_POLL_INTERVAL_MILLIS
    athena_query_max_attempts: int = DEFAULT_MAX_ATTEMPTS
    aws_profile: str | None = None
    aws_region: str | None = None

    @classmethod
    def from_mapping(
        cls, values: Mapping[str, str], prefix: str = ""
    ) -> "EventStoreSettings":
        """
        Build settings from a string mapping.

        Args:
            values: Raw option values keyed by upper snake-case name
            prefix: Prefix prepended to every key before lookup

        Returns:
            EventStoreSettings with defaults for every missing option
        """
        env = EnvironmentLoader(values, prefix)
        return cls(
            firehose_enabled=env.get_bool("FIREHOSE_ENABLED", False),
            firehose_user_events_stream=env.get_str(
                "FIREHOSE_USER_EVENTS_STREAM", DEFAULT_USER_EVENTS_STREAM
            ),
            firehose_admin_events_stream=env.get_str(
                "FIREHOSE_ADMIN_EVENTS_STREAM", DEFAULT_ADMIN_EVENTS_STREAM
            ),
            athena_database=env.get_str("ATHENA_DATABASE", DEFAULT_DATABASE),
            athena_user_events_table=env.get_str(
                "ATHENA_USER_EVENTS_TABLE", DEFAULT_USER_EVENTS_TABLE
            ),
            athena_admin_events_table=env.get_str(
                "ATHENA_ADMIN_EVENTS_TABLE", DEFAULT_ADMIN_EVENTS_TABLE
            ),
            athena_work_group=env.get_str("ATHENA_WORK_GROUP"),
            athena_output_location=env.get_str("ATHENA_OUTPUT_LOCATION"),
            athena_query_poll_interval_millis=env.get_int(
                "ATHENA_QUERY_POLL_INTERVAL_MILLIS", DEFAULT_POLL_INTERVAL_MILLIS
            ),
            athena_query_max_attempts=env.get_int(
                "ATHENA_QUERY_MAX_ATTEMPTS", DEFAULT_MAX_ATTEMPTS
            ),
            aws_profile=env.get_str("AWS_PROFILE"),
            aws_region=env.get_str("AWS_REGION"),
        )

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "EventStoreSettings":
        """Build settings from ``EVENTSTREAM_*`` environment variables."""
        return cls.from_mapping(
            os.environ if environ is None else environ, prefix=ENV_PREFIX
        )

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@lru_cache
def get_settings() -> EventStoreSettings:
    """Process-wide settings, read from the environment on first use."""
    return EventStoreSettings.from_env()

"""Kinesis Data Firehose adapter.

Wraps a long-lived aioboto3 ``firehose`` client. The client is shared by
every provider in the process; each call is independent.
"""

from typing import Any

from botocore.exceptions import BotoCoreError, ClientError

from eventstream.core.logging import get_logger
from eventstream.modules.events.domain.errors import DeliveryError

logger = get_logger(__name__)


class FirehoseDeliveryClient:
    """Puts single records onto named delivery streams."""

    def __init__(self, client: Any):
        """
        Initialize the adapter.

        Args:
            client: An entered aioboto3 ``firehose`` client
        """
        self._client = client

    async def put_record(self, stream: str, data: bytes) -> str | None:
        """
        Put one record onto ``stream``.

        Args:
            stream: Delivery stream name
            data: Record payload

        Returns:
            The record id assigned by Firehose

        Raises:
            DeliveryError: If Firehose rejects the record or cannot be reached
        """
        logger.debug("Delivering record", stream=stream, size=len(data))
        try:
            response = await self._client.put_record(
                DeliveryStreamName=stream,
                Record={"Data": data},
            )
        except ClientError as e:
            error_code = e.response.get("Error", {}).get("Code")
            raise DeliveryError(
                stream, str(e), service_error_code=error_code, cause=e
            )
        except BotoCoreError as e:
            raise DeliveryError(stream, str(e), cause=e)

        return response.get("RecordId")

"""
SQS client for document notifications.

Dependencies: boto3
System role: Queue client used by the notification dispatcher
"""

from typing import Any

import boto3
from botocore.config import Config


class SQSNotificationClient:
    """Sends serialized notifications to one SQS queue."""

    def __init__(
        self,
        queue_url: str,
        region: str = "us-east-1",
        timeout: float = 10.0,
        client: Any | None = None,
    ) -> None:
        """
        Initialize SQS client bound to a queue.

        Args:
            queue_url: URL of the notification queue
            region: AWS region of the queue
            timeout: Connect and read timeout in seconds
            client: Pre-built boto3 SQS client (tests, custom endpoints)
        """
        self._queue_url = queue_url
        self._sqs_client = client or boto3.client(
            "sqs",
            region_name=region,
            config=Config(
                connect_timeout=timeout,
                read_timeout=timeout,
                retries={"max_attempts": 1, "mode": "standard"},
            ),
        )

    @property
    def queue_url(self) -> str:
        return self._queue_url

    def send(
        self,
        payload: str,
        attributes: dict[str, str] | None = None,
        queue_url: str | None = None,
    ) -> str | None:
        """
        Send one message.

        Args:
            payload: Serialized message body
            attributes: String message attributes
            queue_url: Override for the bound queue

        Returns:
            str | None: SQS MessageId, None if the response carried none

        Raises:
            ClientError: SQS rejected the request
            BotoCoreError: Transport-level failure
        """
        message_attributes = {
            name: {"DataType": "String", "StringValue": value}
            for name, value in (attributes or {}).items()
            if value
        }
        response = self._sqs_client.send_message(
            QueueUrl=queue_url or self._queue_url,
            MessageBody=payload,
            MessageAttributes=message_attributes,
        )
        return response.get("MessageId")

"""
Notification dispatcher.

Serializes a notification and enqueues it, classifying failures as
transient or permanent.

Dependencies: botocore, document_service.boundary.aws
System role: Fourth stage of the ingestion flow
"""

import logging

from document_service.boundary.aws.sqs_client import SQSNotificationClient
from document_service.core.exceptions import MessagingError
from document_service.core.ingestion.error_classification import AwsError, messaging_error_from
from document_service.models.document import MessageHandle, Notification

logger = logging.getLogger(__name__)


class NotificationDispatcher:
    """Sends document notifications to the queue."""

    def __init__(self, sqs_client: SQSNotificationClient) -> None:
        self._sqs_client = sqs_client

    def dispatch(self, notification: Notification, queue_url: str | None = None) -> MessageHandle:
        """
        Enqueue a notification.

        Args:
            notification: Notification referencing a stored document
            queue_url: Target queue, defaults to the client's queue

        Returns:
            MessageHandle: Message id assigned by the queue

        Raises:
            MessagingError: Send failed; ``transient`` tells whether a retry may help
        """
        target = queue_url or self._sqs_client.queue_url
        try:
            message_id = self._sqs_client.send(
                notification.model_dump_json(),
                attributes={
                    "correlation_id": notification.correlation_id,
                    "storage_key": notification.storage_key,
                },
                queue_url=target,
            )
        except AwsError as e:
            error = messaging_error_from(e)
            logger.warning(
                f"{__name__}:dispatch - {error.error_code}",
                extra={
                    "correlation_id": notification.correlation_id,
                    "s3_key": notification.storage_key,
                    "transient": error.transient,
                },
            )
            raise error from e

        if not message_id:
            raise MessagingError("Queue response carried no MessageId", transient=True)

        logger.info(
            f"{__name__}:dispatch - Notification enqueued",
            extra={
                "correlation_id": notification.correlation_id,
                "s3_key": notification.storage_key,
                "message_id": message_id,
            },
        )
        return MessageHandle(message_id=message_id, queue_url=target)

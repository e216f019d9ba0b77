"""
Orphan reconciliation.

An orphan is a document stored without a delivered notification. The
coordinator records the undelivered notification in the dead-letter bucket;
the sweeper later re-dispatches those records and removes each one once the
queue has accepted it.

Dependencies: pydantic, botocore, document_service.boundary.aws
System role: Dead-letter path for the at-least-once notification contract
"""

import hashlib
import json
import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timezone

from pydantic import BaseModel, ValidationError

from document_service.boundary.aws.s3_client import S3DocumentClient
from document_service.core.exceptions import MessagingError
from document_service.core.ingestion.attribute_resolver import sanitize_segment
from document_service.core.ingestion.config import IngestionConfig
from document_service.core.ingestion.error_classification import AwsError, storage_error_from
from document_service.core.ingestion.notification_dispatcher import NotificationDispatcher
from document_service.core.ingestion.storage_uploader import StorageUploader
from document_service.models.document import Notification

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class DeadLetterRecord(BaseModel):
    """Notification that could not be enqueued, kept for re-dispatch."""

    notification: Notification
    reason: str
    recorded_at: datetime


def dead_letter_key(config: IngestionConfig, correlation_id: str, storage_key: str) -> str:
    """
    Key of the dead-letter record for one stored document.

    Records of different documents never collide, even when callers reuse
    a correlation ID.

    Args:
        config: Supplies dead_letter_prefix
        correlation_id: Caller trace id, reduced to a path-safe segment
        storage_key: Key of the orphaned document

    Returns:
        str: "{prefix}/{correlation_id}-{sha256(storage_key)[:16]}.json"
    """
    digest = hashlib.sha256(storage_key.encode("utf-8")).hexdigest()[:16]
    name = f"{sanitize_segment(correlation_id)[:64] or 'orphan'}-{digest}.json"
    prefix = config.dead_letter_prefix.strip("/")
    return f"{prefix}/{name}" if prefix else name


def quarantine_prefix(config: IngestionConfig) -> str:
    """Prefix unreadable dead-letter records are moved under."""
    prefix = config.dead_letter_prefix.strip("/")
    return f"{prefix}-invalid/" if prefix else "invalid/"


class DeadLetterRecorder:
    """Writes orphaned notifications to the dead-letter bucket."""

    def __init__(
        self,
        uploader: StorageUploader,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._uploader = uploader
        self._clock = clock

    def record(self, notification: Notification, config: IngestionConfig, reason: str) -> str:
        """
        Persist a dead-letter record.

        Args:
            notification: Notification that was not delivered
            config: Supplies dead_letter_bucket and dead_letter_prefix
            reason: Reason code of the failed dispatch

        Returns:
            str: Key of the dead-letter record

        Raises:
            ValueError: No dead-letter bucket configured
            StorageError: Record write failed
        """
        if not config.dead_letter_bucket:
            raise ValueError("dead_letter_bucket is not configured")

        record = DeadLetterRecord(
            notification=notification,
            reason=reason,
            recorded_at=self._clock(),
        )
        key = dead_letter_key(config, notification.correlation_id, notification.storage_key)
        self._uploader.upload(
            bucket=config.dead_letter_bucket,
            key=key,
            content=record.model_dump_json().encode("utf-8"),
            attributes={
                "correlation-id": notification.correlation_id,
                "reason": reason,
            },
            content_type="application/json",
        )
        logger.info(
            f"{__name__}:record - Orphan dead-lettered",
            extra={
                "correlation_id": notification.correlation_id,
                "s3_key": notification.storage_key,
                "dead_letter_key": key,
            },
        )
        return key


@dataclass
class SweepReport:
    """Counters for one reconciliation sweep."""

    scanned: int = 0
    redispatched: int = 0
    stale: int = 0
    failed: int = 0
    invalid: int = 0


class OrphanSweeper:
    """Re-dispatches dead-lettered notifications."""

    def __init__(self, s3_client: S3DocumentClient, dispatcher: NotificationDispatcher) -> None:
        self._s3_client = s3_client
        self._dispatcher = dispatcher

    def sweep(self, config: IngestionConfig, limit: int | None = None) -> SweepReport:
        """
        Process dead-letter records once.

        A record whose document no longer exists is stale and deleted. A
        record that re-dispatches is deleted. Records that fail to dispatch
        are kept for the next sweep. Records that cannot be parsed are moved
        under the quarantine prefix so they stop occupying the batch.

        Args:
            config: Supplies dead-letter bucket/prefix and the notify queue
            limit: Maximum records to process

        Returns:
            SweepReport: What happened to each scanned record

        Raises:
            StorageError: Listing the dead-letter bucket failed
        """
        report = SweepReport()
        if not config.dead_letter_bucket:
            logger.warning(f"{__name__}:sweep - No dead-letter bucket configured")
            return report

        bucket = config.dead_letter_bucket
        prefix = config.dead_letter_prefix.strip("/")
        try:
            quarantine = quarantine_prefix(config)
            keys = [
                key
                for key in self._s3_client.list_keys(bucket, f"{prefix}/" if prefix else "")
                if not key.startswith(quarantine)
            ]
        except AwsError as e:
            raise storage_error_from(e, "list") from e

        for key in keys[:limit] if limit is not None else keys:
            report.scanned += 1
            self._process(bucket, key, config, report)

        logger.info(
            f"{__name__}:sweep - Sweep finished",
            extra={
                "scanned": report.scanned,
                "redispatched": report.redispatched,
                "stale": report.stale,
                "failed": report.failed,
                "invalid": report.invalid,
            },
        )
        return report

    def _process(self, bucket: str, key: str, config: IngestionConfig, report: SweepReport) -> None:
        try:
            body = self._s3_client.get(bucket, key)
        except AwsError as e:
            logger.error(f"{__name__}:_process - Could not read {key}: {e}")
            report.failed += 1
            return

        try:
            record = DeadLetterRecord.model_validate_json(body)
        except (ValidationError, json.JSONDecodeError, UnicodeDecodeError) as e:
            logger.error(f"{__name__}:_process - Unreadable record {key}: {e}")
            report.invalid += 1
            self._quarantine(bucket, key, body, config)
            return

        notification = record.notification
        try:
            exists = self._s3_client.file_exists(notification.bucket, notification.storage_key)
        except AwsError as e:
            logger.error(f"{__name__}:_process - Could not check {notification.storage_key}: {e}")
            report.failed += 1
            return

        if not exists:
            logger.warning(
                f"{__name__}:_process - Document gone, dropping stale record",
                extra={"correlation_id": notification.correlation_id, "s3_key": notification.storage_key},
            )
            if self._delete_record(bucket, key):
                report.stale += 1
            else:
                report.failed += 1
            return

        try:
            self._dispatcher.dispatch(notification, queue_url=config.notify_queue)
        except MessagingError as e:
            logger.warning(
                f"{__name__}:_process - Re-dispatch failed",
                extra={"correlation_id": notification.correlation_id, "error_code": e.error_code},
            )
            report.failed += 1
            return

        # A record that survives here is sent again by the next sweep.
        self._delete_record(bucket, key)
        report.redispatched += 1

    def _quarantine(self, bucket: str, key: str, body: bytes, config: IngestionConfig) -> None:
        prefix = config.dead_letter_prefix.strip("/")
        relative = key[len(prefix) + 1 :] if prefix else key
        target = quarantine_prefix(config) + relative
        try:
            self._s3_client.put(
                bucket,
                target,
                body,
                {"quarantined-from": key},
                content_type="application/json",
            )
        except AwsError as e:
            logger.error(f"{__name__}:_quarantine - Could not move {key}: {e}")
            return
        if self._delete_record(bucket, key):
            logger.warning(
                f"{__name__}:_quarantine - Unreadable record moved",
                extra={"dead_letter_key": key, "quarantine_key": target},
            )

    def _delete_record(self, bucket: str, key: str) -> bool:
        try:
            self._s3_client.delete(bucket, key)
        except AwsError as e:
            logger.error(f"{__name__}:_delete_record - Could not delete {key}: {e}")
            return False
        return True

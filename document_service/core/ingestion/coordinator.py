"""
Ingestion coordinator.

Orchestrates one submission: resolve attributes, derive the key, upload,
then dispatch the notification. Transient failures are retried with
tenacity; permanent failures and exhausted retries end in a terminal
SubmissionOutcome. A document stored without a delivered notification
(an orphan) is routed to the reconciliation path and reported as
partial_success, never as accepted or as a plain failure.

States: Start -> Uploading -> Uploaded -> Dispatching -> Done

Dependencies: tenacity, document_service.core.ingestion
System role: Ingestion orchestration and partial-failure reconciliation
"""

import logging
import threading
import time
import uuid
from collections.abc import Callable
from datetime import datetime, timezone
from typing import TypeVar

from tenacity import (
    RetryCallState,
    Retrying,
    retry_if_exception,
    stop_after_attempt,
    stop_after_delay,
    stop_when_event_set,
    wait_exponential,
)

from document_service.core.exceptions import MessagingError, RemoteCallError, StorageError
from document_service.core.ingestion.attribute_resolver import resolve_attributes
from document_service.core.ingestion.config import IngestionConfig, ReconciliationPolicy
from document_service.core.ingestion.key_deriver import derive_storage_key
from document_service.core.ingestion.notification_dispatcher import NotificationDispatcher
from document_service.core.ingestion.reconciliation import DeadLetterRecorder
from document_service.core.ingestion.storage_uploader import StorageUploader
from document_service.models.document import MessageHandle, Notification, UploadDescriptor
from document_service.models.outcome import OutcomeStatus, ReasonCode, SubmissionOutcome
from document_service.models.submission import Submission

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _failure_reason(error: RemoteCallError, storage: bool, cancelled: bool) -> ReasonCode:
    if cancelled:
        return ReasonCode.CANCELLED
    if storage:
        return ReasonCode.STORAGE_RETRIES_EXHAUSTED if error.transient else ReasonCode.STORAGE_PERMANENT
    return ReasonCode.NOTIFY_RETRIES_EXHAUSTED if error.transient else ReasonCode.NOTIFY_PERMANENT


class IngestionCoordinator:
    """Stores a submission and announces it, reconciling partial failures."""

    def __init__(
        self,
        uploader: StorageUploader,
        dispatcher: NotificationDispatcher,
        dead_letter_recorder: DeadLetterRecorder | None = None,
        clock: Callable[[], datetime] = _utcnow,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        """
        Initialize coordinator with its collaborators.

        Args:
            uploader: Writes documents to the object store
            dispatcher: Sends notifications to the queue
            dead_letter_recorder: Records orphaned notifications; orphans are
                reported as unrecorded when absent
            clock: Source of the submission timestamp
            sleep: Backoff sleep, replaced in tests
        """
        self._uploader = uploader
        self._dispatcher = dispatcher
        self._dead_letter_recorder = dead_letter_recorder
        self._clock = clock
        self._sleep = sleep

    def submit(
        self,
        submission: Submission,
        config: IngestionConfig,
        correlation_id: str | None = None,
        cancel_event: threading.Event | None = None,
    ) -> SubmissionOutcome:
        """
        Ingest one submission.

        Args:
            submission: Document and metadata
            config: Buckets, queue, retry policy and timeouts for this call
            correlation_id: Trace id; generated when not supplied
            cancel_event: Set by the caller to abandon the invocation

        Returns:
            SubmissionOutcome: accepted, storage_failed, notify_failed or partial_success

        Raises:
            InvalidSubmissionError: Identity fields missing; no I/O was performed
        """
        correlation_id = correlation_id or str(uuid.uuid4())
        attributes = resolve_attributes(submission)
        key = derive_storage_key(submission, attributes, prefix=config.key_prefix)
        log_context = {"correlation_id": correlation_id, "s3_key": key, "bucket": config.bucket}

        logger.info(f"{__name__}:submit - Uploading", extra=log_context)

        if self._cancelled(cancel_event):
            return self._storage_failed(correlation_id, key, ReasonCode.CANCELLED, None)

        try:
            upload = self._call_with_retry(
                lambda: self._uploader.upload(
                    bucket=config.bucket,
                    key=key,
                    content=submission.content,
                    attributes=attributes,
                    content_type=attributes["content-type"],
                ),
                error_type=StorageError,
                retries=config.max_upload_retries,
                budget=config.upload_budget,
                config=config,
                cancel_event=cancel_event,
                operation="upload",
            )
        except StorageError as e:
            reason = _failure_reason(e, storage=True, cancelled=self._cancelled(cancel_event))
            logger.error(
                f"{__name__}:submit - Upload failed: {reason.value}",
                extra={**log_context, "error_code": e.error_code},
            )
            return self._storage_failed(correlation_id, key, reason, e)

        notification = Notification(
            correlation_id=correlation_id,
            storage_key=upload.key,
            bucket=upload.bucket,
            etag=upload.etag,
            version_id=upload.version_id,
            size_bytes=upload.size_bytes,
            attributes=attributes,
            submitted_at=self._clock(),
        )

        if self._cancelled(cancel_event):
            return self._handle_orphan(notification, upload, config, ReasonCode.CANCELLED, None)

        logger.info(f"{__name__}:submit - Dispatching", extra=log_context)
        try:
            handle = self._call_with_retry(
                lambda: self._dispatcher.dispatch(notification, queue_url=config.notify_queue),
                error_type=MessagingError,
                retries=config.max_dispatch_retries,
                budget=config.dispatch_budget,
                config=config,
                cancel_event=cancel_event,
                operation="dispatch",
            )
        except MessagingError as e:
            reason = _failure_reason(e, storage=False, cancelled=self._cancelled(cancel_event))
            return self._handle_orphan(notification, upload, config, reason, e)

        logger.info(
            f"{__name__}:submit - Accepted",
            extra={**log_context, "message_id": handle.message_id},
        )
        return self._accepted(notification, upload, handle)

    def _call_with_retry(
        self,
        call: Callable[[], T],
        error_type: type[RemoteCallError],
        retries: int,
        budget: float,
        config: IngestionConfig,
        cancel_event: threading.Event | None,
        operation: str,
    ) -> T:
        """Run ``call``, retrying transient ``error_type`` failures."""
        stop = stop_after_attempt(retries + 1) | stop_after_delay(budget)
        if cancel_event is not None:
            stop = stop | stop_when_event_set(cancel_event)

        def log_retry(retry_state: RetryCallState) -> None:
            exc = retry_state.outcome.exception() if retry_state.outcome else None
            logger.warning(
                f"{__name__}:{operation} - Retry {retry_state.attempt_number}/{retries} "
                f"after transient error: {exc}"
            )

        retrying = Retrying(
            retry=retry_if_exception(lambda e: isinstance(e, error_type) and e.transient),
            stop=stop,
            wait=wait_exponential(multiplier=config.retry_backoff, max=config.retry_backoff_max),
            sleep=self._sleep,
            before_sleep=log_retry,
            reraise=True,
        )
        return retrying(call)

    def _handle_orphan(
        self,
        notification: Notification,
        upload: UploadDescriptor,
        config: IngestionConfig,
        reason: ReasonCode,
        error: MessagingError | None,
    ) -> SubmissionOutcome:
        """Apply the reconciliation policy to a stored but unannounced document."""
        log_context = {
            "correlation_id": notification.correlation_id,
            "s3_key": upload.key,
            "reason_code": reason.value,
        }
        transient = bool(error and error.transient)
        detail = str(error) if error else "Invocation cancelled before dispatch"

        if config.reconciliation is ReconciliationPolicy.ROLLBACK and upload.version_id is None:
            # Identical submissions share this key
            logger.warning(
                f"{__name__}:_handle_orphan - Unversioned bucket, dead-lettering instead of rollback",
                extra=log_context,
            )
        elif config.reconciliation is ReconciliationPolicy.ROLLBACK:
            try:
                self._uploader.delete(upload.bucket, upload.key, version_id=upload.version_id)
            except StorageError as e:
                logger.error(
                    f"{__name__}:_handle_orphan - Rollback failed, dead-lettering instead",
                    extra={**log_context, "error_code": e.error_code},
                )
            else:
                logger.error(f"{__name__}:_handle_orphan - Notify failed, upload rolled back", extra=log_context)
                return SubmissionOutcome(
                    status=OutcomeStatus.NOTIFY_FAILED,
                    correlation_id=notification.correlation_id,
                    storage_key=upload.key,
                    reason_code=reason,
                    detail=detail,
                    transient=transient,
                )

        dead_lettered = self._record_orphan(notification, config, reason)
        logger.error(
            f"{__name__}:_handle_orphan - ORPHANED DOCUMENT: stored without notification",
            extra={**log_context, "dead_lettered": dead_lettered},
        )
        return SubmissionOutcome(
            status=OutcomeStatus.PARTIAL_SUCCESS,
            correlation_id=notification.correlation_id,
            storage_key=upload.key,
            reason_code=reason if dead_lettered else ReasonCode.ORPHAN_UNRECORDED,
            upload=upload,
            detail=detail,
            transient=transient,
            dead_lettered=dead_lettered,
        )

    def _record_orphan(
        self,
        notification: Notification,
        config: IngestionConfig,
        reason: ReasonCode,
    ) -> bool:
        if self._dead_letter_recorder is None or not config.dead_letter_bucket:
            return False
        recorder = self._dead_letter_recorder
        try:
            self._call_with_retry(
                lambda: recorder.record(notification, config, reason.value),
                error_type=StorageError,
                retries=config.max_upload_retries,
                budget=config.upload_budget,
                config=config,
                cancel_event=None,
                operation="dead_letter",
            )
        except StorageError as e:
            logger.error(
                f"{__name__}:_record_orphan - Dead-letter write failed",
                extra={
                    "correlation_id": notification.correlation_id,
                    "s3_key": notification.storage_key,
                    "error_code": e.error_code,
                },
            )
            return False
        return True

    @staticmethod
    def _cancelled(cancel_event: threading.Event | None) -> bool:
        return cancel_event is not None and cancel_event.is_set()

    @staticmethod
    def _storage_failed(
        correlation_id: str,
        key: str,
        reason: ReasonCode,
        error: StorageError | None,
    ) -> SubmissionOutcome:
        return SubmissionOutcome(
            status=OutcomeStatus.STORAGE_FAILED,
            correlation_id=correlation_id,
            storage_key=key,
            reason_code=reason,
            detail=str(error) if error else "Invocation cancelled before upload",
            transient=bool(error and error.transient),
        )

    @staticmethod
    def _accepted(
        notification: Notification,
        upload: UploadDescriptor,
        handle: MessageHandle,
    ) -> SubmissionOutcome:
        return SubmissionOutcome(
            status=OutcomeStatus.ACCEPTED,
            correlation_id=notification.correlation_id,
            storage_key=upload.key,
            upload=upload,
            message=handle,
        )

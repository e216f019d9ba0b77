"""
Submission handler.

Normalizes the octet-stream and multipart transports into a Submission,
runs the coordinator off the event loop and maps its outcome to HTTP.

Dependencies: fastapi, document_service.core
System role: Glue between HTTP routes and the ingestion coordinator
"""

import logging

from fastapi import HTTPException, UploadFile
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse

from document_service.core.catalog import DocumentCatalog
from document_service.core.exceptions import InvalidSubmissionError
from document_service.core.ingestion import IngestionConfig, IngestionCoordinator
from document_service.models.document_type import SubmitResponse
from document_service.models.outcome import OutcomeStatus, SubmissionOutcome
from document_service.models.submission import Submission
from document_service.observability.correlation import get_correlation_id

logger = logging.getLogger(__name__)


def build_submission_from_bytes(
    content: bytes,
    filename: str | None,
    content_type: str | None,
    document_type: str | None,
    participant_id: str | None,
) -> Submission:
    """Build a submission from a raw request body and query metadata."""
    return Submission(
        content=content,
        filename=filename,
        content_type=content_type or "application/octet-stream",
        document_type=document_type,
        participant_id=participant_id,
    )


async def build_submission_from_upload(
    file: UploadFile,
    document_type: str | None,
    participant_id: str | None,
) -> Submission:
    """
    Build a submission from a multipart upload.

    Args:
        file: Uploaded file part
        document_type: Form field documentType
        participant_id: Form field participantId

    Returns:
        Submission: Same shape as the octet-stream transport produces
    """
    content = await file.read()
    if logger.isEnabledFor(logging.DEBUG):
        logger.debug(
            "Multipart file received",
            extra={
                "file_name": file.filename,
                "content_type": file.content_type,
                "size_bytes": len(content),
            },
        )
    return Submission(
        content=content,
        filename=file.filename,
        content_type=file.content_type or "application/octet-stream",
        document_type=document_type,
        participant_id=participant_id,
    )


def outcome_status_code(outcome: SubmissionOutcome) -> int:
    """
    Map an outcome to an HTTP status.

    Returns:
        int: 201 accepted, 503 transient storage failure, 502 other storage
        or notify failures, 500 partial success
    """
    if outcome.status is OutcomeStatus.ACCEPTED:
        return 201
    if outcome.status is OutcomeStatus.STORAGE_FAILED:
        return 503 if outcome.transient else 502
    if outcome.status is OutcomeStatus.NOTIFY_FAILED:
        return 502
    return 500


def outcome_to_response(outcome: SubmissionOutcome) -> JSONResponse:
    """Render an outcome as a JSON response."""
    body = SubmitResponse(
        status=outcome.status,
        correlation_id=outcome.correlation_id,
        storage_key=outcome.storage_key,
        reason_code=outcome.reason_code,
        etag=outcome.upload.etag if outcome.upload else None,
        version_id=outcome.upload.version_id if outcome.upload else None,
        message_id=outcome.message.message_id if outcome.message else None,
        dead_lettered=outcome.dead_lettered,
    )
    return JSONResponse(status_code=outcome_status_code(outcome), content=body.model_dump(mode="json"))


async def handle_submission(
    submission: Submission,
    coordinator: IngestionCoordinator,
    config: IngestionConfig,
    catalog: DocumentCatalog,
) -> JSONResponse:
    """
    Run one submission through the coordinator.

    Raises:
        HTTPException(400): Submission lacks required identity
    """
    if submission.document_type and not catalog.is_known(submission.document_type):
        logger.warning(
            "Unknown document type submitted",
            extra={"document_type": submission.document_type},
        )

    try:
        outcome = await run_in_threadpool(
            coordinator.submit,
            submission,
            config,
            get_correlation_id() or None,
        )
    except InvalidSubmissionError as e:
        logger.warning("Invalid submission", extra={"field": e.field, "error": e.message})
        raise HTTPException(status_code=400, detail=e.message)

    return outcome_to_response(outcome)

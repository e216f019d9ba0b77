"""
Document API endpoints.

Routes:
- GET /document/v1/documentTypes - List accepted document types
- POST /document/v1/submit - Submit a binary document with query metadata
- POST /document/v1/submitForm - Submit a multipart document with form metadata
- POST /document/v1/reconcile - Re-dispatch dead-lettered notifications

Dependencies: fastapi, document_service.core, document_service.models
System role: Document HTTP API
"""

import logging

from fastapi import APIRouter, Depends, File, Form, Header, HTTPException, Query, Request, UploadFile
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse

from document_service.api.deps import (
    get_coordinator,
    get_document_catalog,
    get_ingestion_config,
    get_orphan_sweeper,
)
from document_service.core.catalog import DocumentCatalog
from document_service.core.exceptions import StorageError
from document_service.core.ingestion import IngestionConfig, IngestionCoordinator, OrphanSweeper
from document_service.models.document_type import (
    GetDocumentTypesResponse,
    SubmitResponse,
    SweepResponse,
)

from .submission_handler import (
    build_submission_from_bytes,
    build_submission_from_upload,
    handle_submission,
)

logger = logging.getLogger(__name__)

URL_PREFIX = "/document/v1"

router = APIRouter(prefix=URL_PREFIX, tags=["documents"])

SUBMIT_RESPONSES = {
    201: {"model": SubmitResponse, "description": "Document stored and notification enqueued"},
    400: {"description": "Submission lacks required identity"},
    500: {"model": SubmitResponse, "description": "Document stored but notification not delivered"},
    502: {"model": SubmitResponse, "description": "Storage or notification failed"},
    503: {"model": SubmitResponse, "description": "Storage temporarily unavailable"},
}


@router.get("/documentTypes", response_model=GetDocumentTypesResponse)
async def get_document_types(
    catalog: DocumentCatalog = Depends(get_document_catalog),
) -> GetDocumentTypesResponse:
    """Return the document types accepted by the service."""
    logger.info("Document types requested")
    return GetDocumentTypesResponse(document_types=catalog.list_types())


@router.post(
    "/submit",
    status_code=201,
    responses=SUBMIT_RESPONSES,
    openapi_extra={
        "requestBody": {
            "required": True,
            "content": {"application/octet-stream": {"schema": {"type": "string", "format": "binary"}}},
        }
    },
)
async def submit(
    request: Request,
    filename: str | None = Query(default=None, description="Original filename"),
    document_type: str | None = Query(default=None, alias="documentType"),
    participant_id: str | None = Query(default=None, alias="participantId"),
    document_content_type: str | None = Header(default=None, alias="X-Document-Content-Type"),
    coordinator: IngestionCoordinator = Depends(get_coordinator),
    config: IngestionConfig = Depends(get_ingestion_config),
    catalog: DocumentCatalog = Depends(get_document_catalog),
) -> JSONResponse:
    """
    Submit a binary document.

    The request body is the document; metadata travels in the query string.

    Returns:
        JSONResponse: SubmitResponse with the outcome status and reason code

    Raises:
        HTTPException(400): Filename missing
    """
    content = await request.body()
    logger.info(
        "Binary submission received",
        extra={"file_name": filename, "document_type": document_type, "size_bytes": len(content)},
    )
    submission = build_submission_from_bytes(
        content=content,
        filename=filename,
        content_type=document_content_type or request.headers.get("content-type"),
        document_type=document_type,
        participant_id=participant_id,
    )
    return await handle_submission(submission, coordinator, config, catalog)


@router.post("/submitForm", status_code=201, responses=SUBMIT_RESPONSES)
async def submit_form(
    file: UploadFile = File(..., description="Document to upload"),
    document_type: str | None = Form(default=None, alias="documentType"),
    participant_id: str | None = Form(default=None, alias="participantId"),
    coordinator: IngestionCoordinator = Depends(get_coordinator),
    config: IngestionConfig = Depends(get_ingestion_config),
    catalog: DocumentCatalog = Depends(get_document_catalog),
) -> JSONResponse:
    """
    Submit a multipart document.

    Returns:
        JSONResponse: SubmitResponse with the outcome status and reason code

    Raises:
        HTTPException(400): File part has no filename
    """
    logger.info(
        "Multipart submission received",
        extra={"file_name": file.filename, "document_type": document_type},
    )
    submission = await build_submission_from_upload(file, document_type, participant_id)
    return await handle_submission(submission, coordinator, config, catalog)


@router.post("/reconcile", response_model=SweepResponse)
async def reconcile(
    limit: int | None = Query(default=None, gt=0),
    sweeper: OrphanSweeper = Depends(get_orphan_sweeper),
    config: IngestionConfig = Depends(get_ingestion_config),
) -> SweepResponse:
    """
    Run one orphan sweep.

    Raises:
        HTTPException(502): Dead-letter bucket could not be listed
    """
    try:
        report = await run_in_threadpool(sweeper.sweep, config, limit)
    except StorageError as e:
        logger.exception("Reconciliation sweep failed", extra={"error_code": e.error_code})
        raise HTTPException(status_code=502, detail="Failed to list dead-letter records")

    return SweepResponse(
        scanned=report.scanned,
        redispatched=report.redispatched,
        stale=report.stale,
        failed=report.failed,
        invalid=report.invalid,
    )

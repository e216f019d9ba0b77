"""
Document type schemas.

Request/response schemas for the document catalog and submission endpoints.

Dependencies: pydantic
System role: Document API contracts
"""

from pydantic import BaseModel, Field

from document_service.models.outcome import OutcomeStatus, ReasonCode


class DocumentType(BaseModel):
    """One entry of the claims document catalog."""

    code: str = Field(description="Stable type code used in storage keys")
    description: str
    accepted_content_types: list[str] = Field(default_factory=list)


class GetDocumentTypesResponse(BaseModel):
    """Response schema for the document types endpoint."""

    document_types: list[DocumentType]


class SubmitResponse(BaseModel):
    """Response schema for document submission endpoints."""

    status: OutcomeStatus
    correlation_id: str
    storage_key: str
    reason_code: ReasonCode | None = None
    etag: str | None = None
    version_id: str | None = None
    message_id: str | None = None
    dead_lettered: bool = False


class SweepResponse(BaseModel):
    """Response schema for a manual reconciliation sweep."""

    scanned: int
    redispatched: int
    stale: int
    failed: int
    invalid: int

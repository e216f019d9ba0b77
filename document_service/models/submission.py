"""
Submission domain model.

A submission is one client-provided document plus its identifying metadata.
Both the octet-stream and multipart transports normalize to this model.

Dependencies: pydantic
System role: Immutable input to the ingestion coordinator
"""

import hashlib

from pydantic import BaseModel, ConfigDict, Field


class Submission(BaseModel):
    """Document bytes plus metadata awaiting ingestion."""

    model_config = ConfigDict(frozen=True)

    content: bytes = Field(repr=False, description="Raw document bytes")
    filename: str | None = Field(default=None, description="Original filename from the client")
    content_type: str = Field(
        default="application/octet-stream",
        description="MIME type of the document",
    )
    document_type: str | None = Field(default=None, description="Catalog document type code")
    participant_id: str | None = Field(default=None, description="Claim participant identifier")

    @property
    def size_bytes(self) -> int:
        return len(self.content)

    @property
    def content_sha256(self) -> str:
        return hashlib.sha256(self.content).hexdigest()

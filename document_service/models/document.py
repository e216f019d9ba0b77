"""
Document storage and notification models.

Dependencies: pydantic
System role: Values exchanged between uploader, dispatcher and coordinator
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

AttributeSet = dict[str, str]


class UploadDescriptor(BaseModel):
    """Result of a successful object store write."""

    model_config = ConfigDict(frozen=True)

    key: str
    bucket: str
    etag: str
    version_id: str | None = None
    size_bytes: int


class Notification(BaseModel):
    """Queue message announcing a newly stored document."""

    model_config = ConfigDict(
        frozen=True,
        json_schema_extra={
            "example": {
                "correlation_id": "4f7f2c1e-9a55-4c3c-a3c4-6f0f5e1b2d7a",
                "storage_key": "FORM/1234567/9f86d081884c7d65-a.pdf",
                "bucket": "claims-documents-dev",
                "etag": "\"d41d8cd98f00b204e9800998ecf8427e\"",
                "version_id": None,
                "size_bytes": 10,
                "attributes": {"filename": "a.pdf", "document-type": "FORM"},
                "submitted_at": "2026-01-01T00:00:00Z",
            }
        },
    )

    correlation_id: str = Field(description="Traces one submission end-to-end")
    storage_key: str = Field(description="Key of the stored document")
    bucket: str = Field(description="Bucket holding the stored document")
    etag: str
    version_id: str | None = None
    size_bytes: int
    attributes: AttributeSet = Field(default_factory=dict)
    submitted_at: datetime


class MessageHandle(BaseModel):
    """Receipt for an enqueued notification."""

    model_config = ConfigDict(frozen=True)

    message_id: str
    queue_url: str

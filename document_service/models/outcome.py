"""
Submission outcome model.

The closed set of results one coordinator invocation can return.

Dependencies: pydantic
System role: Contract between coordinator and transport layer
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from document_service.models.document import MessageHandle, UploadDescriptor


class OutcomeStatus(str, Enum):
    """Terminal state of a submission."""

    ACCEPTED = "accepted"
    STORAGE_FAILED = "storage_failed"
    NOTIFY_FAILED = "notify_failed"
    PARTIAL_SUCCESS = "partial_success"


class ReasonCode(str, Enum):
    """Machine-readable reason attached to non-accepted outcomes."""

    STORAGE_PERMANENT = "STORAGE_PERMANENT"
    STORAGE_RETRIES_EXHAUSTED = "STORAGE_RETRIES_EXHAUSTED"
    NOTIFY_PERMANENT = "NOTIFY_PERMANENT"
    NOTIFY_RETRIES_EXHAUSTED = "NOTIFY_RETRIES_EXHAUSTED"
    CANCELLED = "CANCELLED"
    ORPHAN_UNRECORDED = "ORPHAN_UNRECORDED"


class SubmissionOutcome(BaseModel):
    """Tagged result of one coordinator invocation."""

    model_config = ConfigDict(frozen=True)

    status: OutcomeStatus
    correlation_id: str
    storage_key: str
    reason_code: ReasonCode | None = None
    upload: UploadDescriptor | None = None
    message: MessageHandle | None = None
    detail: str | None = None
    transient: bool = Field(
        default=False,
        description="True when the failing call was retryable",
    )
    dead_lettered: bool = False

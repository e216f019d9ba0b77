"""
Per-invocation ingestion configuration.

Buckets, queue and retry policy passed explicitly into every coordinator
call instead of being read from process-wide settings.

Dependencies: pydantic, document_service.configs
System role: Coordinator configuration contract
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from document_service.configs import Settings


class ReconciliationPolicy(str, Enum):
    """How a stored-but-unannounced document is handled."""

    DEAD_LETTER = "dead_letter"
    ROLLBACK = "rollback"


class IngestionConfig(BaseModel):
    """Immutable configuration for one coordinator invocation."""

    model_config = ConfigDict(frozen=True)

    bucket: str = Field(description="Bucket receiving submitted documents")
    notify_queue: str = Field(description="Queue URL receiving notifications")
    max_upload_retries: int = Field(default=3, ge=0)
    max_dispatch_retries: int = Field(default=3, ge=0)
    retry_backoff: float = Field(default=0.5, ge=0, description="Initial backoff in seconds")
    retry_backoff_max: float = Field(default=8.0, ge=0, description="Backoff cap in seconds")
    upload_timeout: float = Field(default=30.0, gt=0)
    dispatch_timeout: float = Field(default=10.0, gt=0)
    key_prefix: str = ""
    dead_letter_bucket: str | None = None
    dead_letter_prefix: str = "orphans"
    reconciliation: ReconciliationPolicy = ReconciliationPolicy.DEAD_LETTER

    @classmethod
    def from_settings(cls, settings: Settings) -> "IngestionConfig":
        """
        Build configuration from application settings.

        Args:
            settings: Aggregated application settings

        Returns:
            IngestionConfig: Snapshot of the current settings
        """
        ingestion = settings.ingestion
        return cls(
            bucket=settings.s3_documents.bucket,
            notify_queue=settings.sqs_notifications.queue_url,
            max_upload_retries=ingestion.max_upload_retries,
            max_dispatch_retries=ingestion.max_dispatch_retries,
            retry_backoff=ingestion.retry_backoff,
            retry_backoff_max=ingestion.retry_backoff_max,
            upload_timeout=ingestion.upload_timeout,
            dispatch_timeout=ingestion.dispatch_timeout,
            key_prefix=settings.s3_documents.key_prefix,
            dead_letter_bucket=settings.s3_documents.dead_letter_bucket or None,
            dead_letter_prefix=settings.s3_documents.dead_letter_prefix,
            reconciliation=ReconciliationPolicy(ingestion.reconciliation),
        )

    def backoff_budget(self, retries: int) -> float:
        """Total sleep time across ``retries`` exponential backoffs."""
        return sum(
            min(self.retry_backoff * 2**attempt, self.retry_backoff_max)
            for attempt in range(retries)
        )

    @property
    def upload_budget(self) -> float:
        """Longest time the upload phase may take, retries included."""
        return self.upload_timeout * (self.max_upload_retries + 1) + self.backoff_budget(
            self.max_upload_retries
        )

    @property
    def dispatch_budget(self) -> float:
        """Longest time the dispatch phase may take, retries included."""
        return self.dispatch_timeout * (self.max_dispatch_retries + 1) + self.backoff_budget(
            self.max_dispatch_retries
        )

    @property
    def deadline_seconds(self) -> float:
        """Overall deadline of one invocation."""
        return self.upload_budget + self.dispatch_budget

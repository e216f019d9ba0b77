"""
Ingestion retry, timeout and reconciliation settings.

Dependencies: pydantic, pydantic_settings
System role: Tuning knobs for the ingestion coordinator
"""

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings

from document_service.configs.base import env_config


class IngestionSettings(BaseSettings):
    """Retry policy and timeouts for upload and dispatch."""

    model_config = env_config("INGESTION_")

    max_upload_retries: int = Field(default=3, ge=0, description="Retries after the first upload attempt")
    max_dispatch_retries: int = Field(default=3, ge=0, description="Retries after the first send attempt")
    retry_backoff: float = Field(default=0.5, ge=0, description="Initial retry backoff in seconds")
    retry_backoff_max: float = Field(default=8.0, ge=0, description="Maximum retry backoff in seconds")
    upload_timeout: float = Field(default=30.0, gt=0, description="Per-call S3 timeout in seconds")
    dispatch_timeout: float = Field(default=10.0, gt=0, description="Per-call SQS timeout in seconds")

    reconciliation: Literal["dead_letter", "rollback"] = Field(
        default="dead_letter",
        description="What to do with a stored document whose notification failed",
    )
    reconcile_interval_seconds: int = Field(
        default=300,
        gt=0,
        description="Interval for the periodic orphan sweep",
    )
    reconcile_batch_size: int = Field(
        default=100,
        gt=0,
        description="Maximum dead-letter records handled per sweep",
    )

"""
S3 Documents bucket configuration.

Settings for raw document storage and the dead-letter bucket used for
orphaned notifications.

Dependencies: pydantic_settings
System role: S3 documents bucket configuration
"""

from pydantic import Field
from pydantic_settings import BaseSettings

from document_service.configs.base import env_config


class S3DocumentsSettings(BaseSettings):
    """Document bucket, dead-letter bucket and key layout."""

    model_config = env_config("S3_DOCUMENTS_")

    bucket: str = Field(
        default="claims-documents-dev",
        description="S3 bucket for submitted document storage",
    )
    dead_letter_bucket: str = Field(
        default="claims-documents-dev-dlq",
        description="S3 bucket holding notifications that could not be enqueued",
    )
    dead_letter_prefix: str = Field(
        default="orphans",
        description="Key prefix for dead-letter records",
    )
    key_prefix: str = Field(
        default="",
        description="Optional logical prefix prepended to every storage key",
    )
    region: str = Field(
        default="us-east-1",
        description="AWS region for S3 buckets",
    )

"""
Unified application settings.

Aggregates all configuration modules into a single Settings class.
Provides dependency injection factory for FastAPI.

Dependencies: All config modules
System role: Central configuration aggregator for the application
"""

from functools import lru_cache

from pydantic import Field

from document_service.configs.base import ServiceSettings
from document_service.configs.celery_config import CelerySettings
from document_service.configs.ingestion import IngestionSettings
from document_service.configs.s3_documents import S3DocumentsSettings
from document_service.configs.sqs_notifications import SQSNotificationSettings


class Settings(ServiceSettings):
    """Unified application settings aggregating all config modules."""

    # Aggregated settings
    s3_documents: S3DocumentsSettings = Field(default_factory=S3DocumentsSettings)
    sqs_notifications: SQSNotificationSettings = Field(default_factory=SQSNotificationSettings)
    ingestion: IngestionSettings = Field(default_factory=IngestionSettings)
    celery: CelerySettings = Field(default_factory=CelerySettings)


@lru_cache
def get_settings() -> Settings:
    """
    Get application settings singleton.

    Returns Settings instance, cached for dependency injection.
    Environment variables loaded once at startup.

    Returns:
        Settings: Application settings instance

    Usage:
        from document_service.configs import get_settings
        settings = get_settings()
    """
    return Settings()

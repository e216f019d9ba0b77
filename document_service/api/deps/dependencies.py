"""
Dependency injection container.

Factory functions for FastAPI dependencies and the Celery worker.

Dependencies: document_service.configs, document_service.core, document_service.boundary
System role: DI container for service injection
"""

from document_service.boundary.aws.s3_client import S3DocumentClient
from document_service.boundary.aws.sqs_client import SQSNotificationClient
from document_service.configs import get_settings
from document_service.core.catalog import DocumentCatalog
from document_service.core.ingestion import (
    DeadLetterRecorder,
    IngestionConfig,
    IngestionCoordinator,
    NotificationDispatcher,
    OrphanSweeper,
    StorageUploader,
)


class ServiceCache:
    """Container for cached service instances."""

    def __init__(self):
        self._s3_client = None
        self._sqs_client = None
        self._coordinator = None
        self._orphan_sweeper = None
        self._catalog = None

    @property
    def s3_client(self) -> S3DocumentClient:
        """Get cached S3 document client."""
        if self._s3_client is None:
            settings = get_settings()
            self._s3_client = S3DocumentClient(
                region=settings.s3_documents.region,
                timeout=settings.ingestion.upload_timeout,
            )
        return self._s3_client

    @property
    def sqs_client(self) -> SQSNotificationClient:
        """Get cached SQS notification client."""
        if self._sqs_client is None:
            settings = get_settings()
            self._sqs_client = SQSNotificationClient(
                queue_url=settings.sqs_notifications.queue_url,
                region=settings.sqs_notifications.region,
                timeout=settings.ingestion.dispatch_timeout,
            )
        return self._sqs_client

    @property
    def coordinator(self) -> IngestionCoordinator:
        """Get cached ingestion coordinator."""
        if self._coordinator is None:
            uploader = StorageUploader(self.s3_client)
            self._coordinator = IngestionCoordinator(
                uploader=uploader,
                dispatcher=NotificationDispatcher(self.sqs_client),
                dead_letter_recorder=DeadLetterRecorder(uploader),
            )
        return self._coordinator

    @property
    def orphan_sweeper(self) -> OrphanSweeper:
        """Get cached orphan sweeper."""
        if self._orphan_sweeper is None:
            self._orphan_sweeper = OrphanSweeper(
                s3_client=self.s3_client,
                dispatcher=NotificationDispatcher(self.sqs_client),
            )
        return self._orphan_sweeper

    @property
    def catalog(self) -> DocumentCatalog:
        """Get cached document catalog."""
        if self._catalog is None:
            self._catalog = DocumentCatalog()
        return self._catalog

    def clear(self) -> None:
        """Clear all cached instances."""
        self._s3_client = None
        self._sqs_client = None
        self._coordinator = None
        self._orphan_sweeper = None
        self._catalog = None


# Global service cache
_service_cache = ServiceCache()


def get_service_cache() -> ServiceCache:
    """Get service cache singleton."""
    return _service_cache


def get_ingestion_config() -> IngestionConfig:
    """
    Get ingestion configuration for one request.

    Returns:
        IngestionConfig: Snapshot of buckets, queue and retry policy
    """
    return IngestionConfig.from_settings(get_settings())


def get_coordinator() -> IngestionCoordinator:
    """Get the ingestion coordinator."""
    return get_service_cache().coordinator


def get_orphan_sweeper() -> OrphanSweeper:
    """Get the orphan sweeper."""
    return get_service_cache().orphan_sweeper


def get_document_catalog() -> DocumentCatalog:
    """Get the document catalog."""
    return get_service_cache().catalog

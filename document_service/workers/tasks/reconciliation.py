"""
Orphan reconciliation Celery task.

Task: reconcile_orphans(limit)
Flow: list dead-letter records -> check document exists -> re-dispatch -> delete record

Dependencies: document_service.core.ingestion, document_service.workers
System role: Periodic sweep keeping the at-least-once notification contract
"""

import logging
from dataclasses import asdict

from document_service.api.deps.dependencies import get_orphan_sweeper
from document_service.configs import get_settings
from document_service.core.exceptions import StorageError
from document_service.core.ingestion import IngestionConfig
from document_service.observability.correlation import correlation_scope
from document_service.workers import celery_app

logger = logging.getLogger(__name__)


@celery_app.task(
    bind=True,
    max_retries=3,
    autoretry_for=(StorageError,),
    retry_backoff=60,
    retry_backoff_max=600,
)
def reconcile_orphans(self, limit: int | None = None) -> dict:
    """
    Re-dispatch dead-lettered notifications.

    Args:
        limit: Maximum records per run, defaults to INGESTION_RECONCILE_BATCH_SIZE

    Returns:
        dict: SweepReport counters
    """
    settings = get_settings()
    config = IngestionConfig.from_settings(settings)
    with correlation_scope(self.request.id):
        report = get_orphan_sweeper().sweep(
            config,
            limit=limit or settings.ingestion.reconcile_batch_size,
        )
    if report.failed or report.invalid:
        logger.warning(
            f"{__name__}:reconcile_orphans - Records left for manual handling",
            extra={"failed": report.failed, "invalid": report.invalid},
        )
    return asdict(report)

"""
Celery workers module.

Periodic orphan reconciliation: beat schedules reconcile_orphans, which
re-dispatches notifications recorded in the dead-letter bucket.

Dependencies: celery, document_service.configs
System role: Background task processing
"""

from celery import Celery

from document_service.configs import get_settings

settings = get_settings()
celery_config = settings.celery

celery_app = Celery(
    "document_service",
    broker=celery_config.broker_url,
    backend=celery_config.result_backend,
    include=["document_service.workers.tasks.reconciliation"],
)

celery_app.conf.update(
    task_serializer="json",
    result_serializer="json",
    accept_content=["json"],
    timezone="UTC",
    result_expires=celery_config.result_expires,
    task_time_limit=celery_config.task_time_limit,
    worker_prefetch_multiplier=celery_config.worker_prefetch_multiplier,
    beat_schedule={
        "reconcile-orphans": {
            "task": "document_service.workers.tasks.reconciliation.reconcile_orphans",
            "schedule": float(settings.ingestion.reconcile_interval_seconds),
        },
    },
)

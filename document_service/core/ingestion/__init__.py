"""
Document ingestion.

Exports: IngestionCoordinator, IngestionConfig, ReconciliationPolicy,
StorageUploader, NotificationDispatcher, DeadLetterRecorder, OrphanSweeper,
resolve_attributes, derive_storage_key
"""

from .attribute_resolver import resolve_attributes
from .config import IngestionConfig, ReconciliationPolicy
from .coordinator import IngestionCoordinator
from .key_deriver import derive_storage_key
from .notification_dispatcher import NotificationDispatcher
from .reconciliation import DeadLetterRecorder, OrphanSweeper, SweepReport
from .storage_uploader import StorageUploader

__all__ = [
    "DeadLetterRecorder",
    "IngestionConfig",
    "IngestionCoordinator",
    "NotificationDispatcher",
    "OrphanSweeper",
    "ReconciliationPolicy",
    "StorageUploader",
    "SweepReport",
    "derive_storage_key",
    "resolve_attributes",
]

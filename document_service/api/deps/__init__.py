"""API-specific dependencies."""

# Re-export common dependencies
from .dependencies import (
    get_coordinator,
    get_document_catalog,
    get_ingestion_config,
    get_orphan_sweeper,
    get_service_cache,
)

__all__ = [
    "get_coordinator",
    "get_document_catalog",
    "get_ingestion_config",
    "get_orphan_sweeper",
    "get_service_cache",
]

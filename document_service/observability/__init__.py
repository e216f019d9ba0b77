"""
Observability module.

Logging configuration, correlation ID tracking and request middleware.
"""

from document_service.observability.correlation import correlation_scope, get_correlation_id
from document_service.observability.logger import configure_logging

__all__ = ["configure_logging", "correlation_scope", "get_correlation_id"]

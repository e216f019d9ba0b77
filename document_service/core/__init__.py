"""
Core business logic module.

Contains the ingestion coordinator, its collaborators, the document catalog
and the exception hierarchy.
"""

from document_service.core.exceptions import (
    DocumentServiceException,
    InvalidSubmissionError,
    MessagingError,
    RemoteCallError,
    StorageError,
)

__all__ = [
    "DocumentServiceException",
    "InvalidSubmissionError",
    "MessagingError",
    "RemoteCallError",
    "StorageError",
]

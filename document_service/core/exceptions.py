"""
Exception hierarchy for the document ingestion service.

Provides layered exception structure for domain-specific errors.
All exceptions include context for observability and debugging.

Dependencies: None (pure domain layer)
System role: Centralized exception handling across the application
"""

from typing import Any


class DocumentServiceException(Exception):
    """Base exception for all document service errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """
        Initialize base exception with message and optional context.

        Args:
            message: Human-readable error message
            details: Optional dictionary of additional context for debugging

        """
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        """Return string representation including details."""
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class InvalidSubmissionError(DocumentServiceException):
    """Raised when a submission lacks the identity needed to store it."""

    def __init__(
        self,
        message: str,
        field: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize invalid submission error.

        Args:
            message: Error message
            field: Field name that failed validation
            details: Additional context
        """
        details = details or {}
        if field:
            details["field"] = field
        self.field = field
        super().__init__(message, details)


class RemoteCallError(DocumentServiceException):
    """Base for failures of a remote store or queue call."""

    def __init__(
        self,
        message: str,
        transient: bool,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize remote call error.

        Args:
            message: Error message
            transient: True when retrying the call may succeed
            error_code: Provider error code (e.g. "SlowDown", "NoSuchBucket")
            details: Additional context
        """
        details = details or {}
        details["transient"] = transient
        if error_code:
            details["error_code"] = error_code
        self.transient = transient
        self.error_code = error_code
        super().__init__(message, details)

    @property
    def permanent(self) -> bool:
        return not self.transient


class StorageError(RemoteCallError):
    """Raised when an object store operation fails."""

    def __init__(
        self,
        message: str,
        transient: bool,
        error_code: str | None = None,
        operation: str | None = None,
        key: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize storage error.

        Args:
            message: Error message
            transient: True for timeouts and throttling
            error_code: S3 error code
            operation: Operation that failed (put, get, delete, list)
            key: Object key involved
            details: Additional context
        """
        details = details or {}
        if operation:
            details["operation"] = operation
        if key:
            details["key"] = key
        self.operation = operation
        self.key = key
        super().__init__(message, transient, error_code, details)


class MessagingError(RemoteCallError):
    """Raised when a notification cannot be enqueued."""

"""
AWS error classification.

Maps botocore exceptions onto transient/permanent storage and messaging
errors so the coordinator can decide whether a retry is worthwhile.

Dependencies: botocore
System role: Shared failure taxonomy for S3 and SQS calls
"""

from botocore.exceptions import (
    BotoCoreError,
    ClientError,
    ConnectionError as BotoConnectionError,
    HTTPClientError,
)

from document_service.core.exceptions import MessagingError, StorageError

TRANSIENT_ERROR_CODES = frozenset(
    {
        "RequestTimeout",
        "RequestTimeoutException",
        "Throttling",
        "ThrottlingException",
        "ThrottledException",
        "SlowDown",
        "RequestLimitExceeded",
        "TooManyRequestsException",
        "ProvisionedThroughputExceededException",
        "InternalError",
        "InternalFailure",
        "ServiceUnavailable",
        "ServiceUnavailableException",
        "AWS.SimpleQueueService.ServiceUnavailable",
        "KMS.ThrottlingException",
    }
)

AwsError = (ClientError, BotoCoreError)


def classify_aws_error(exc: Exception) -> tuple[bool, str | None]:
    """
    Decide whether an AWS failure is transient.

    Args:
        exc: ClientError or BotoCoreError raised by boto3

    Returns:
        tuple[bool, str | None]: (transient, error_code)
    """
    if isinstance(exc, ClientError):
        error = exc.response.get("Error", {})
        code = error.get("Code")
        status = exc.response.get("ResponseMetadata", {}).get("HTTPStatusCode") or 0
        transient = code in TRANSIENT_ERROR_CODES or status == 429 or status >= 500
        return transient, code
    if isinstance(exc, (BotoConnectionError, HTTPClientError)):
        return True, type(exc).__name__
    return False, type(exc).__name__


def storage_error_from(exc: Exception, operation: str, key: str | None = None) -> StorageError:
    """Wrap a botocore exception raised by an S3 call."""
    transient, code = classify_aws_error(exc)
    return StorageError(
        f"S3 {operation} failed: {exc}",
        transient=transient,
        error_code=code,
        operation=operation,
        key=key,
    )


def messaging_error_from(exc: Exception) -> MessagingError:
    """Wrap a botocore exception raised by an SQS call."""
    transient, code = classify_aws_error(exc)
    return MessagingError(
        f"SQS send failed: {exc}",
        transient=transient,
        error_code=code,
    )

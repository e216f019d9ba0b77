"""
Logger configuration.

Single stdout handler whose lines carry the correlation ID and the
ingestion fields passed through ``extra=`` (bucket, key, error code...).

Dependencies: logging (stdlib)
System role: Centralized logging configuration
"""

import logging
import sys

from document_service.observability.correlation import get_correlation_id

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - [%(correlation_id)s] %(message)s"

# extra= fields appended to the message when present
CONTEXT_FIELDS = (
    "bucket",
    "s3_key",
    "size_bytes",
    "message_id",
    "reason_code",
    "error_code",
    "transient",
    "dead_lettered",
    "status_code",
    "process_time_ms",
)


class CorrelationIdFilter(logging.Filter):
    """Stamp records with the correlation ID of the current context."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not getattr(record, "correlation_id", None):
            record.correlation_id = get_correlation_id() or "-"
        return True


class ContextFormatter(logging.Formatter):
    """Formatter rendering known ``extra=`` fields as key=value pairs."""

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        context = " ".join(
            f"{name}={getattr(record, name)}"
            for name in CONTEXT_FIELDS
            if getattr(record, name, None) is not None
        )
        return f"{line} | {context}" if context else line


def configure_logging(level: str = "INFO") -> None:
    """
    Install the service log handler on the root logger.

    Safe to call repeatedly; earlier handlers are replaced.

    Args:
        level: Root log level name
    """
    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    handler.addFilter(CorrelationIdFilter())
    handler.setFormatter(ContextFormatter(LOG_FORMAT, datefmt="%Y-%m-%dT%H:%M:%S"))

    root_logger.setLevel(level.upper())
    root_logger.addHandler(handler)

    for noisy in ("urllib3", "botocore", "boto3", "s3transfer"):
        logging.getLogger(noisy).setLevel(logging.WARNING)

"""
Shared test fixtures and configuration for entire test suite.

Provides: in-memory object store and queue fakes, ClientError factory,
ingestion config and a coordinator wired to the fakes
Dependencies: pytest, botocore
System role: Test infrastructure and fixture management
"""

import hashlib
from datetime import datetime, timezone
from unittest.mock import MagicMock

import pytest
from botocore.exceptions import ClientError

from document_service.core.ingestion import (
    DeadLetterRecorder,
    IngestionConfig,
    IngestionCoordinator,
    NotificationDispatcher,
    StorageUploader,
)

FIXED_NOW = datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)
DOCUMENTS_BUCKET = "claims-documents-test"
DEAD_LETTER_BUCKET = "claims-documents-test-dlq"
QUEUE_URL = "https://sqs.us-east-1.amazonaws.com/000000000000/claims-documents-test"


def client_error(code: str, status: int = 400, operation: str = "PutObject") -> ClientError:
    """Build a botocore ClientError with the given code and HTTP status."""
    return ClientError(
        {
            "Error": {"Code": code, "Message": f"{code} raised by test"},
            "ResponseMetadata": {"HTTPStatusCode": status},
        },
        operation,
    )


class FakeObjectStore:
    """In-memory stand-in for S3DocumentClient."""

    def __init__(self) -> None:
        self.objects: dict[tuple[str, str], dict] = {}
        self.put_calls: list[tuple[str, str]] = []
        self.put_failures: list[Exception] = []
        self.always_fail: Exception | None = None
        self.bucket_failures: dict[str, Exception] = {}
        self.bucket_put_failures: dict[str, list[Exception]] = {}
        self.delete_failure: Exception | None = None
        self.delete_calls: list[tuple[str, str, str | None]] = []
        self.on_put = None
        self.versioned = False
        self.versions: dict[tuple[str, str], list[tuple[str, dict]]] = {}

    def put(self, bucket, key, body, properties, content_type="application/octet-stream"):
        self.put_calls.append((bucket, key))
        if bucket in self.bucket_failures:
            raise self.bucket_failures[bucket]
        if self.always_fail is not None:
            raise self.always_fail
        if self.bucket_put_failures.get(bucket):
            raise self.bucket_put_failures[bucket].pop(0)
        if self.put_failures:
            raise self.put_failures.pop(0)
        record = {
            "body": body,
            "metadata": dict(properties),
            "content_type": content_type,
        }
        self.objects[(bucket, key)] = record
        version_id = None
        if self.versioned:
            history = self.versions.setdefault((bucket, key), [])
            version_id = f"v{len(history) + 1}"
            history.append((version_id, record))
        if self.on_put is not None:
            self.on_put()
        return {"etag": f'"{hashlib.md5(body).hexdigest()}"', "version_id": version_id}

    def get(self, bucket, key):
        if (bucket, key) not in self.objects:
            raise client_error("NoSuchKey", 404, "GetObject")
        return self.objects[(bucket, key)]["body"]

    def delete(self, bucket, key, version_id=None):
        self.delete_calls.append((bucket, key, version_id))
        if self.delete_failure is not None:
            raise self.delete_failure
        if version_id is None:
            self.objects.pop((bucket, key), None)
            self.versions.pop((bucket, key), None)
            return
        history = [entry for entry in self.versions.get((bucket, key), []) if entry[0] != version_id]
        self.versions[(bucket, key)] = history
        if history:
            self.objects[(bucket, key)] = history[-1][1]
        else:
            self.objects.pop((bucket, key), None)

    def list_keys(self, bucket, prefix=""):
        return iter(sorted(k for b, k in self.objects if b == bucket and k.startswith(prefix)))

    def file_exists(self, bucket, key):
        return (bucket, key) in self.objects

    def keys(self, bucket):
        return sorted(k for b, k in self.objects if b == bucket)


class FakeQueue:
    """In-memory stand-in for SQSNotificationClient."""

    def __init__(self, queue_url: str = QUEUE_URL) -> None:
        self.queue_url = queue_url
        self.messages: list[dict] = []
        self.send_calls = 0
        self.failures: list[Exception] = []
        self.always_fail: Exception | None = None

    def send(self, payload, attributes=None, queue_url=None):
        self.send_calls += 1
        if self.always_fail is not None:
            raise self.always_fail
        if self.failures:
            raise self.failures.pop(0)
        self.messages.append(
            {"body": payload, "attributes": attributes or {}, "queue_url": queue_url or self.queue_url}
        )
        return f"msg-{len(self.messages)}"


@pytest.fixture
def object_store():
    return FakeObjectStore()


@pytest.fixture
def queue():
    return FakeQueue()


@pytest.fixture
def ingestion_config():
    """Config with two retries per phase and no backoff."""
    return IngestionConfig(
        bucket=DOCUMENTS_BUCKET,
        notify_queue=QUEUE_URL,
        max_upload_retries=2,
        max_dispatch_retries=2,
        retry_backoff=0,
        retry_backoff_max=0,
        dead_letter_bucket=DEAD_LETTER_BUCKET,
    )


@pytest.fixture
def sleep():
    return MagicMock()


@pytest.fixture
def coordinator(object_store, queue, sleep):
    """Coordinator wired to in-memory fakes with a fixed clock."""
    uploader = StorageUploader(object_store)
    return IngestionCoordinator(
        uploader=uploader,
        dispatcher=NotificationDispatcher(queue),
        dead_letter_recorder=DeadLetterRecorder(uploader, clock=lambda: FIXED_NOW),
        clock=lambda: FIXED_NOW,
        sleep=sleep,
    )


@pytest.fixture
def aws_error():
    """Factory for botocore ClientError instances."""
    return client_error

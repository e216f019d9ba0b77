"""Tests for dead-letter recording and the orphan sweeper."""

import json
import re

import pytest

from document_service.core.exceptions import StorageError
from document_service.core.ingestion import (
    DeadLetterRecorder,
    NotificationDispatcher,
    OrphanSweeper,
    StorageUploader,
)
from document_service.core.ingestion.reconciliation import dead_letter_key, quarantine_prefix
from document_service.models.document import Notification
from document_service.models.outcome import OutcomeStatus
from document_service.models.submission import Submission


def make_notification(correlation_id: str, key: str, bucket: str) -> Notification:
    return Notification(
        correlation_id=correlation_id,
        storage_key=key,
        bucket=bucket,
        etag='"etag"',
        size_bytes=1,
        submitted_at="2026-01-01T12:00:00Z",
    )


@pytest.fixture
def recorder(object_store):
    return DeadLetterRecorder(StorageUploader(object_store))


@pytest.fixture
def sweeper(object_store, queue):
    return OrphanSweeper(object_store, NotificationDispatcher(queue))


def test_dead_letter_key_layout(ingestion_config):
    key = dead_letter_key(ingestion_config, "abc", "FORM/x-a.pdf")
    assert re.fullmatch(r"orphans/abc-[0-9a-f]{16}\.json", key)
    bare = ingestion_config.model_copy(update={"dead_letter_prefix": ""})
    assert dead_letter_key(bare, "abc", "FORM/x-a.pdf") == key.removeprefix("orphans/")


def test_dead_letter_key_differs_per_document(ingestion_config):
    assert dead_letter_key(ingestion_config, "abc", "FORM/a.pdf") != dead_letter_key(ingestion_config, "abc", "FORM/b.pdf")


def test_dead_letter_key_sanitizes_correlation_id(ingestion_config):
    key = dead_letter_key(ingestion_config, "../../x y", "FORM/a.pdf")
    assert key.startswith("orphans/x_y-")
    assert dead_letter_key(ingestion_config, "///", "FORM/a.pdf").startswith("orphans/orphan-")


def test_quarantine_prefix(ingestion_config):
    assert quarantine_prefix(ingestion_config) == "orphans-invalid/"
    assert quarantine_prefix(ingestion_config.model_copy(update={"dead_letter_prefix": ""})) == "invalid/"


def test_record_writes_json(recorder, object_store, ingestion_config):
    notification = make_notification("c-1", "FORM/x-a.pdf", ingestion_config.bucket)

    key = recorder.record(notification, ingestion_config, "NOTIFY_PERMANENT")

    stored = object_store.objects[(ingestion_config.dead_letter_bucket, key)]
    assert stored["content_type"] == "application/json"
    assert stored["metadata"] == {"correlation-id": "c-1", "reason": "NOTIFY_PERMANENT"}
    body = json.loads(stored["body"])
    assert body["notification"]["storage_key"] == "FORM/x-a.pdf"
    assert body["reason"] == "NOTIFY_PERMANENT"


def test_record_requires_bucket(recorder, ingestion_config):
    config = ingestion_config.model_copy(update={"dead_letter_bucket": None})

    with pytest.raises(ValueError):
        recorder.record(make_notification("c", "k", "b"), config, "X")


def test_sweep_redispatches_orphan(coordinator, sweeper, object_store, queue, ingestion_config, aws_error):
    queue.always_fail = aws_error("ThrottlingException", 400, "SendMessage")
    outcome = coordinator.submit(Submission(content=b"x", filename="a.pdf", document_type="FORM"), ingestion_config)
    assert outcome.status is OutcomeStatus.PARTIAL_SUCCESS
    queue.always_fail = None

    report = sweeper.sweep(ingestion_config)

    assert report.scanned == 1
    assert report.redispatched == 1
    assert json.loads(queue.messages[-1]["body"])["storage_key"] == outcome.storage_key
    assert object_store.keys(ingestion_config.dead_letter_bucket) == []


def test_sweep_keeps_record_when_dispatch_fails(recorder, sweeper, object_store, queue, ingestion_config, aws_error):
    object_store.put(ingestion_config.bucket, "FORM/x-a.pdf", b"x", {})
    recorder.record(make_notification("c-1", "FORM/x-a.pdf", ingestion_config.bucket), ingestion_config, "R")
    queue.always_fail = aws_error("AccessDenied", 403, "SendMessage")

    report = sweeper.sweep(ingestion_config)

    assert report.failed == 1
    assert report.redispatched == 0
    assert queue.send_calls == 1
    assert object_store.keys(ingestion_config.dead_letter_bucket) == [
        dead_letter_key(ingestion_config, "c-1", "FORM/x-a.pdf")
    ]


def test_sweep_drops_stale_record(recorder, sweeper, object_store, queue, ingestion_config):
    recorder.record(make_notification("c-1", "FORM/gone.pdf", ingestion_config.bucket), ingestion_config, "R")

    report = sweeper.sweep(ingestion_config)

    assert report.stale == 1
    assert queue.send_calls == 0
    assert object_store.keys(ingestion_config.dead_letter_bucket) == []


def test_sweep_quarantines_invalid_record(sweeper, object_store, queue, ingestion_config):
    object_store.put(ingestion_config.dead_letter_bucket, "orphans/broken.json", b"{not json", {})

    report = sweeper.sweep(ingestion_config)

    assert report.invalid == 1
    assert queue.send_calls == 0
    assert object_store.keys(ingestion_config.dead_letter_bucket) == ["orphans-invalid/broken.json"]
    assert object_store.get(ingestion_config.dead_letter_bucket, "orphans-invalid/broken.json") == b"{not json"


def test_invalid_records_do_not_block_later_orphans(recorder, sweeper, object_store, queue, ingestion_config):
    for name in ("0-broken", "1-broken", "2-broken"):
        object_store.put(ingestion_config.dead_letter_bucket, f"orphans/{name}.json", b"not json", {})
    object_store.put(ingestion_config.bucket, "FORM/x-a.pdf", b"x", {})
    recorder.record(make_notification("c-1", "FORM/x-a.pdf", ingestion_config.bucket), ingestion_config, "R")

    first = sweeper.sweep(ingestion_config, limit=3)
    second = sweeper.sweep(ingestion_config, limit=3)

    assert first.invalid == 3
    assert second.scanned == 1
    assert second.redispatched == 1
    assert json.loads(queue.messages[0]["body"])["storage_key"] == "FORM/x-a.pdf"


def test_quarantine_skipped_without_prefix(sweeper, object_store, queue, ingestion_config):
    config = ingestion_config.model_copy(update={"dead_letter_prefix": ""})
    object_store.put(config.dead_letter_bucket, "broken.json", b"not json", {})

    first = sweeper.sweep(config)
    second = sweeper.sweep(config)

    assert first.invalid == 1
    assert second.scanned == 0
    assert object_store.keys(config.dead_letter_bucket) == ["invalid/broken.json"]


def test_sweep_respects_limit(recorder, sweeper, object_store, ingestion_config):
    for index in range(3):
        key = f"FORM/{index}-a.pdf"
        object_store.put(ingestion_config.bucket, key, b"x", {})
        recorder.record(make_notification(f"c-{index}", key, ingestion_config.bucket), ingestion_config, "R")

    report = sweeper.sweep(ingestion_config, limit=2)

    assert report.scanned == 2
    assert report.redispatched == 2
    assert object_store.keys(ingestion_config.dead_letter_bucket) == [
        dead_letter_key(ingestion_config, "c-2", "FORM/2-a.pdf")
    ]


def test_sweep_ignores_other_prefixes(sweeper, object_store, queue, ingestion_config):
    object_store.put(ingestion_config.dead_letter_bucket, "manual/keep.json", b"{}", {})

    report = sweeper.sweep(ingestion_config)

    assert report.scanned == 0


def test_sweep_without_bucket_is_noop(sweeper, ingestion_config):
    config = ingestion_config.model_copy(update={"dead_letter_bucket": None})

    assert sweeper.sweep(config).scanned == 0


def test_sweep_list_failure_raises(queue, ingestion_config, aws_error):
    class BrokenStore:
        def list_keys(self, bucket, prefix=""):
            raise aws_error("AccessDenied", 403, "ListObjectsV2")

    sweeper = OrphanSweeper(BrokenStore(), NotificationDispatcher(queue))

    with pytest.raises(StorageError) as exc_info:
        sweeper.sweep(ingestion_config)
    assert exc_info.value.operation == "list"

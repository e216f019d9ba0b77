"""Unit tests for NotificationDispatcher."""

import json

import pytest

from document_service.core.exceptions import MessagingError
from document_service.core.ingestion import NotificationDispatcher
from document_service.models.document import Notification


@pytest.fixture
def notification():
    return Notification(
        correlation_id="corr-1",
        storage_key="FORM/abc-a.pdf",
        bucket="docs",
        etag='"etag"',
        size_bytes=10,
        attributes={"filename": "a.pdf"},
        submitted_at="2026-01-01T12:00:00Z",
    )


@pytest.fixture
def dispatcher(queue):
    return NotificationDispatcher(queue)


def test_dispatch_sends_serialized_notification(dispatcher, queue, notification):
    handle = dispatcher.dispatch(notification)

    assert handle.message_id == "msg-1"
    assert handle.queue_url == queue.queue_url
    body = json.loads(queue.messages[0]["body"])
    assert body["storage_key"] == "FORM/abc-a.pdf"
    assert body["correlation_id"] == "corr-1"
    assert body["etag"] == '"etag"'
    assert queue.messages[0]["attributes"] == {
        "correlation_id": "corr-1",
        "storage_key": "FORM/abc-a.pdf",
    }


def test_dispatch_to_explicit_queue(dispatcher, queue, notification):
    handle = dispatcher.dispatch(notification, queue_url="https://sqs/other")

    assert handle.queue_url == "https://sqs/other"
    assert queue.messages[0]["queue_url"] == "https://sqs/other"


def test_dispatch_permanent_failure(dispatcher, queue, notification, aws_error):
    queue.always_fail = aws_error("AWS.SimpleQueueService.NonExistentQueue", 400, "SendMessage")

    with pytest.raises(MessagingError) as exc_info:
        dispatcher.dispatch(notification)

    assert exc_info.value.permanent
    assert queue.send_calls == 1


def test_dispatch_transient_failure(dispatcher, queue, notification, aws_error):
    queue.always_fail = aws_error("ThrottlingException", 400, "SendMessage")

    with pytest.raises(MessagingError) as exc_info:
        dispatcher.dispatch(notification)

    assert exc_info.value.transient


def test_missing_message_id_is_transient(notification):
    class SilentQueue:
        queue_url = "https://sqs/silent"

        def send(self, payload, attributes=None, queue_url=None):
            return None

    with pytest.raises(MessagingError) as exc_info:
        NotificationDispatcher(SilentQueue()).dispatch(notification)

    assert exc_info.value.transient

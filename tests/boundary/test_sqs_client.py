"""Unit tests for SQSNotificationClient against a mocked boto3 client."""

from unittest.mock import MagicMock, patch

import pytest

from document_service.boundary.aws.sqs_client import SQSNotificationClient

QUEUE_URL = "https://sqs.us-east-1.amazonaws.com/000000000000/docs"


@pytest.fixture
def boto_sqs():
    client = MagicMock()
    client.send_message.return_value = {"MessageId": "m-1"}
    return client


@pytest.fixture
def sqs_client(boto_sqs):
    return SQSNotificationClient(queue_url=QUEUE_URL, client=boto_sqs)


def test_default_client_uses_timeout():
    with patch("document_service.boundary.aws.sqs_client.boto3.client") as mock_client:
        SQSNotificationClient(queue_url=QUEUE_URL, region="eu-west-1", timeout=4)

    kwargs = mock_client.call_args.kwargs
    assert kwargs["region_name"] == "eu-west-1"
    assert kwargs["config"].read_timeout == 4
    assert kwargs["config"].retries["max_attempts"] == 1


def test_send_returns_message_id(sqs_client, boto_sqs):
    message_id = sqs_client.send('{"a": 1}', attributes={"correlation_id": "c-1", "storage_key": ""})

    assert message_id == "m-1"
    boto_sqs.send_message.assert_called_once_with(
        QueueUrl=QUEUE_URL,
        MessageBody='{"a": 1}',
        MessageAttributes={"correlation_id": {"DataType": "String", "StringValue": "c-1"}},
    )


def test_send_queue_override(sqs_client, boto_sqs):
    sqs_client.send("{}", queue_url="https://sqs/other")

    assert boto_sqs.send_message.call_args.kwargs["QueueUrl"] == "https://sqs/other"


def test_send_without_message_id(sqs_client, boto_sqs):
    boto_sqs.send_message.return_value = {}

    assert sqs_client.send("{}") is None


def test_send_propagates_client_error(sqs_client, boto_sqs, aws_error):
    error = aws_error("AccessDenied", 403, "SendMessage")
    boto_sqs.send_message.side_effect = error

    with pytest.raises(type(error)):
        sqs_client.send("{}")

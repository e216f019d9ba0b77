"""
SQS notification queue configuration.

Dependencies: pydantic_settings
System role: Notification queue configuration
"""

from pydantic import Field
from pydantic_settings import BaseSettings

from document_service.configs.base import env_config


class SQSNotificationSettings(BaseSettings):
    """Settings for the document notification queue."""

    model_config = env_config("SQS_NOTIFY_")

    queue_url: str = Field(
        default="https://sqs.us-east-1.amazonaws.com/000000000000/claims-documents-dev",
        description="URL of the queue receiving document notifications",
    )
    region: str = Field(
        default="us-east-1",
        description="AWS region for the queue",
    )

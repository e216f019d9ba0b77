"""
AWS boundary modules.

Exports: S3DocumentClient, SQSNotificationClient
"""

from .s3_client import S3DocumentClient
from .sqs_client import SQSNotificationClient

__all__ = ["S3DocumentClient", "SQSNotificationClient"]

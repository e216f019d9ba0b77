"""
S3 client for document bucket operations.

Thin wrapper over boto3: one API call per method, botocore exceptions
propagate to the caller for classification. Botocore's own retries are
disabled so the ingestion coordinator owns the retry budget.

Dependencies: boto3
System role: Object store client for documents and dead-letter records
"""

from collections.abc import Iterator
from typing import Any

import boto3
from botocore.config import Config
from botocore.exceptions import ClientError


class S3DocumentClient:
    """S3 client for document and dead-letter buckets."""

    def __init__(
        self,
        region: str = "us-east-1",
        timeout: float = 30.0,
        client: Any | None = None,
    ) -> None:
        """
        Initialize S3 client.

        Args:
            region: AWS region for S3 buckets
            timeout: Connect and read timeout in seconds for every call
            client: Pre-built boto3 S3 client (tests, custom endpoints)
        """
        self._region = region
        self._s3_client = client or boto3.client(
            "s3",
            region_name=region,
            config=Config(
                connect_timeout=timeout,
                read_timeout=timeout,
                retries={"max_attempts": 1, "mode": "standard"},
            ),
        )

    def put(
        self,
        bucket: str,
        key: str,
        body: bytes,
        properties: dict[str, str],
        content_type: str = "application/octet-stream",
    ) -> dict[str, str | None]:
        """
        Write an object in a single atomic PutObject call.

        Args:
            bucket: Target bucket
            key: Object key
            body: Object bytes
            properties: User metadata stored with the object
            content_type: MIME type of the object

        Returns:
            dict: {"etag": ..., "version_id": ...}; version_id is None
            when bucket versioning is off

        Raises:
            ClientError: S3 rejected the request
            BotoCoreError: Transport-level failure
        """
        response = self._s3_client.put_object(
            Bucket=bucket,
            Key=key,
            Body=body,
            Metadata=properties,
            ContentType=content_type,
        )
        return {
            "etag": response.get("ETag", ""),
            "version_id": response.get("VersionId"),
        }

    def get(self, bucket: str, key: str) -> bytes:
        """Read a whole object into memory."""
        response = self._s3_client.get_object(Bucket=bucket, Key=key)
        return response["Body"].read()

    def delete(self, bucket: str, key: str, version_id: str | None = None) -> None:
        """
        Delete an object, or only one version of it.

        Deleting a missing key is not an error in S3. Without ``version_id``
        a versioned bucket only gains a delete marker.

        Args:
            bucket: Bucket holding the object
            key: Object key
            version_id: Version to remove permanently
        """
        params = {"Bucket": bucket, "Key": key}
        if version_id:
            params["VersionId"] = version_id
        self._s3_client.delete_object(**params)

    def list_keys(self, bucket: str, prefix: str = "") -> Iterator[str]:
        """
        Iterate object keys under a prefix.

        Args:
            bucket: Bucket to list
            prefix: Key prefix filter

        Yields:
            str: Object keys in lexicographic order
        """
        paginator = self._s3_client.get_paginator("list_objects_v2")
        for page in paginator.paginate(Bucket=bucket, Prefix=prefix):
            for item in page.get("Contents", []):
                yield item["Key"]

    def file_exists(self, bucket: str, key: str) -> bool:
        """
        Check if a file exists in S3.

        Args:
            bucket: Bucket to check
            key: S3 object key to check

        Returns:
            bool: True if file exists, False otherwise
        """
        try:
            self._s3_client.head_object(Bucket=bucket, Key=key)
            return True
        except ClientError as e:
            if e.response.get("Error", {}).get("Code") in ("404", "NoSuchKey", "NotFound"):
                return False
            raise

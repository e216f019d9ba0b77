"""
Storage uploader.

Performs the durable write of a submitted document and classifies failures
as transient or permanent.

Dependencies: botocore, document_service.boundary.aws
System role: Third stage of the ingestion flow
"""

import logging

from document_service.boundary.aws.s3_client import S3DocumentClient
from document_service.core.ingestion.error_classification import AwsError, storage_error_from
from document_service.models.document import AttributeSet, UploadDescriptor

logger = logging.getLogger(__name__)


class StorageUploader:
    """Writes documents to the object store, one atomic put per call."""

    def __init__(self, s3_client: S3DocumentClient) -> None:
        self._s3_client = s3_client

    def upload(
        self,
        bucket: str,
        key: str,
        content: bytes,
        attributes: AttributeSet,
        content_type: str = "application/octet-stream",
    ) -> UploadDescriptor:
        """
        Write a document.

        Args:
            bucket: Target bucket
            key: Storage key
            content: Document bytes
            attributes: Stored as object metadata
            content_type: MIME type recorded on the object

        Returns:
            UploadDescriptor: Key, etag, version and size of the stored object

        Raises:
            StorageError: Write failed; ``transient`` tells whether a retry may help
        """
        try:
            result = self._s3_client.put(
                bucket=bucket,
                key=key,
                body=content,
                properties=attributes,
                content_type=content_type,
            )
        except AwsError as e:
            error = storage_error_from(e, "put", key)
            logger.warning(
                f"{__name__}:upload - {error.error_code}",
                extra={"bucket": bucket, "s3_key": key, "transient": error.transient},
            )
            raise error from e

        logger.info(
            f"{__name__}:upload - Stored object",
            extra={"bucket": bucket, "s3_key": key, "size_bytes": len(content)},
        )
        return UploadDescriptor(
            key=key,
            bucket=bucket,
            etag=result.get("etag") or "",
            version_id=result.get("version_id"),
            size_bytes=len(content),
        )

    def delete(self, bucket: str, key: str, version_id: str | None = None) -> None:
        """
        Remove a stored document (compensating action).

        Args:
            bucket: Bucket holding the document
            key: Storage key
            version_id: Remove only this version, leaving earlier writes of
                the same key in place

        Raises:
            StorageError: Delete failed
        """
        try:
            self._s3_client.delete(bucket=bucket, key=key, version_id=version_id)
        except AwsError as e:
            raise storage_error_from(e, "delete", key) from e
        logger.info(
            f"{__name__}:delete - Removed object",
            extra={"bucket": bucket, "s3_key": key, "version_id": version_id},
        )

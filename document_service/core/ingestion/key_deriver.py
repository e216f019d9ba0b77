"""
Storage key derivation.

Keys are content-addressed: the same bytes under the same identity always map
to the same key, so a retried submission overwrites instead of duplicating,
while different content under the same filename gets a distinct key.

Format: {prefix}/{document_type}/{participant_id}/{sha256[:16]}-{filename}

Dependencies: None
System role: Second stage of the ingestion flow
"""

from document_service.core.exceptions import InvalidSubmissionError
from document_service.core.ingestion.attribute_resolver import (
    sanitize_filename,
    sanitize_segment,
)
from document_service.models.document import AttributeSet
from document_service.models.submission import Submission

DIGEST_LENGTH = 16
UNCLASSIFIED_SEGMENT = "unclassified"


def derive_storage_key(
    submission: Submission,
    attributes: AttributeSet,
    prefix: str = "",
) -> str:
    """
    Compute the storage key for a submission.

    Args:
        submission: Submission being ingested
        attributes: Attributes resolved from the same submission
        prefix: Optional logical prefix, may contain ``/``

    Returns:
        str: Non-empty, path-safe storage key

    Raises:
        InvalidSubmissionError: Filename absent or blank
    """
    if submission.filename is None or not submission.filename.strip():
        raise InvalidSubmissionError("Submission filename is required", field="filename")

    digest = (attributes.get("content-sha256") or submission.content_sha256)[:DIGEST_LENGTH]
    filename = attributes.get("filename") or sanitize_filename(submission.filename)

    segments = [sanitize_segment(part) for part in prefix.split("/")]
    identity = [
        attributes.get("document-type") or sanitize_segment(submission.document_type),
        attributes.get("participant-id") or sanitize_segment(submission.participant_id),
    ]
    if not any(identity):
        identity = [UNCLASSIFIED_SEGMENT]
    segments.extend(identity)
    segments.append(f"{digest}-{filename}")

    return "/".join(segment for segment in segments if segment)

"""
Attribute resolution for submissions.

Derives the canonical property map stored as S3 user metadata and carried in
the notification. Pure: no I/O, no clock.

Dependencies: None
System role: First stage of the ingestion flow
"""

import re
import unicodedata

from document_service.models.document import AttributeSet
from document_service.models.submission import Submission

DEFAULT_FILENAME = "document"
DEFAULT_CONTENT_TYPE = "application/octet-stream"
SOURCE = "document-service"
MAX_FILENAME_LENGTH = 128

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]+")
_MIME_TYPE = re.compile(r"^[a-z0-9][a-z0-9!#$&^_.+-]*/[a-z0-9][a-z0-9!#$&^_.+-]*$")


def _to_ascii(value: str) -> str:
    return unicodedata.normalize("NFKD", value).encode("ascii", "ignore").decode("ascii")


def sanitize_segment(value: str | None) -> str:
    """
    Reduce a free-form identifier to a path-safe key segment.

    Args:
        value: Raw identifier (document type, participant id)

    Returns:
        str: Segment of ``[A-Za-z0-9._-]``, empty when nothing survives
    """
    if not value:
        return ""
    cleaned = _UNSAFE_CHARS.sub("_", _to_ascii(value).strip())
    return cleaned.strip("._")


def sanitize_filename(filename: str | None) -> str:
    """
    Reduce a client filename to a safe basename.

    Directory components are dropped, characters outside ``[A-Za-z0-9._-]``
    collapse to ``_`` and overlong names are shortened keeping the extension.
    Anything that sanitizes to nothing becomes ``document``.
    """
    if not filename:
        return DEFAULT_FILENAME

    basename = filename.replace("\\", "/").rsplit("/", 1)[-1]
    cleaned = _UNSAFE_CHARS.sub("_", _to_ascii(basename).strip()).strip("._")
    if not cleaned:
        return DEFAULT_FILENAME

    if len(cleaned) > MAX_FILENAME_LENGTH:
        stem, dot, ext = cleaned.rpartition(".")
        if dot and 0 < len(ext) < 16:
            cleaned = stem[: MAX_FILENAME_LENGTH - len(ext) - 1] + "." + ext
        else:
            cleaned = cleaned[:MAX_FILENAME_LENGTH]
    return cleaned


def normalize_content_type(content_type: str | None) -> str:
    """Return the bare ``type/subtype`` or the octet-stream default."""
    if not content_type:
        return DEFAULT_CONTENT_TYPE
    mime = content_type.split(";", 1)[0].strip().lower()
    return mime if _MIME_TYPE.match(mime) else DEFAULT_CONTENT_TYPE


def resolve_attributes(submission: Submission) -> AttributeSet:
    """
    Derive the attribute set for a submission.

    Args:
        submission: Submission being ingested

    Returns:
        AttributeSet: ASCII-only string map, identical for identical submissions
    """
    return {
        "filename": sanitize_filename(submission.filename),
        "content-type": normalize_content_type(submission.content_type),
        "content-length": str(submission.size_bytes),
        "content-sha256": submission.content_sha256,
        "document-type": sanitize_segment(submission.document_type),
        "participant-id": sanitize_segment(submission.participant_id),
        "source": SOURCE,
    }

"""
Document catalog.

Static reference list of claims document types accepted by the service.

Dependencies: document_service.models
System role: Document type lookup for the transport layer
"""

from document_service.models.document_type import DocumentType

PDF = "application/pdf"
IMAGES = ["image/jpeg", "image/png", "image/tiff"]

DOCUMENT_TYPES: tuple[DocumentType, ...] = (
    DocumentType(
        code="FORM",
        description="Completed claim application form",
        accepted_content_types=[PDF],
    ),
    DocumentType(
        code="MEDICAL_RECORD",
        description="Medical treatment or examination record",
        accepted_content_types=[PDF, *IMAGES],
    ),
    DocumentType(
        code="SERVICE_RECORD",
        description="Record of service or employment history",
        accepted_content_types=[PDF, *IMAGES],
    ),
    DocumentType(
        code="EVIDENCE",
        description="Supporting evidence submitted with a claim",
        accepted_content_types=[PDF, *IMAGES, "text/plain"],
    ),
    DocumentType(
        code="CORRESPONDENCE",
        description="Letters and statements from the claimant or third parties",
        accepted_content_types=[PDF, "text/plain"],
    ),
)


class DocumentCatalog:
    """Lookup over the known document types."""

    def __init__(self, document_types: tuple[DocumentType, ...] = DOCUMENT_TYPES) -> None:
        self._types = {doc_type.code: doc_type for doc_type in document_types}

    def list_types(self) -> list[DocumentType]:
        return list(self._types.values())

    def is_known(self, code: str | None) -> bool:
        return bool(code) and code in self._types

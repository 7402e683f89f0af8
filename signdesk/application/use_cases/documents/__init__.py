"""Document use cases: lookup of the logical document and storage of the final file."""

from signdesk.application.use_cases.documents.document_operations import (
    DocumentLookupService,
    SignedDocumentService,
)

__all__ = ["DocumentLookupService", "SignedDocumentService"]

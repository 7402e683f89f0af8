"""Domain entities: documents and signature snapshots."""

from signdesk.domain.entities.document import DocumentEntity
from signdesk.domain.entities.signature import SignatureSet

__all__ = ["DocumentEntity", "SignatureSet"]

"""Document domain entity.

A document is the logical record behind one generated artifact for one
participant of one training. There is exactly one per
(document_type, training_id, participant_id); it is created lazily the
first time a viewer opens it.
"""

from dataclasses import dataclass
from datetime import datetime

from signdesk.domain.enums import DocumentStatus, DocumentType


@dataclass
class DocumentEntity:
    """Domain entity for a generated training document."""

    id: str
    document_type: DocumentType
    training_id: str
    participant_id: str
    title: str | None
    status: DocumentStatus
    need_stamp: bool
    created_at: datetime | None = None

    def matches(
        self, document_type: DocumentType, training_id: str, participant_id: str
    ) -> bool:
        """Return whether this document is the one for the given context keys."""
        return (
            self.document_type == document_type
            and self.training_id == training_id
            and self.participant_id == participant_id
        )

    def requires_stamp(self) -> bool:
        """Conventions always carry seals regardless of the stored flag."""
        return self.need_stamp or self.document_type == DocumentType.CONVENTION

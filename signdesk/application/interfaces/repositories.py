"""Repository interfaces (ports) for the application layer.

Protocols define contracts that infrastructure implementations must fulfill (DIP).
All types reference application DTOs or domain entities only; no infrastructure imports.
Read methods raise StoreReadFailed and write methods raise StoreWriteFailed
when the backend call fails.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from signdesk.application.dtos.document import (
        DocumentCreate,
        DocumentFileCreate,
        OrganizationSettings,
        SignatureRecordCreate,
        SignatureRecordResult,
    )
    from signdesk.domain.entities.document import DocumentEntity
    from signdesk.domain.enums import DocumentType, SignerRole


# Document repository interface
class IDocumentRepository(Protocol):
    """Protocol for the documents record set keyed by (type, training, participant)."""

    async def get_by_context(
        self,
        document_type: DocumentType,
        training_id: str,
        participant_id: str,
    ) -> DocumentEntity | None:
        """Return the document for the context keys, or None."""

    async def create_document(self, data: DocumentCreate) -> DocumentEntity:
        """Insert a new document row and return it."""

    async def update_need_stamp(self, document_id: str, need_stamp: bool) -> None:
        """Persist the need_stamp flag for a document."""

    async def create_file_record(self, data: DocumentFileCreate) -> None:
        """Insert a row pointing at a generated file (e.g. the final signed PDF)."""

    async def get_latest_file_url(
        self,
        document_type: DocumentType,
        training_id: str,
        participant_id: str,
    ) -> str | None:
        """Return the newest generated file URL for the context, or None."""


# Signature repository interface
class ISignatureRepository(Protocol):
    """Protocol for signature pointer records."""

    async def get_latest(
        self,
        training_id: str,
        document_type: DocumentType,
        signer_role: SignerRole,
        user_id: str | None = None,
    ) -> SignatureRecordResult | None:
        """Return the most recent record for the role (created_at desc), or None."""

    async def create(self, data: SignatureRecordCreate) -> SignatureRecordResult:
        """Insert a signature record and return it."""


# Settings repository interface
class ISettingsRepository(Protocol):
    """Protocol for the organization-wide settings record."""

    async def get_organization_settings(self) -> OrganizationSettings | None:
        """Return the settings record, or None when no row exists."""

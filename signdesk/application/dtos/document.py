"""DTOs for document and signature use cases (no dependency on the REST client)."""

from dataclasses import dataclass
from datetime import datetime

from signdesk.domain.enums import DocumentStatus, DocumentType, SignerRole


@dataclass(frozen=True)
class DocumentCreate:
    """Input for creating a document record. Use case builds this; repo persists and returns DocumentEntity."""

    id: str
    document_type: DocumentType
    training_id: str
    participant_id: str
    status: DocumentStatus
    need_stamp: bool
    title: str | None = None


@dataclass(frozen=True)
class DocumentFileCreate:
    """Input for recording a final generated file (e.g. the signed PDF)."""

    id: str
    document_type: DocumentType
    training_id: str
    participant_id: str
    title: str
    file_url: str
    created_by: str


@dataclass(frozen=True)
class SignatureRecordCreate:
    """Pointer row for one uploaded signature or seal image."""

    id: str
    document_id: str | None
    training_id: str
    user_id: str | None
    document_type: DocumentType
    signer_role: SignerRole
    title: str
    image_url: str
    storage_path: str
    created_by: str


@dataclass(frozen=True)
class SignatureRecordResult:
    """Signature record read-model (latest per role wins)."""

    id: str
    document_id: str | None
    training_id: str
    user_id: str | None
    document_type: DocumentType
    signer_role: SignerRole
    image_url: str
    storage_path: str | None
    created_at: datetime | None
    created_by: str | None


@dataclass(frozen=True)
class OrganizationSettings:
    """Organization-wide settings relevant to signing (the training organization's seal)."""

    organization_seal_url: str | None = None
    organization_seal_path: str | None = None

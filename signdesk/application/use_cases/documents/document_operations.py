"""Document operations: get-or-create the logical document and store the final signed file."""

from __future__ import annotations

import logging
import re
import unicodedata

from signdesk.application.dtos.document import DocumentCreate, DocumentFileCreate
from signdesk.application.interfaces.repositories import IDocumentRepository
from signdesk.application.interfaces.services import ISessionProvider
from signdesk.application.interfaces.storage import IStorageService
from signdesk.domain.entities.document import DocumentEntity
from signdesk.domain.enums import DocumentStatus, DocumentType
from signdesk.domain.exceptions import (
    AuthenticationRequired,
    StoreException,
    StoreWriteFailed,
    ValidationException,
)
from signdesk.domain.signature_policy import parse_document_type
from signdesk.shared.utils.generators import generate_cuid

logger = logging.getLogger(__name__)

_BUCKET_BY_TYPE: dict[DocumentType, str] = {
    DocumentType.CONVENTION: "agreements",
    DocumentType.ATTESTATION: "certificates",
    DocumentType.COMPLETION_CERTIFICATE: "certificates",
    DocumentType.ATTENDANCE_SHEET: "attendance-sheets",
}
_DEFAULT_BUCKET = "documents"

_TITLE_BY_TYPE: dict[DocumentType, str] = {
    DocumentType.CONVENTION: "Training agreement",
    DocumentType.ATTESTATION: "Training attestation",
    DocumentType.COMPLETION_CERTIFICATE: "Completion certificate",
    DocumentType.ATTENDANCE_SHEET: "Attendance sheet",
    DocumentType.QUOTE: "Quote",
    DocumentType.INVOICE: "Invoice",
    DocumentType.PROGRAM: "Training program",
    DocumentType.OTHER: "Document",
}

_UNSAFE_NAME_CHARS = re.compile(r"[^A-Za-z0-9_-]+")


def bucket_for(document_type: DocumentType) -> str:
    """Storage bucket that holds final files of document_type."""
    return _BUCKET_BY_TYPE.get(document_type, _DEFAULT_BUCKET)


def _sanitize_name(name: str | None) -> str:
    """Ascii-fold and collapse a person name into a storage-safe key segment."""
    folded = (
        unicodedata.normalize("NFKD", name or "")
        .encode("ascii", "ignore")
        .decode("ascii")
    )
    safe = _UNSAFE_NAME_CHARS.sub("_", folded).strip("_")
    return safe or "participant"


class DocumentLookupService:
    """Single responsibility: find or lazily create the one document per context."""

    def __init__(self, document_repo: IDocumentRepository) -> None:
        self.document_repo = document_repo

    async def get_or_create(
        self,
        document_type: DocumentType | str,
        training_id: str,
        participant_id: str,
    ) -> DocumentEntity:
        """Return the document for (type, training, participant), creating a draft if absent.

        Conventions always need a stamp; a stored convention with need_stamp
        false is corrected and persisted.
        """
        document_type = parse_document_type(document_type)
        if not training_id or not participant_id:
            raise ValidationException(
                "training_id and participant_id are required", field="training_id"
            )
        existing = await self.document_repo.get_by_context(
            document_type, training_id, participant_id
        )
        if existing is not None:
            if existing.requires_stamp() and not existing.need_stamp:
                await self.document_repo.update_need_stamp(existing.id, True)
                existing.need_stamp = True
                logger.info("Corrected need_stamp on convention %s", existing.id)
            return existing

        create_dto = DocumentCreate(
            id=generate_cuid(),
            document_type=document_type,
            training_id=training_id,
            participant_id=participant_id,
            status=DocumentStatus.DRAFT,
            need_stamp=document_type == DocumentType.CONVENTION,
            title=_TITLE_BY_TYPE[document_type],
        )
        document = await self.document_repo.create_document(create_dto)
        logger.info(
            "Created %s document %s for training=%s participant=%s",
            document_type.value,
            document.id,
            training_id,
            participant_id,
        )
        return document


class SignedDocumentService:
    """Single responsibility: store the final rendered PDF and look it up again."""

    def __init__(
        self,
        storage_service: IStorageService,
        document_repo: IDocumentRepository,
        session_provider: ISessionProvider,
    ) -> None:
        self.storage = storage_service
        self.document_repo = document_repo
        self.session_provider = session_provider

    async def save_document(
        self,
        pdf_bytes: bytes,
        document_type: DocumentType | str,
        training_id: str,
        participant_id: str,
        participant_name: str | None = None,
    ) -> str:
        """Upload the PDF to the type's bucket, record it, and return its public URL."""
        document_type = parse_document_type(document_type)
        session = await self.session_provider.get_session()
        if session is None:
            raise AuthenticationRequired()
        if not pdf_bytes:
            raise ValidationException("Document content is empty", field="pdf")

        bucket = bucket_for(document_type)
        path = (
            f"{document_type.value}_{training_id}_{_sanitize_name(participant_name)}"
            f"_{generate_cuid()}.pdf"
        )
        try:
            await self.storage.upload(
                pdf_bytes,
                bucket,
                path,
                "application/pdf",
                metadata={"training_id": training_id, "participant_id": participant_id},
            )
            url = await self.storage.get_public_url(bucket, path)
        except StoreWriteFailed:
            raise
        except StoreException as e:
            raise StoreWriteFailed("upload", e.message) from e

        await self.document_repo.create_file_record(
            DocumentFileCreate(
                id=generate_cuid(),
                document_type=document_type,
                training_id=training_id,
                participant_id=participant_id,
                title=_TITLE_BY_TYPE[document_type],
                file_url=url,
                created_by=session.user_id,
            )
        )
        logger.info("Stored %s file for training=%s at %s", document_type.value, training_id, path)
        return url

    async def get_last_document(
        self,
        document_type: DocumentType | str,
        training_id: str,
        participant_id: str,
    ) -> str | None:
        """Return the newest stored file URL for the context, or None."""
        return await self.document_repo.get_latest_file_url(
            parse_document_type(document_type), training_id, participant_id
        )

"""Unit tests for document operations (lookup, signed file storage, name sanitization)."""

from unittest.mock import AsyncMock

import pytest

from signdesk.application.use_cases.documents import (
    DocumentLookupService,
    SignedDocumentService,
)
from signdesk.application.use_cases.documents.document_operations import (
    _sanitize_name,
    bucket_for,
)
from signdesk.domain.entities.document import DocumentEntity
from signdesk.domain.enums import DocumentStatus, DocumentType
from signdesk.domain.exceptions import (
    AuthenticationRequired,
    StoreWriteFailed,
    ValidationException,
)
from signdesk.infrastructure.exceptions import StorageUploadError

PDF = b"%PDF-1.7\n%fake"


class TestSanitizeName:
    def test_accents_are_folded(self) -> None:
        assert _sanitize_name("Zoé Müller") == "Zoe_Muller"

    def test_unsafe_characters_collapse(self) -> None:
        assert _sanitize_name("../a b/c") == "a_b_c"

    @pytest.mark.parametrize("name", [None, "", "   ", "***"])
    def test_falls_back_to_participant(self, name) -> None:
        assert _sanitize_name(name) == "participant"


class TestBucketFor:
    def test_known_types(self) -> None:
        assert bucket_for(DocumentType.CONVENTION) == "agreements"
        assert bucket_for(DocumentType.COMPLETION_CERTIFICATE) == "certificates"
        assert bucket_for(DocumentType.ATTENDANCE_SHEET) == "attendance-sheets"

    def test_default(self) -> None:
        assert bucket_for(DocumentType.INVOICE) == "documents"


class TestDocumentLookupService:
    async def test_creates_draft_once(self, document_repo) -> None:
        service = DocumentLookupService(document_repo)
        first = await service.get_or_create("attestation", "t1", "p1")
        second = await service.get_or_create(DocumentType.ATTESTATION, "t1", "p1")

        assert first.id == second.id
        assert first.status == DocumentStatus.DRAFT
        assert first.need_stamp is False
        assert first.title == "Training attestation"
        assert len(document_repo.documents) == 1

    async def test_new_convention_needs_stamp(self, document_repo) -> None:
        doc = await DocumentLookupService(document_repo).get_or_create(
            DocumentType.CONVENTION, "t1", "p1"
        )
        assert doc.need_stamp is True

    async def test_corrects_stored_convention_without_stamp(self, document_repo) -> None:
        document_repo.documents["doc-1"] = DocumentEntity(
            id="doc-1",
            document_type=DocumentType.CONVENTION,
            training_id="t1",
            participant_id="p1",
            title=None,
            status=DocumentStatus.DRAFT,
            need_stamp=False,
        )
        doc = await DocumentLookupService(document_repo).get_or_create(
            DocumentType.CONVENTION, "t1", "p1"
        )
        assert doc.need_stamp is True
        assert document_repo.need_stamp_updates == [("doc-1", True)]

    @pytest.mark.parametrize(("training_id", "participant_id"), [("", "p1"), ("t1", "")])
    async def test_requires_ids(self, document_repo, training_id, participant_id) -> None:
        with pytest.raises(ValidationException):
            await DocumentLookupService(document_repo).get_or_create(
                DocumentType.QUOTE, training_id, participant_id
            )

    async def test_unknown_type(self, document_repo) -> None:
        with pytest.raises(ValidationException):
            await DocumentLookupService(document_repo).get_or_create("memo", "t1", "p1")


class TestSignedDocumentService:
    async def test_stores_pdf_and_records_file(
        self, storage, document_repo, session_provider
    ) -> None:
        service = SignedDocumentService(storage, document_repo, session_provider)
        url = await service.save_document(
            PDF, DocumentType.CONVENTION, "t1", "p1", participant_name="Zoé Müller"
        )

        assert url.startswith("http://storage.test/agreements/convention_t1_Zoe_Muller_")
        assert url.endswith(".pdf")
        record = document_repo.files[-1]
        assert record.file_url == url
        assert record.created_by == "user-1"
        assert record.title == "Training agreement"
        assert await service.get_last_document("convention", "t1", "p1") == url

    async def test_last_document_none_when_nothing_stored(
        self, storage, document_repo, session_provider
    ) -> None:
        service = SignedDocumentService(storage, document_repo, session_provider)
        assert await service.get_last_document(DocumentType.QUOTE, "t1", "p1") is None

    async def test_requires_session(self, storage, document_repo, session_provider) -> None:
        session_provider.session = None
        service = SignedDocumentService(storage, document_repo, session_provider)
        with pytest.raises(AuthenticationRequired):
            await service.save_document(PDF, DocumentType.QUOTE, "t1", "p1")

    async def test_rejects_empty_pdf(self, storage, document_repo, session_provider) -> None:
        service = SignedDocumentService(storage, document_repo, session_provider)
        with pytest.raises(ValidationException):
            await service.save_document(b"", DocumentType.QUOTE, "t1", "p1")

    async def test_upload_failure_records_nothing(self, document_repo, session_provider) -> None:
        storage = AsyncMock()
        storage.upload.side_effect = StorageUploadError("documents/x.pdf", "quota")
        service = SignedDocumentService(storage, document_repo, session_provider)
        with pytest.raises(StoreWriteFailed):
            await service.save_document(PDF, DocumentType.INVOICE, "t1", "p1")
        assert document_repo.files == []

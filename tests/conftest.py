"""Pytest configuration and fixtures for signdesk.

Environment is set before signdesk.main is imported: local storage in a
temp directory and a known JWT secret. Repositories are in-memory fakes
that follow the repository protocols, including their store errors.
"""

import base64
import itertools
import os
import tempfile
from datetime import timedelta

import pytest
from httpx import ASGITransport, AsyncClient

os.environ["STORAGE_BACKEND"] = "local"
os.environ["STORAGE_ROOT"] = tempfile.mkdtemp(prefix="signdesk-test-")
os.environ["STORAGE_BASE_URL"] = "http://storage.test"
os.environ["SUPABASE_URL"] = ""
os.environ["SUPABASE_JWT_SECRET"] = "test-jwt-secret"
os.environ["LLM_API_KEY"] = ""

from signdesk.application.dtos.auth import AuthSession  # noqa: E402
from signdesk.application.dtos.document import (  # noqa: E402
    DocumentCreate,
    DocumentFileCreate,
    OrganizationSettings,
    SignatureRecordCreate,
    SignatureRecordResult,
)
from signdesk.application.services.signature_coordinator import (  # noqa: E402
    SignatureCoordinator,
)
from signdesk.application.use_cases.documents import DocumentLookupService  # noqa: E402
from signdesk.core.config import get_settings  # noqa: E402
from signdesk.domain.entities.document import DocumentEntity  # noqa: E402
from signdesk.domain.enums import DocumentType, SignerRole  # noqa: E402
from signdesk.domain.exceptions import StoreReadFailed, StoreWriteFailed  # noqa: E402
from signdesk.infrastructure.external.storage.local_storage import (  # noqa: E402
    LocalStorageService,
)
from signdesk.shared.utils.datetime import utc_now  # noqa: E402

get_settings.cache_clear()

from signdesk.main import app  # noqa: E402

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00\x00\x00\rIHDR" + b"\x00" * 17
PNG_DATA_URL = "data:image/png;base64," + base64.b64encode(PNG_BYTES).decode()


class FakeSignatureRepository:
    """In-memory document_signatures table; newest created_at wins."""

    def __init__(self) -> None:
        self.records: list[SignatureRecordResult] = []
        self.read_failures: set[SignerRole] = set()
        self.fail_create = False
        self.get_latest_calls: list[tuple[SignerRole, str | None]] = []
        self._clock = itertools.count()

    def add(
        self,
        training_id: str,
        document_type: DocumentType,
        role: SignerRole,
        url: str,
        user_id: str | None = None,
    ) -> None:
        self.records.append(
            SignatureRecordResult(
                id=f"sig-{len(self.records)}",
                document_id=None,
                training_id=training_id,
                user_id=user_id,
                document_type=document_type,
                signer_role=role,
                image_url=url,
                storage_path=None,
                created_at=utc_now() + timedelta(seconds=next(self._clock)),
                created_by="seed",
            )
        )

    async def get_latest(
        self,
        training_id: str,
        document_type: DocumentType,
        signer_role: SignerRole,
        user_id: str | None = None,
    ) -> SignatureRecordResult | None:
        self.get_latest_calls.append((signer_role, user_id))
        if signer_role in self.read_failures:
            raise StoreReadFailed(f"get_latest:{signer_role.value}", "boom")
        matches = [
            r
            for r in self.records
            if r.training_id == training_id
            and r.document_type == document_type
            and r.signer_role == signer_role
            and r.user_id == user_id
        ]
        return max(matches, key=lambda r: r.created_at) if matches else None

    async def create(self, data: SignatureRecordCreate) -> SignatureRecordResult:
        if self.fail_create:
            raise StoreWriteFailed("insert_signature", "boom")
        self.add(
            data.training_id,
            data.document_type,
            data.signer_role,
            data.image_url,
            user_id=data.user_id,
        )
        return self.records[-1]


class FakeSettingsRepository:
    """Single organization settings row."""

    def __init__(self, settings: OrganizationSettings | None = None) -> None:
        self.settings = settings
        self.fail = False

    async def get_organization_settings(self) -> OrganizationSettings | None:
        if self.fail:
            raise StoreReadFailed("get_organization_settings", "boom")
        return self.settings


class FakeDocumentRepository:
    """In-memory documents table."""

    def __init__(self) -> None:
        self.documents: dict[str, DocumentEntity] = {}
        self.files: list[DocumentFileCreate] = []
        self.need_stamp_updates: list[tuple[str, bool]] = []

    async def get_by_context(
        self, document_type: DocumentType, training_id: str, participant_id: str
    ) -> DocumentEntity | None:
        for doc in self.documents.values():
            if doc.matches(document_type, training_id, participant_id):
                return doc
        return None

    async def create_document(self, data: DocumentCreate) -> DocumentEntity:
        doc = DocumentEntity(
            id=data.id,
            document_type=data.document_type,
            training_id=data.training_id,
            participant_id=data.participant_id,
            title=data.title,
            status=data.status,
            need_stamp=data.need_stamp,
            created_at=utc_now(),
        )
        self.documents[doc.id] = doc
        return doc

    async def update_need_stamp(self, document_id: str, need_stamp: bool) -> None:
        self.need_stamp_updates.append((document_id, need_stamp))
        self.documents[document_id].need_stamp = need_stamp

    async def create_file_record(self, data: DocumentFileCreate) -> None:
        self.files.append(data)

    async def get_latest_file_url(
        self, document_type: DocumentType, training_id: str, participant_id: str
    ) -> str | None:
        for f in reversed(self.files):
            if (f.document_type, f.training_id, f.participant_id) == (
                document_type,
                training_id,
                participant_id,
            ):
                return f.file_url
        return None


class FakeSessionProvider:
    """Fixed session (or none)."""

    def __init__(self, session: AuthSession | None) -> None:
        self.session = session

    async def get_session(self) -> AuthSession | None:
        return self.session


@pytest.fixture
def png_data_url() -> str:
    return PNG_DATA_URL


@pytest.fixture
def signature_repo() -> FakeSignatureRepository:
    return FakeSignatureRepository()


@pytest.fixture
def settings_repo() -> FakeSettingsRepository:
    return FakeSettingsRepository()


@pytest.fixture
def document_repo() -> FakeDocumentRepository:
    return FakeDocumentRepository()


@pytest.fixture
def session_provider() -> FakeSessionProvider:
    return FakeSessionProvider(AuthSession(user_id="user-1", email="u@example.com"))


@pytest.fixture
def storage(tmp_path) -> LocalStorageService:
    return LocalStorageService(str(tmp_path / "storage"), base_url="http://storage.test")


@pytest.fixture
def make_coordinator(signature_repo, settings_repo, document_repo, session_provider, storage):
    """Factory for coordinators wired to the in-memory fakes."""

    def _make(
        document_type: DocumentType | str = DocumentType.CONVENTION,
        view: str = "crm",
        training_id: str = "training-1",
        participant_id: str = "participant-1",
        **kwargs,
    ) -> SignatureCoordinator:
        return SignatureCoordinator(
            document_type,
            training_id,
            participant_id,
            view,
            signature_repo=signature_repo,
            settings_repo=settings_repo,
            storage=storage,
            session_provider=session_provider,
            document_lookup=DocumentLookupService(document_repo),
            **kwargs,
        )

    return _make


@pytest.fixture
async def client() -> AsyncClient:
    """Async HTTP client against the FastAPI app (ASGI)."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

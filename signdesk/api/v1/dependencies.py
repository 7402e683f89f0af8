"""Presentation-layer dependency injection (composition root).

Provides FastAPI Depends() for repositories, storage, the session and the
application services. Use cases are built from infrastructure
implementations here; routes depend only on these dependencies.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from typing import Annotated

from fastapi import Depends, HTTPException, Query, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from signdesk.application.dtos.auth import AuthSession
from signdesk.application.interfaces.storage import IStorageService
from signdesk.application.services.questionnaire_generation import QuestionnaireGenerator
from signdesk.application.services.signature_coordinator import SignatureCoordinator
from signdesk.application.use_cases.documents import (
    DocumentLookupService,
    SignedDocumentService,
)
from signdesk.core.config import get_settings
from signdesk.domain.enums import DocumentType, ViewContext
from signdesk.domain.exceptions import AuthenticationRequired
from signdesk.infrastructure.external.llm import ChatCompletionClient
from signdesk.infrastructure.security.session import BearerSessionProvider
from signdesk.infrastructure.supabase._rest_client import SupabaseRESTClient
from signdesk.infrastructure.supabase.client import get_supabase_client
from signdesk.infrastructure.supabase.repositories import (
    SupabaseDocumentRepository,
    SupabaseSettingsRepository,
    SupabaseSignatureRepository,
)

_http_bearer = HTTPBearer(auto_error=False)


# ---- Session ----


def get_session_provider(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(_http_bearer)],
) -> BearerSessionProvider:
    """Session provider for the request's bearer token (None token means anonymous)."""
    return BearerSessionProvider(credentials.credentials if credentials else None)


async def get_current_session(
    provider: Annotated[BearerSessionProvider, Depends(get_session_provider)],
) -> AuthSession:
    """Return the signed-in session; raise AuthenticationRequired (401) if missing or invalid."""
    session = await provider.get_session()
    if session is None:
        raise AuthenticationRequired()
    return session


# ---- Backend ----


def get_backend_client() -> SupabaseRESTClient:
    """Return the Supabase REST client; 503 when the backend is not configured."""
    client = get_supabase_client()
    if client is None:
        raise HTTPException(status_code=503, detail="Signature backend not configured")
    return client


def get_storage(request: Request) -> IStorageService:
    """Storage service built at startup (see core.lifespan)."""
    return request.app.state.storage


def get_signature_repo(
    client: Annotated[SupabaseRESTClient, Depends(get_backend_client)],
) -> SupabaseSignatureRepository:
    return SupabaseSignatureRepository(client, get_settings().signatures_table)


def get_settings_repo(
    client: Annotated[SupabaseRESTClient, Depends(get_backend_client)],
) -> SupabaseSettingsRepository:
    return SupabaseSettingsRepository(client, get_settings().settings_table)


def get_document_repo(
    client: Annotated[SupabaseRESTClient, Depends(get_backend_client)],
) -> SupabaseDocumentRepository:
    return SupabaseDocumentRepository(client, get_settings().documents_table)


# ---- Use cases ----


def get_document_lookup_service(
    document_repo: Annotated[SupabaseDocumentRepository, Depends(get_document_repo)],
) -> DocumentLookupService:
    return DocumentLookupService(document_repo)


def get_signed_document_service(
    storage: Annotated[IStorageService, Depends(get_storage)],
    document_repo: Annotated[SupabaseDocumentRepository, Depends(get_document_repo)],
    provider: Annotated[BearerSessionProvider, Depends(get_session_provider)],
) -> SignedDocumentService:
    return SignedDocumentService(storage, document_repo, provider)


async def get_signature_coordinator(
    document_type: DocumentType,
    training_id: str,
    participant_id: str,
    signature_repo: Annotated[SupabaseSignatureRepository, Depends(get_signature_repo)],
    settings_repo: Annotated[SupabaseSettingsRepository, Depends(get_settings_repo)],
    storage: Annotated[IStorageService, Depends(get_storage)],
    provider: Annotated[BearerSessionProvider, Depends(get_session_provider)],
    lookup: Annotated[DocumentLookupService, Depends(get_document_lookup_service)],
    view: Annotated[ViewContext, Query(description="Viewing side: crm or student")] = ViewContext.CRM,
    participant_name: Annotated[str | None, Query(max_length=200)] = None,
) -> AsyncIterator[SignatureCoordinator]:
    """Coordinator for one request; destroyed when the response is sent."""
    settings = get_settings()
    coordinator = SignatureCoordinator(
        document_type,
        training_id,
        participant_id,
        view,
        signature_repo=signature_repo,
        settings_repo=settings_repo,
        storage=storage,
        session_provider=provider,
        document_lookup=lookup,
        participant_name=participant_name,
        signatures_bucket=settings.signatures_bucket,
        seals_bucket=settings.organization_seals_bucket,
        max_signature_bytes=settings.max_signature_bytes,
        seal_scan_limit=settings.seal_scan_limit,
    )
    try:
        yield coordinator
    finally:
        coordinator.destroy()


def get_questionnaire_generator(request: Request) -> QuestionnaireGenerator:
    """Generator over the configured chat completions endpoint; 503 without an API key."""
    settings = get_settings()
    if settings.llm_api_key is None or not settings.llm_api_key.get_secret_value():
        raise HTTPException(status_code=503, detail="Questionnaire generation not configured")
    client = ChatCompletionClient(
        settings.llm_base_url,
        settings.llm_api_key.get_secret_value(),
        settings.llm_model,
        http_client=getattr(request.app.state, "http_client", None),
        timeout=settings.llm_timeout_seconds,
    )
    return QuestionnaireGenerator(client)

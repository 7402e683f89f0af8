"""Signed document API: store and fetch the final rendered file."""

from typing import Annotated

from fastapi import APIRouter, Depends, File, Form, Request, UploadFile

from signdesk.api.v1.dependencies import get_current_session, get_signed_document_service
from signdesk.application.dtos.auth import AuthSession
from signdesk.application.use_cases.documents import SignedDocumentService
from signdesk.core.limiter import limit_signature_writes
from signdesk.domain.enums import DocumentType
from signdesk.schemas.document import DocumentFileResponse

router = APIRouter()


@router.post(
    "/{document_type}/{training_id}/{participant_id}",
    response_model=DocumentFileResponse,
    status_code=201,
)
@limit_signature_writes
async def upload_signed_document(
    request: Request,
    document_type: DocumentType,
    training_id: str,
    participant_id: str,
    service: Annotated[SignedDocumentService, Depends(get_signed_document_service)],
    file: UploadFile = File(...),
    participant_name: str | None = Form(None),
):
    """Store the final PDF in the document type's bucket and record it."""
    content = await file.read()
    url = await service.save_document(
        content, document_type, training_id, participant_id, participant_name
    )
    return DocumentFileResponse(url=url)


@router.get(
    "/{document_type}/{training_id}/{participant_id}/latest",
    response_model=DocumentFileResponse,
)
async def get_last_document(
    document_type: DocumentType,
    training_id: str,
    participant_id: str,
    _: Annotated[AuthSession, Depends(get_current_session)],
    service: Annotated[SignedDocumentService, Depends(get_signed_document_service)],
):
    """Return the newest stored file URL, or null."""
    return DocumentFileResponse(
        url=await service.get_last_document(document_type, training_id, participant_id)
    )

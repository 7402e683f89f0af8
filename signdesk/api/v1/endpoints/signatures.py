"""Signature API: thin routes delegating to SignatureCoordinator."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request

from signdesk.api.v1.dependencies import get_current_session, get_signature_coordinator
from signdesk.application.dtos.auth import AuthSession
from signdesk.application.services.signature_coordinator import SignatureCoordinator
from signdesk.core.limiter import limit_signature_writes
from signdesk.domain.enums import SignerRole
from signdesk.schemas.signature import (
    ButtonState,
    PermissionItem,
    SignatureStatusResponse,
    SignRequest,
    SignResponse,
)

router = APIRouter()

_CONTEXT_PATH = "/{document_type}/{training_id}/{participant_id}"


def _status_response(coordinator: SignatureCoordinator) -> SignatureStatusResponse:
    button = coordinator.get_signature_button_state()
    requirements = coordinator.requirements
    return SignatureStatusResponse(
        document_type=coordinator.document_type,
        training_id=coordinator.training_id,
        participant_id=coordinator.participant_id,
        view=coordinator.view_context,
        document_id=coordinator.document.id if coordinator.document else None,
        signatures=coordinator.get_signatures().as_dict(),
        required_roles=sorted(requirements.required_roles, key=lambda r: r.value),
        optional_roles=sorted(requirements.optional_roles, key=lambda r: r.value),
        fully_signed=coordinator.is_fully_signed(),
        status_message=coordinator.get_signature_status_message(),
        permissions={
            role.value: PermissionItem(**vars(coordinator.can_sign(role)))
            for role in SignerRole
        },
        button=ButtonState(
            show=button.show, enabled=button.enabled, text=button.text, role=button.role
        ),
    )


@router.get(_CONTEXT_PATH, response_model=SignatureStatusResponse)
async def get_signature_status(
    _: Annotated[AuthSession, Depends(get_current_session)],
    coordinator: Annotated[SignatureCoordinator, Depends(get_signature_coordinator)],
):
    """Load the document and its signatures; return snapshot, status and permissions."""
    await coordinator.initialize()
    return _status_response(coordinator)


@router.post(f"{_CONTEXT_PATH}/refresh", response_model=SignatureStatusResponse)
async def refresh_signatures(
    _: Annotated[AuthSession, Depends(get_current_session)],
    coordinator: Annotated[SignatureCoordinator, Depends(get_signature_coordinator)],
):
    """Re-fetch every role from the store (after an external change)."""
    await coordinator.load_document()
    await coordinator.refresh_signatures()
    return _status_response(coordinator)


@router.post(f"{_CONTEXT_PATH}/{{role}}", response_model=SignResponse, status_code=201)
@limit_signature_writes
async def save_signature(
    request: Request,
    role: SignerRole,
    body: SignRequest,
    _: Annotated[AuthSession, Depends(get_current_session)],
    coordinator: Annotated[SignatureCoordinator, Depends(get_signature_coordinator)],
):
    """Store a signature for role. Permission and session errors map to 4xx."""
    url = await coordinator.save_signature(body.image_data, role)
    return SignResponse(role=role, url=url)

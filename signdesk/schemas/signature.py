"""Signature API schemas (request and response)."""

from pydantic import BaseModel, Field

from signdesk.domain.enums import DocumentType, SignerRole, ViewContext


class SignRequest(BaseModel):
    """Body of POST /signatures/.../{role}."""

    image_data: str = Field(
        ...,
        min_length=1,
        description="Signature image as a data URL (data:image/png;base64,...) or bare base64",
    )


class SignResponse(BaseModel):
    """Stored signature."""

    role: SignerRole
    url: str


class PermissionItem(BaseModel):
    """can_sign result for one role."""

    allowed: bool
    reason: str | None = None
    reason_code: str | None = None


class ButtonState(BaseModel):
    """Sign action the viewer should be offered."""

    show: bool
    enabled: bool
    text: str
    role: SignerRole | None = None


class SignatureStatusResponse(BaseModel):
    """Snapshot of a document's signatures as seen from one view context."""

    document_type: DocumentType
    training_id: str
    participant_id: str
    view: ViewContext
    document_id: str | None = None
    signatures: dict[str, str | None] = Field(
        ..., description="Role value to image URL (null when unsigned); always five keys"
    )
    required_roles: list[SignerRole]
    optional_roles: list[SignerRole]
    fully_signed: bool
    status_message: str
    permissions: dict[str, PermissionItem]
    button: ButtonState

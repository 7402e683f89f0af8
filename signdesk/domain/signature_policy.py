"""Signature policy table: which roles sign which document type, and in what order.

Static process-wide configuration. Lookup is total over DocumentType and
never touches the store.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from signdesk.domain.enums import DocumentType, SignerRole
from signdesk.domain.exceptions import ValidationException

DEFAULT_PENDING_MESSAGE = "Waiting for other signatures"

_WAITING_FOR_TRAINER = "Waiting for the trainer's signature"


@dataclass(frozen=True)
class SignatureRequirements:
    """Signature rules for one document type.

    Attributes:
        required_roles: Roles that must all sign before the document is complete.
        optional_roles: Roles that may sign but are not needed for completion.
        order: Signing order; a role may sign only after every role before it.
        pending_message: Shown to viewers waiting on someone else.
    """

    required_roles: frozenset[SignerRole] = field(default_factory=frozenset)
    optional_roles: frozenset[SignerRole] = field(default_factory=frozenset)
    order: tuple[SignerRole, ...] = ()
    pending_message: str | None = None

    @property
    def allowed_roles(self) -> frozenset[SignerRole]:
        return self.required_roles | self.optional_roles

    def allows(self, role: SignerRole) -> bool:
        return role in self.allowed_roles

    def predecessors(self, role: SignerRole) -> tuple[SignerRole, ...]:
        """Roles that must have signed before role; empty when role is unordered or first."""
        if role not in self.order:
            return ()
        return self.order[: self.order.index(role)]

    @property
    def pending_message_or_default(self) -> str:
        return self.pending_message or DEFAULT_PENDING_MESSAGE


DOCUMENT_SIGNATURE_CONFIG: dict[DocumentType, SignatureRequirements] = {
    DocumentType.CONVENTION: SignatureRequirements(
        required_roles=frozenset(
            {
                SignerRole.REPRESENTATIVE,
                SignerRole.TRAINER,
                SignerRole.COMPANY_SEAL,
                SignerRole.ORGANIZATION_SEAL,
            }
        ),
        optional_roles=frozenset({SignerRole.PARTICIPANT}),
        pending_message=_WAITING_FOR_TRAINER,
    ),
    DocumentType.ATTESTATION: SignatureRequirements(
        required_roles=frozenset({SignerRole.TRAINER}),
        pending_message=_WAITING_FOR_TRAINER,
    ),
    DocumentType.ATTENDANCE_SHEET: SignatureRequirements(
        required_roles=frozenset({SignerRole.TRAINER, SignerRole.PARTICIPANT}),
        pending_message=_WAITING_FOR_TRAINER,
    ),
    DocumentType.COMPLETION_CERTIFICATE: SignatureRequirements(
        required_roles=frozenset({SignerRole.TRAINER, SignerRole.ORGANIZATION_SEAL}),
        pending_message="Waiting for the training organization's signature",
    ),
    DocumentType.QUOTE: SignatureRequirements(
        required_roles=frozenset({SignerRole.REPRESENTATIVE}),
        optional_roles=frozenset({SignerRole.PARTICIPANT}),
        order=(SignerRole.REPRESENTATIVE, SignerRole.PARTICIPANT),
        pending_message="Waiting for the representative's signature",
    ),
    DocumentType.INVOICE: SignatureRequirements(
        optional_roles=frozenset({SignerRole.ORGANIZATION_SEAL}),
    ),
    DocumentType.PROGRAM: SignatureRequirements(
        optional_roles=frozenset({SignerRole.ORGANIZATION_SEAL}),
    ),
    DocumentType.OTHER: SignatureRequirements(
        optional_roles=frozenset(SignerRole),
    ),
}


def parse_document_type(value: DocumentType | str) -> DocumentType:
    """Return the DocumentType for an enum member or its stored string value."""
    if isinstance(value, DocumentType):
        return value
    try:
        return DocumentType(value)
    except ValueError as e:
        raise ValidationException(
            f"Unknown document type: {value!r}", field="document_type"
        ) from e


def parse_signer_role(value: SignerRole | str) -> SignerRole:
    """Return the SignerRole for an enum member or its stored string value."""
    if isinstance(value, SignerRole):
        return value
    try:
        return SignerRole(value)
    except ValueError as e:
        raise ValidationException(
            f"Unknown signer role: {value!r}", field="role"
        ) from e


def get_signature_requirements(document_type: DocumentType | str) -> SignatureRequirements:
    """Return the signature requirements for a document type.

    Raises:
        ValidationException: document_type is not a known type value.
    """
    return DOCUMENT_SIGNATURE_CONFIG[parse_document_type(document_type)]

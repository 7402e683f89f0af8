"""Domain enumerations for signdesk.

Enums represent fixed sets of domain values: document types, signer
roles, viewing context and document status. Values are the strings
stored in the backend tables.
"""

from enum import Enum


class _ValuesMixin:
    """Mixin that adds a values() classmethod to str Enums."""

    @classmethod
    def values(cls) -> list[str]:
        """Return all valid values as strings."""
        return [member.value for member in cls]


class DocumentType(_ValuesMixin, str, Enum):
    """Category of generated document; each has its own signature policy."""

    CONVENTION = "convention"
    ATTESTATION = "attestation"
    ATTENDANCE_SHEET = "emargement"
    COMPLETION_CERTIFICATE = "certificate"
    QUOTE = "devis"
    INVOICE = "facture"
    PROGRAM = "programme"
    OTHER = "autre"


class SignerRole(_ValuesMixin, str, Enum):
    """A party or stamp whose mark may appear on a document."""

    PARTICIPANT = "participant"
    REPRESENTATIVE = "representative"
    TRAINER = "trainer"
    COMPANY_SEAL = "companySeal"
    ORGANIZATION_SEAL = "organizationSeal"

    @property
    def is_seal(self) -> bool:
        """Return True for stamp roles (company or organization seal)."""
        return self in (SignerRole.COMPANY_SEAL, SignerRole.ORGANIZATION_SEAL)

    @property
    def label(self) -> str:
        """Human-readable title stored with the signature record."""
        return _ROLE_LABELS[self]


_ROLE_LABELS: dict[SignerRole, str] = {
    SignerRole.PARTICIPANT: "Participant signature",
    SignerRole.REPRESENTATIVE: "Representative signature",
    SignerRole.TRAINER: "Trainer signature",
    SignerRole.COMPANY_SEAL: "Company seal",
    SignerRole.ORGANIZATION_SEAL: "Training organization seal",
}


class ViewContext(_ValuesMixin, str, Enum):
    """Which side of the application is viewing a document."""

    CRM = "crm"
    STUDENT = "student"


class DocumentStatus(_ValuesMixin, str, Enum):
    """Document lifecycle status as stored on the documents table."""

    DRAFT = "draft"
    PENDING_SIGNATURES = "pending_signatures"
    SIGNED = "signed"

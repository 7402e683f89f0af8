"""Unit tests for the signature policy table."""

import pytest

from signdesk.domain.enums import DocumentType, SignerRole
from signdesk.domain.exceptions import ValidationException
from signdesk.domain.signature_policy import (
    DEFAULT_PENDING_MESSAGE,
    DOCUMENT_SIGNATURE_CONFIG,
    get_signature_requirements,
)


def test_config_covers_every_document_type() -> None:
    """Every DocumentType has an entry."""
    assert set(DOCUMENT_SIGNATURE_CONFIG) == set(DocumentType)


def test_convention_requirements() -> None:
    req = get_signature_requirements(DocumentType.CONVENTION)
    assert req.required_roles == {
        SignerRole.REPRESENTATIVE,
        SignerRole.TRAINER,
        SignerRole.COMPANY_SEAL,
        SignerRole.ORGANIZATION_SEAL,
    }
    assert req.optional_roles == {SignerRole.PARTICIPANT}
    assert req.order == ()
    assert req.pending_message == "Waiting for the trainer's signature"


def test_quote_is_ordered_representative_then_participant() -> None:
    req = get_signature_requirements("devis")
    assert req.order == (SignerRole.REPRESENTATIVE, SignerRole.PARTICIPANT)
    assert req.predecessors(SignerRole.PARTICIPANT) == (SignerRole.REPRESENTATIVE,)
    assert req.predecessors(SignerRole.REPRESENTATIVE) == ()


def test_certificate_waits_for_training_organization() -> None:
    req = get_signature_requirements(DocumentType.COMPLETION_CERTIFICATE)
    assert req.required_roles == {SignerRole.TRAINER, SignerRole.ORGANIZATION_SEAL}
    assert req.pending_message == "Waiting for the training organization's signature"


@pytest.mark.parametrize("document_type", [DocumentType.INVOICE, DocumentType.PROGRAM])
def test_invoice_and_program_only_allow_organization_seal(document_type) -> None:
    req = get_signature_requirements(document_type)
    assert req.required_roles == frozenset()
    assert req.allowed_roles == {SignerRole.ORGANIZATION_SEAL}
    assert req.pending_message_or_default == DEFAULT_PENDING_MESSAGE


def test_other_allows_every_role_optionally() -> None:
    req = get_signature_requirements(DocumentType.OTHER)
    assert req.required_roles == frozenset()
    assert req.optional_roles == set(SignerRole)


def test_lookup_by_string_value_matches_enum() -> None:
    assert get_signature_requirements("emargement") is get_signature_requirements(
        DocumentType.ATTENDANCE_SHEET
    )


def test_unknown_document_type_raises_validation() -> None:
    with pytest.raises(ValidationException) as exc_info:
        get_signature_requirements("contract")
    assert exc_info.value.details["field"] == "document_type"


def test_required_and_optional_never_overlap() -> None:
    for req in DOCUMENT_SIGNATURE_CONFIG.values():
        assert not req.required_roles & req.optional_roles
        assert set(req.order) <= req.allowed_roles

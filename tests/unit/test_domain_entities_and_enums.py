"""Unit tests for domain enums and entities."""

from signdesk.domain.entities.document import DocumentEntity
from signdesk.domain.entities.signature import SignatureSet
from signdesk.domain.enums import DocumentStatus, DocumentType, SignerRole, ViewContext


class TestEnums:
    """Wire values and helpers."""

    def test_document_type_values_are_store_values(self) -> None:
        assert DocumentType.values() == [
            "convention",
            "attestation",
            "emargement",
            "certificate",
            "devis",
            "facture",
            "programme",
            "autre",
        ]

    def test_signer_role_values(self) -> None:
        assert SignerRole.COMPANY_SEAL.value == "companySeal"
        assert SignerRole.ORGANIZATION_SEAL.value == "organizationSeal"

    def test_is_seal(self) -> None:
        assert SignerRole.COMPANY_SEAL.is_seal
        assert SignerRole.ORGANIZATION_SEAL.is_seal
        assert not SignerRole.TRAINER.is_seal

    def test_every_role_has_a_label(self) -> None:
        assert all(role.label for role in SignerRole)

    def test_view_context(self) -> None:
        assert ViewContext("student") is ViewContext.STUDENT


class TestSignatureSet:
    """Immutable role to URL snapshot."""

    def test_empty_has_five_none_keys(self) -> None:
        assert SignatureSet.empty().as_dict() == {role.value: None for role in SignerRole}

    def test_with_signature_returns_new_set(self) -> None:
        original = SignatureSet.empty()
        updated = original.with_signature(SignerRole.TRAINER, "https://x/t.png")
        assert original.get(SignerRole.TRAINER) is None
        assert updated.get(SignerRole.TRAINER) == "https://x/t.png"
        assert updated.has(SignerRole.TRAINER)

    def test_from_mapping_and_missing(self) -> None:
        s = SignatureSet.from_mapping({SignerRole.COMPANY_SEAL: "c", SignerRole.TRAINER: None})
        assert s.company_seal == "c"
        assert s.missing([SignerRole.TRAINER, SignerRole.COMPANY_SEAL]) == [SignerRole.TRAINER]

    def test_changed_roles(self) -> None:
        a = SignatureSet(trainer="t1")
        b = SignatureSet(trainer="t2", participant="p")
        assert set(a.changed_roles(b)) == {SignerRole.TRAINER, SignerRole.PARTICIPANT}


class TestDocumentEntity:
    def test_convention_always_requires_stamp(self) -> None:
        doc = DocumentEntity(
            id="d1",
            document_type=DocumentType.CONVENTION,
            training_id="t",
            participant_id="p",
            title=None,
            status=DocumentStatus.DRAFT,
            need_stamp=False,
        )
        assert doc.requires_stamp()
        assert doc.matches(DocumentType.CONVENTION, "t", "p")
        assert not doc.matches(DocumentType.CONVENTION, "t", "other")

"""Signature snapshot entity.

SignatureSet is the runtime view of which roles have a recorded image for
one document instance. It is immutable: updates return a new set, so a
snapshot handed to a renderer is never modified mid-fetch.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, replace

from signdesk.domain.enums import SignerRole

_FIELD_BY_ROLE: dict[SignerRole, str] = {
    SignerRole.PARTICIPANT: "participant",
    SignerRole.REPRESENTATIVE: "representative",
    SignerRole.TRAINER: "trainer",
    SignerRole.COMPANY_SEAL: "company_seal",
    SignerRole.ORGANIZATION_SEAL: "organization_seal",
}


@dataclass(frozen=True)
class SignatureSet:
    """Role → image URL (or None) for the five signer roles."""

    participant: str | None = None
    representative: str | None = None
    trainer: str | None = None
    company_seal: str | None = None
    organization_seal: str | None = None

    @classmethod
    def empty(cls) -> SignatureSet:
        return cls()

    @classmethod
    def from_mapping(cls, urls: dict[SignerRole, str | None]) -> SignatureSet:
        """Build a set from a role → URL mapping; missing roles are None."""
        return cls(**{_FIELD_BY_ROLE[role]: url for role, url in urls.items()})

    def get(self, role: SignerRole) -> str | None:
        return getattr(self, _FIELD_BY_ROLE[role])

    def has(self, role: SignerRole) -> bool:
        return bool(self.get(role))

    def with_signature(self, role: SignerRole, url: str | None) -> SignatureSet:
        """Return a copy with role set to url."""
        return replace(self, **{_FIELD_BY_ROLE[role]: url})

    def missing(self, roles: Iterable[SignerRole]) -> list[SignerRole]:
        """Return the roles from roles that have no recorded image, in input order."""
        return [role for role in roles if not self.has(role)]

    def changed_roles(self, other: SignatureSet) -> list[SignerRole]:
        """Return roles whose URL differs between self and other."""
        return [role for role in SignerRole if self.get(role) != other.get(role)]

    def as_dict(self) -> dict[str, str | None]:
        """Wire form keyed by role value; always contains all five roles."""
        return {role.value: self.get(role) for role in SignerRole}

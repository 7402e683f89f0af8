"""Application DTOs (read/write models passed between use cases and repositories)."""

from signdesk.application.dtos.auth import AuthSession
from signdesk.application.dtos.document import (
    DocumentCreate,
    DocumentFileCreate,
    OrganizationSettings,
    SignatureRecordCreate,
    SignatureRecordResult,
)

__all__ = [
    "AuthSession",
    "DocumentCreate",
    "DocumentFileCreate",
    "OrganizationSettings",
    "SignatureRecordCreate",
    "SignatureRecordResult",
]

"""Application interfaces (ports): repository, storage and service protocols.

Define contracts for infrastructure implementations (DIP).
No runtime imports from signdesk.infrastructure or signdesk.api.
"""

from signdesk.application.interfaces.repositories import (
    IDocumentRepository,
    ISettingsRepository,
    ISignatureRepository,
)
from signdesk.application.interfaces.services import ILLMClient, ISessionProvider
from signdesk.application.interfaces.storage import IStorageService, StoredObject

__all__ = [
    "IDocumentRepository",
    "ILLMClient",
    "ISessionProvider",
    "ISettingsRepository",
    "ISignatureRepository",
    "IStorageService",
    "StoredObject",
]

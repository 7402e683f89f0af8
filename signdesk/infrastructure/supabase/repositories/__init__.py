"""Supabase-backed repositories (implement the application repository ports)."""

from signdesk.infrastructure.supabase.repositories.document_repo import (
    SupabaseDocumentRepository,
)
from signdesk.infrastructure.supabase.repositories.settings_repo import (
    SupabaseSettingsRepository,
)
from signdesk.infrastructure.supabase.repositories.signature_repo import (
    SupabaseSignatureRepository,
)

__all__ = [
    "SupabaseDocumentRepository",
    "SupabaseSettingsRepository",
    "SupabaseSignatureRepository",
]

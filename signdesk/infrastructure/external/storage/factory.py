"""Storage service factory: creates Supabase or local backend from settings."""

from __future__ import annotations

from typing import TYPE_CHECKING

from signdesk.application.interfaces.storage import IStorageService

if TYPE_CHECKING:
    from signdesk.core.config import Settings
    from signdesk.infrastructure.supabase._rest_client import SupabaseRESTClient


class StorageFactory:
    """Factory for storage service instances based on configuration."""

    @staticmethod
    def create_storage_service(
        settings: "Settings | None" = None,
        supabase_client: "SupabaseRESTClient | None" = None,
    ) -> IStorageService:
        """Create storage service from settings.

        Args:
            settings: Application settings; if None, uses get_settings().
            supabase_client: Initialized REST client, required for the supabase backend.

        Returns:
            SupabaseStorageService or LocalStorageService.

        Raises:
            ValueError: Unknown backend or missing required config.
        """
        from signdesk.core.config import get_settings

        s = settings or get_settings()
        backend = s.storage_backend.lower()

        if backend == "local":
            from signdesk.infrastructure.external.storage.local_storage import (
                LocalStorageService,
            )

            if not s.storage_root:
                raise ValueError("STORAGE_ROOT required for local backend")
            return LocalStorageService(
                storage_root=s.storage_root,
                base_url=s.storage_base_url,
            )
        if backend == "supabase":
            from signdesk.infrastructure.external.storage.supabase_storage import (
                SupabaseStorageService,
            )

            if supabase_client is None:
                raise ValueError("Supabase client not initialized for supabase backend")
            return SupabaseStorageService(supabase_client)
        raise ValueError(
            f"Unknown storage backend: {backend}. Supported: 'supabase', 'local'"
        )

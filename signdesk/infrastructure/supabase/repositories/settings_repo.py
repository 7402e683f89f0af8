"""Supabase-backed settings repository (implements ISettingsRepository)."""

from __future__ import annotations

from signdesk.application.dtos.document import OrganizationSettings
from signdesk.domain.exceptions import StoreReadFailed
from signdesk.infrastructure.exceptions import SupabaseRequestError
from signdesk.infrastructure.supabase._rest_client import SupabaseRESTClient
from signdesk.infrastructure.supabase.collections import (
    COL_ORGANIZATION_SEAL_PATH,
    COL_ORGANIZATION_SEAL_URL,
    TABLE_SETTINGS,
)


class SupabaseSettingsRepository:
    """Organization-wide settings; the table holds a single row."""

    def __init__(self, client: SupabaseRESTClient, table: str = TABLE_SETTINGS) -> None:
        self._table = client.table(table)

    async def get_organization_settings(self) -> OrganizationSettings | None:
        try:
            row = await self._table.select(
                f"{COL_ORGANIZATION_SEAL_URL},{COL_ORGANIZATION_SEAL_PATH}"
            ).first()
        except SupabaseRequestError as e:
            raise StoreReadFailed("get_organization_settings", e.message) from e
        if row is None:
            return None
        return OrganizationSettings(
            organization_seal_url=row.get(COL_ORGANIZATION_SEAL_URL) or None,
            organization_seal_path=row.get(COL_ORGANIZATION_SEAL_PATH) or None,
        )

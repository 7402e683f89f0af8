"""Resolution of the training organization's seal image.

The seal is organization-wide, not per document. Sources, in order:

1. ``organization_seal_url`` on the settings record.
2. ``organization_seal_path`` on the settings record, turned into a
   public URL in the organization seals bucket.
3. A scan of stored objects for a plausibly named seal image. This is a
   name heuristic, not a strong identifier, and may return None.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from signdesk.domain.exceptions import StoreException, StoreReadFailed

if TYPE_CHECKING:
    from signdesk.application.interfaces.repositories import ISettingsRepository
    from signdesk.application.interfaces.storage import IStorageService

logger = logging.getLogger(__name__)

SEAL_NAME_MARKER = "organization_seal"


class OrganizationSealResolver:
    """Finds the organization seal URL through settings first, storage second."""

    def __init__(
        self,
        settings_repo: ISettingsRepository,
        storage: IStorageService,
        signatures_bucket: str,
        seals_bucket: str,
        scan_limit: int = 20,
    ) -> None:
        self._settings_repo = settings_repo
        self._storage = storage
        self._signatures_bucket = signatures_bucket
        self._seals_bucket = seals_bucket
        self._scan_limit = scan_limit

    async def resolve(self) -> str | None:
        """Return the seal URL, or None when no source yields one."""
        url = await self._from_settings()
        if url:
            return url
        return await self._scan_storage()

    async def _from_settings(self) -> str | None:
        try:
            settings = await self._settings_repo.get_organization_settings()
        except StoreReadFailed as e:
            logger.warning("Organization settings unavailable, scanning storage: %s", e.message)
            return None
        if settings is None:
            return None
        if settings.organization_seal_url:
            logger.debug("Organization seal resolved from settings URL")
            return settings.organization_seal_url
        if settings.organization_seal_path:
            logger.debug("Organization seal resolved from settings path")
            return await self._storage.get_public_url(
                self._seals_bucket, settings.organization_seal_path
            )
        return None

    async def _scan_storage(self) -> str | None:
        """Newest name-matched image in the signatures bucket, else any object in the seals bucket."""
        try:
            candidates = await self._storage.list_objects(
                self._signatures_bucket,
                search=SEAL_NAME_MARKER,
                limit=self._scan_limit,
            )
            named = sorted(
                (o.name for o in candidates if SEAL_NAME_MARKER in o.name),
                reverse=True,
            )
            if named:
                logger.debug("Organization seal found by name scan: %s", named[0])
                return await self._storage.get_public_url(self._signatures_bucket, named[0])

            seals = await self._storage.list_objects(self._seals_bucket, limit=10)
            if seals:
                logger.debug("Organization seal taken from seals bucket: %s", seals[0].name)
                return await self._storage.get_public_url(self._seals_bucket, seals[0].name)
        except StoreException as e:
            logger.warning("Organization seal storage scan failed: %s", e.message)
        return None

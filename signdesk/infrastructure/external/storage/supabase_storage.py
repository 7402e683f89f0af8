"""Supabase storage buckets behind IStorageService."""

from __future__ import annotations

import hashlib
from typing import Any

from signdesk.application.interfaces.storage import StoredObject
from signdesk.infrastructure.exceptions import (
    StorageDeleteError,
    StorageListError,
    StorageUploadError,
    SupabaseRequestError,
)
from signdesk.infrastructure.supabase._rest_client import SupabaseRESTClient
from signdesk.shared.utils.datetime import parse_timestamp, utc_now


class SupabaseStorageService:
    """Public buckets on the Supabase storage API. Objects are addressed as bucket/path."""

    def __init__(self, client: SupabaseRESTClient) -> None:
        self._client = client

    async def upload(
        self,
        content: bytes,
        bucket: str,
        path: str,
        content_type: str,
        metadata: dict[str, str] | None = None,
    ) -> dict[str, Any]:
        """Upload (upsert) content. Metadata is not stored remotely."""
        try:
            await self._client.upload_object(bucket, path, content, content_type)
        except SupabaseRequestError as e:
            raise StorageUploadError(f"{bucket}/{path}", e.message) from e
        return {
            "storage_ref": f"{bucket}/{path}",
            "checksum": hashlib.sha256(content).hexdigest(),
            "size": len(content),
            "uploaded_at": utc_now().isoformat(),
        }

    async def get_public_url(self, bucket: str, path: str) -> str:
        return self._client.public_url(bucket, path)

    async def list_objects(
        self,
        bucket: str,
        prefix: str = "",
        search: str | None = None,
        limit: int = 100,
    ) -> list[StoredObject]:
        """Newest first by name, matching the storage API's sort."""
        try:
            rows = await self._client.list_objects(
                bucket, prefix, search=search, limit=limit, descending=True
            )
        except SupabaseRequestError as e:
            raise StorageListError(bucket, e.message) from e
        objects = []
        for row in rows:
            name = row.get("name")
            # Folder placeholders have no id.
            if not name or row.get("id") is None:
                continue
            size = (row.get("metadata") or {}).get("size")
            objects.append(
                StoredObject(
                    name=f"{prefix.rstrip('/')}/{name}" if prefix else name,
                    size=size,
                    updated_at=parse_timestamp(row.get("updated_at")),
                )
            )
        return objects

    async def exists(self, bucket: str, path: str) -> bool:
        try:
            return await self._client.object_exists(bucket, path)
        except SupabaseRequestError:
            return False

    async def delete(self, bucket: str, path: str) -> bool:
        try:
            return await self._client.remove_object(bucket, path)
        except SupabaseRequestError as e:
            raise StorageDeleteError(f"{bucket}/{path}", e.message) from e

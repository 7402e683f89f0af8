"""Storage service interface (port) for signature images and generated files."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Protocol


@dataclass(frozen=True)
class StoredObject:
    """One object listed from a bucket."""

    name: str
    size: int | None = None
    updated_at: datetime | None = None


class IStorageService(Protocol):
    """Protocol for bucket-based object storage (remote BaaS buckets or local filesystem)."""

    async def upload(
        self,
        content: bytes,
        bucket: str,
        path: str,
        content_type: str,
        metadata: dict[str, str] | None = None,
    ) -> dict[str, Any]:
        """Store content at bucket/path. Returns storage_ref, checksum, size, uploaded_at."""
        ...

    async def get_public_url(self, bucket: str, path: str) -> str:
        """Return the public URL of bucket/path (no existence check)."""
        ...

    async def list_objects(
        self,
        bucket: str,
        prefix: str = "",
        search: str | None = None,
        limit: int = 100,
    ) -> list[StoredObject]:
        """List objects under prefix whose name contains search (if given)."""
        ...

    async def exists(self, bucket: str, path: str) -> bool:
        """Return True if bucket/path exists."""
        ...

    async def delete(self, bucket: str, path: str) -> bool:
        """Delete bucket/path. Returns True if deleted, False if not found."""
        ...

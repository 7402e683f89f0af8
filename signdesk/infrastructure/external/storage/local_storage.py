"""Local filesystem storage with path validation and atomic writes."""

from __future__ import annotations

import hashlib
import json
import os
import tempfile
from pathlib import Path
from typing import Any, cast
from urllib.parse import quote

import aiofiles
import aiofiles.os

from signdesk.application.interfaces.storage import StoredObject
from signdesk.infrastructure.exceptions import (
    StorageDeleteError,
    StorageListError,
    StoragePermissionError,
    StorageUploadError,
)
from signdesk.shared.utils.datetime import from_timestamp_utc, utc_now

_META_SUFFIX = ".meta.json"


class LocalStorageService:
    """Local filesystem storage with atomic writes and path traversal protection.

    Buckets are directories under storage_root. Writes use temp file + rename
    and overwrite (upsert). Metadata stored in .meta.json sidecar. Public URLs
    are base_url/bucket/path, or a relative /storage/bucket/path.
    """

    def __init__(self, storage_root: str, base_url: str | None = None) -> None:
        """Initialize local storage.

        Args:
            storage_root: Base directory for all buckets.
            base_url: Base URL prefixed to public object URLs.
        """
        self.storage_root = Path(storage_root).resolve()
        self.base_url = base_url.rstrip("/") if base_url else None
        self.storage_root.mkdir(parents=True, exist_ok=True, mode=0o750)

    def _get_full_path(self, bucket: str, path: str) -> Path:
        """Resolve and validate bucket/path under storage_root. Raises StoragePermissionError if traversal."""
        ref = f"{bucket}/{path}"
        bucket_root = (self.storage_root / bucket).resolve()
        full_path = (bucket_root / path).resolve()
        try:
            bucket_root.relative_to(self.storage_root)
            full_path.relative_to(bucket_root)
        except ValueError as e:
            raise StoragePermissionError(ref, "path_validation") from e
        if full_path == bucket_root:
            raise StoragePermissionError(ref, "path_validation")
        return full_path

    async def _write_metadata(self, file_path: Path, metadata: dict[str, Any]) -> None:
        """Write JSON sidecar."""
        meta_path = file_path.with_name(file_path.name + _META_SUFFIX)
        async with aiofiles.open(meta_path, "w") as f:
            await f.write(json.dumps(metadata, indent=2))
        os.chmod(meta_path, 0o640)

    async def read_metadata(self, bucket: str, path: str) -> dict[str, Any]:
        """Read JSON sidecar or empty dict."""
        meta_path = self._get_full_path(bucket, path + _META_SUFFIX)
        if not meta_path.exists():
            return {}
        async with aiofiles.open(meta_path, "r") as f:
            content = await f.read()
            result = json.loads(content)
            return cast(dict[str, Any], result) if isinstance(result, dict) else {}

    async def upload(
        self,
        content: bytes,
        bucket: str,
        path: str,
        content_type: str,
        metadata: dict[str, str] | None = None,
    ) -> dict[str, Any]:
        """Write content atomically, replacing any existing object."""
        ref = f"{bucket}/{path}"
        target_path = self._get_full_path(bucket, path)
        try:
            target_path.parent.mkdir(parents=True, exist_ok=True, mode=0o750)
            temp_fd, temp_path = tempfile.mkstemp(
                dir=target_path.parent,
                prefix=".tmp_",
                suffix=target_path.suffix,
            )
            os.close(temp_fd)
            try:
                async with aiofiles.open(temp_path, "wb") as f:
                    await f.write(content)
                os.chmod(temp_path, 0o640)
                os.replace(temp_path, target_path)
            finally:
                if Path(temp_path).exists():
                    os.unlink(temp_path)
            upload_meta: dict[str, Any] = {
                "storage_ref": ref,
                "checksum": hashlib.sha256(content).hexdigest(),
                "size": len(content),
                "content_type": content_type,
                "uploaded_at": utc_now().isoformat(),
                "custom": metadata or {},
            }
            await self._write_metadata(target_path, upload_meta)
        except OSError as e:
            raise StorageUploadError(ref, str(e)) from e
        return {
            "storage_ref": ref,
            "checksum": upload_meta["checksum"],
            "size": upload_meta["size"],
            "uploaded_at": upload_meta["uploaded_at"],
        }

    async def get_public_url(self, bucket: str, path: str) -> str:
        self._get_full_path(bucket, path)
        key = f"{quote(bucket)}/{quote(path)}"
        return f"{self.base_url}/{key}" if self.base_url else f"/storage/{key}"

    async def list_objects(
        self,
        bucket: str,
        prefix: str = "",
        search: str | None = None,
        limit: int = 100,
    ) -> list[StoredObject]:
        """List files under prefix whose name contains search, newest name first."""
        bucket_root = self.storage_root / bucket
        if not bucket_root.is_dir():
            return []
        base = self._get_full_path(bucket, prefix) if prefix else bucket_root.resolve()
        if not base.is_dir():
            return []
        try:
            entries = []
            for file_path in base.iterdir():
                name = file_path.name
                if (
                    not file_path.is_file()
                    or name.endswith(_META_SUFFIX)
                    or name.startswith(".tmp_")
                ):
                    continue
                if search and search not in name:
                    continue
                stat = file_path.stat()
                entries.append(
                    StoredObject(
                        name=str(file_path.relative_to(bucket_root.resolve())),
                        size=stat.st_size,
                        updated_at=from_timestamp_utc(stat.st_mtime),
                    )
                )
        except OSError as e:
            raise StorageListError(bucket, str(e)) from e
        entries.sort(key=lambda o: o.name, reverse=True)
        return entries[:limit]

    async def exists(self, bucket: str, path: str) -> bool:
        """Return True if file exists."""
        try:
            return self._get_full_path(bucket, path).is_file()
        except StoragePermissionError:
            return False

    async def delete(self, bucket: str, path: str) -> bool:
        """Delete file and metadata. Returns True if deleted."""
        file_path = self._get_full_path(bucket, path)
        try:
            if not file_path.exists():
                return False
            await aiofiles.os.remove(file_path)
            meta_path = file_path.with_name(file_path.name + _META_SUFFIX)
            if meta_path.exists():
                await aiofiles.os.remove(meta_path)
            return True
        except OSError as e:
            raise StorageDeleteError(f"{bucket}/{path}", str(e)) from e

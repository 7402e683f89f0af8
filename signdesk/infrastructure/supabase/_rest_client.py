"""Thin Supabase REST client (no supabase-py).

Tables are reached through PostgREST under /rest/v1 and objects through
the storage API under /storage/v1. All HTTP calls use httpx.AsyncClient so
they do not block the event loop. Non-success responses and transport
errors raise SupabaseRequestError.
"""

from __future__ import annotations

import json
from typing import Any
from urllib.parse import quote

import httpx

from signdesk.infrastructure.exceptions import SupabaseRequestError


async def _request_async(
    client: httpx.AsyncClient,
    method: str,
    url: str,
    *,
    headers: dict[str, str],
    params: dict[str, str] | None = None,
    body: Any = None,
    content: bytes | None = None,
) -> Any:
    """Perform an async request. 404 returns None; other non-2xx raise SupabaseRequestError."""
    try:
        resp = await client.request(
            method,
            url,
            headers=headers,
            params=params,
            json=body if content is None else None,
            content=content,
        )
    except httpx.HTTPError as e:
        raise SupabaseRequestError(method, url, None, str(e)) from e
    if resp.status_code == 404:
        return None
    if not resp.is_success:
        raise SupabaseRequestError(method, url, resp.status_code, resp.text[:500])
    raw = resp.content
    if not raw:
        return {}
    try:
        return json.loads(raw.decode())
    except ValueError:
        return {}


class TableQuery:
    """Fluent PostgREST select builder: filters, ordering and limit run on the server."""

    def __init__(self, table: TableReference, columns: str = "*") -> None:
        self._table = table
        self._params: dict[str, str] = {"select": columns}

    def eq(self, column: str, value: Any) -> TableQuery:
        self._params[column] = f"eq.{value}"
        return self

    def is_null(self, column: str) -> TableQuery:
        self._params[column] = "is.null"
        return self

    def not_null(self, column: str) -> TableQuery:
        self._params[column] = "not.is.null"
        return self

    def order(self, column: str, descending: bool = False) -> TableQuery:
        self._params["order"] = f"{column}.{'desc' if descending else 'asc'}"
        return self

    def limit(self, n: int) -> TableQuery:
        self._params["limit"] = str(n)
        return self

    async def execute(self) -> list[dict[str, Any]]:
        """Run the select and return the rows (empty list when none)."""
        out = await self._table._client._rest(
            "GET", self._table.name, params=self._params
        )
        return out if isinstance(out, list) else []

    async def first(self) -> dict[str, Any] | None:
        rows = await self.limit(1).execute()
        return rows[0] if rows else None


class TableReference:
    """Reference to one PostgREST table."""

    def __init__(self, client: SupabaseRESTClient, name: str) -> None:
        self._client = client
        self.name = name

    def select(self, columns: str = "*") -> TableQuery:
        return TableQuery(self, columns)

    async def insert(self, row: dict[str, Any]) -> dict[str, Any]:
        """Insert one row and return the stored representation."""
        out = await self._client._rest(
            "POST",
            self.name,
            body=row,
            extra_headers={"Prefer": "return=representation"},
        )
        if isinstance(out, list) and out:
            return out[0]
        return row

    async def update(self, filters: dict[str, Any], values: dict[str, Any]) -> None:
        """Update rows matching every eq filter."""
        await self._client._rest(
            "PATCH",
            self.name,
            params={column: f"eq.{value}" for column, value in filters.items()},
            body=values,
            extra_headers={"Prefer": "return=minimal"},
        )


class SupabaseRESTClient:
    """Lightweight Supabase client over REST for tables and storage buckets."""

    def __init__(
        self,
        base_url: str,
        service_key: str,
        *,
        http_client: httpx.AsyncClient | None = None,
        timeout: float = 30.0,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._service_key = service_key
        self._http = http_client if http_client is not None else httpx.AsyncClient(timeout=timeout)
        self._owns_http = http_client is None

    async def aclose(self) -> None:
        """Close the HTTP client only if we created it (do not close injected client)."""
        if self._owns_http:
            await self._http.aclose()

    @property
    def base_url(self) -> str:
        return self._base_url

    def _headers(self, extra: dict[str, str] | None = None) -> dict[str, str]:
        headers = {
            "apikey": self._service_key,
            "Authorization": f"Bearer {self._service_key}",
        }
        if extra:
            headers.update(extra)
        return headers

    async def _rest(
        self,
        method: str,
        table: str,
        *,
        params: dict[str, str] | None = None,
        body: Any = None,
        extra_headers: dict[str, str] | None = None,
    ) -> Any:
        return await _request_async(
            self._http,
            method,
            f"{self._base_url}/rest/v1/{table}",
            headers=self._headers(extra_headers),
            params=params,
            body=body,
        )

    def table(self, name: str) -> TableReference:
        return TableReference(self, name)

    # Storage

    def _object_url(self, bucket: str, path: str) -> str:
        return f"{self._base_url}/storage/v1/object/{bucket}/{quote(path)}"

    def public_url(self, bucket: str, path: str) -> str:
        return f"{self._base_url}/storage/v1/object/public/{bucket}/{quote(path)}"

    async def upload_object(
        self,
        bucket: str,
        path: str,
        content: bytes,
        content_type: str,
        *,
        upsert: bool = True,
    ) -> dict[str, Any]:
        out = await _request_async(
            self._http,
            "POST",
            self._object_url(bucket, path),
            headers=self._headers(
                {"Content-Type": content_type, "x-upsert": "true" if upsert else "false"}
            ),
            content=content,
        )
        if out is None:
            raise SupabaseRequestError("POST", f"{bucket}/{path}", 404, "bucket not found")
        return out

    async def list_objects(
        self,
        bucket: str,
        prefix: str = "",
        *,
        search: str | None = None,
        limit: int = 100,
        sort_column: str = "name",
        descending: bool = False,
    ) -> list[dict[str, Any]]:
        body: dict[str, Any] = {
            "prefix": prefix,
            "limit": limit,
            "offset": 0,
            "sortBy": {"column": sort_column, "order": "desc" if descending else "asc"},
        }
        if search:
            body["search"] = search
        out = await _request_async(
            self._http,
            "POST",
            f"{self._base_url}/storage/v1/object/list/{bucket}",
            headers=self._headers(),
            body=body,
        )
        return out if isinstance(out, list) else []

    async def object_exists(self, bucket: str, path: str) -> bool:
        out = await _request_async(
            self._http,
            "HEAD",
            self._object_url(bucket, path),
            headers=self._headers(),
        )
        return out is not None

    async def remove_object(self, bucket: str, path: str) -> bool:
        """Delete one object. Returns False when nothing was removed."""
        out = await _request_async(
            self._http,
            "DELETE",
            f"{self._base_url}/storage/v1/object/{bucket}",
            headers=self._headers(),
            body={"prefixes": [path]},
        )
        return bool(out)

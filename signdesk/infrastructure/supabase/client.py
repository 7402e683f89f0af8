"""Supabase client (REST-based, no supabase-py).

Initialized at app startup from SUPABASE_URL and SUPABASE_SERVICE_KEY.
Shares the application's httpx.AsyncClient when one is passed in.
"""

import logging

import httpx

from signdesk.core.config import get_settings
from signdesk.infrastructure.supabase._rest_client import SupabaseRESTClient

logger = logging.getLogger(__name__)

_supabase_client: SupabaseRESTClient | None = None


def init_supabase(http_client: httpx.AsyncClient | None = None) -> bool:
    """Initialize the Supabase REST client.

    Safe to call when SUPABASE_URL is not set (no-op). Idempotent if already
    initialized.

    Returns:
        True if the client was initialized, False if not configured.
    """
    global _supabase_client
    if _supabase_client is not None:
        return True
    settings = get_settings()
    key = settings.supabase_service_key.get_secret_value()
    if not settings.supabase_url or not key:
        logger.info("Supabase not configured; table access disabled")
        return False
    _supabase_client = SupabaseRESTClient(
        settings.supabase_url,
        key,
        http_client=http_client,
        timeout=settings.http_timeout_seconds,
    )
    logger.info("Supabase REST client initialized for %s", settings.supabase_url)
    return True


def get_supabase_client() -> SupabaseRESTClient | None:
    """Return the Supabase client, or None if not configured."""
    return _supabase_client


async def close_supabase() -> None:
    """Close the client's HTTP pool (if owned). Call from app shutdown."""
    global _supabase_client
    if _supabase_client is not None:
        await _supabase_client.aclose()
        _supabase_client = None
        logger.info("Supabase HTTP client closed")

"""Application lifespan: startup and shutdown.

Only wiring of infrastructure here (shared HTTP client, backend client,
storage service); no business logic.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

import httpx
from fastapi import FastAPI

from signdesk.core.config import get_settings
from signdesk.infrastructure.external.storage import StorageFactory
from signdesk.infrastructure.supabase.client import (
    close_supabase,
    get_supabase_client,
    init_supabase,
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def create_lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Run startup then yield; on exit run shutdown.

    Startup order: shared HTTP client, Supabase REST client (if configured),
    storage service. Shutdown order: Supabase client, shared HTTP client.
    """
    settings = get_settings()

    # ---- Startup ----
    # Shared HTTP client for the backend and the LLM (connection reuse).
    app.state.http_client = httpx.AsyncClient(timeout=settings.http_timeout_seconds)
    init_supabase(app.state.http_client)
    app.state.storage = StorageFactory.create_storage_service(
        settings, supabase_client=get_supabase_client()
    )
    logger.info(
        "%s %s started (storage=%s)",
        settings.app_name,
        settings.app_version,
        settings.storage_backend,
    )

    yield

    # ---- Shutdown ----
    await close_supabase()
    if getattr(app.state, "http_client", None) is not None:
        await app.state.http_client.aclose()
        app.state.http_client = None
        logger.info("Shared HTTP client closed")

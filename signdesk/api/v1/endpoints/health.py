"""Health check endpoint. No dependencies; used for liveness probes."""

from fastapi import APIRouter

from signdesk.core.config import get_settings
from signdesk.schemas.health import HealthResponse

router = APIRouter()


@router.get("", response_model=HealthResponse)
def health_check() -> HealthResponse:
    """Return ok status for liveness."""
    settings = get_settings()
    return HealthResponse(
        version=settings.app_version, storage_backend=settings.storage_backend
    )

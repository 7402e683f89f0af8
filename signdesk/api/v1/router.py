"""API v1 router aggregation.

Includes all endpoint modules with consistent prefix and tags. All routes
use dependencies from signdesk.api.v1.dependencies.
"""

from fastapi import APIRouter

from signdesk.api.v1.endpoints import documents, health, questionnaires, signatures

api_router = APIRouter()

api_router.include_router(health.router, prefix="/health", tags=["health"])
api_router.include_router(signatures.router, prefix="/signatures", tags=["signatures"])
api_router.include_router(documents.router, prefix="/documents", tags=["documents"])
api_router.include_router(
    questionnaires.router, prefix="/questionnaires", tags=["questionnaires"]
)

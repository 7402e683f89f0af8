"""Centralized exception handlers for the FastAPI app.

Register with register_exception_handlers(app). Maps domain and framework
exceptions to HTTP responses.
"""

import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from signdesk.core.config import get_settings
from signdesk.domain.exceptions import SignDeskException

logger = logging.getLogger(__name__)

# Map domain error_code to HTTP status when applicable
_ERROR_CODE_STATUS: dict[str, int] = {
    "VALIDATION_ERROR": 400,
    "INVALID_SIGNATURE_PAYLOAD": 400,
    "AUTHENTICATION_ERROR": 401,
    "AUTHENTICATION_REQUIRED": 401,
    "NOT_PERMITTED_FOR_ROLE": 403,
    "STORAGE_PERMISSION_ERROR": 403,
    "RESOURCE_NOT_FOUND": 404,
    "SIGNATURES_NOT_LOADED": 409,
    "ALREADY_SIGNED": 409,
    "OUT_OF_ORDER": 409,
    "COORDINATOR_CLOSED": 409,
    "STORE_WRITE_FAILED": 502,
    "STORE_READ_FAILED": 502,
    "STORAGE_UPLOAD_ERROR": 502,
    "STORAGE_LIST_ERROR": 502,
    "STORAGE_DELETE_ERROR": 502,
    "BACKEND_REQUEST_ERROR": 502,
    "LLM_REQUEST_ERROR": 502,
    "LLM_RESPONSE_FORMAT_ERROR": 502,
}


def status_for(exc: SignDeskException) -> int:
    """HTTP status for a domain exception (400 when the code is unmapped)."""
    return _ERROR_CODE_STATUS.get(exc.error_code, 400)


def _signdesk_exception_handler(
    request: Request, exc: SignDeskException
) -> JSONResponse:
    """Return JSON from SignDeskException.to_dict() with appropriate status code."""
    status = status_for(exc)
    if status >= 500:
        logger.warning("Upstream failure on %s: %s %s", request.url.path, exc.error_code, exc.details)
    return JSONResponse(
        status_code=status,
        content=exc.to_dict(),
    )


def _validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Return 422 with validation error details."""
    return JSONResponse(
        status_code=422,
        content={
            "error": "VALIDATION_ERROR",
            "message": "Request validation failed",
            "details": exc.errors(),
        },
    )


def _http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    """Return JSON for Starlette HTTP exceptions (status + detail)."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": "HTTP_ERROR", "message": exc.detail},
    )


def _generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Return 500; include detail only when debug is True."""
    logger.exception("Unhandled exception: %s", exc)
    settings = get_settings()
    detail: Any = str(exc) if settings.debug else "Internal server error"
    return JSONResponse(
        status_code=500,
        content={"error": "INTERNAL_ERROR", "message": detail},
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers on the FastAPI app.

    Call once after creating the app. Handlers: SignDeskException (and
    subclasses), RequestValidationError, StarletteHTTPException, generic Exception.
    """
    app.add_exception_handler(SignDeskException, _signdesk_exception_handler)
    app.add_exception_handler(RequestValidationError, _validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)
    app.add_exception_handler(Exception, _generic_exception_handler)

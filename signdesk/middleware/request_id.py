"""Request ID middleware.

Generates or forwards the request id header, exposes it to log records
through request_id_var, and echoes it on the response. Client-provided
values are sanitized (length + character set) to prevent log injection.
Raw ASGI (no BaseHTTPMiddleware).
"""

import re
import uuid
from typing import Callable

from signdesk.shared.telemetry.logging import request_id_var

REQUEST_ID_MAX_LENGTH = 64
_REQUEST_ID_PATTERN = re.compile(r"^[a-zA-Z0-9_-]{1,%d}$" % REQUEST_ID_MAX_LENGTH)


def _header_value(scope: dict, name: str) -> str | None:
    """First value of header name (case-insensitive)."""
    wanted = name.lower().encode()
    for key, value in scope.get("headers", []):
        if key.lower() == wanted:
            return value.decode("utf-8", errors="replace")
    return None


def sanitize_request_id(raw: str | None) -> str:
    """Return raw when it is a safe token, else a fresh hex id."""
    candidate = (raw or "").strip()
    if _REQUEST_ID_PATTERN.match(candidate):
        return candidate
    return uuid.uuid4().hex


def RequestIDMiddleware(app: Callable, header_name: str = "X-Request-ID") -> Callable:
    """Tag each HTTP request and response with a request id."""
    encoded_header = header_name.lower().encode()

    async def asgi_app(scope: dict, receive: Callable, send: Callable) -> None:
        if scope["type"] != "http":
            await app(scope, receive, send)
            return
        request_id = sanitize_request_id(_header_value(scope, header_name))
        scope.setdefault("state", {})["request_id"] = request_id
        token = request_id_var.set(request_id)

        async def send_with_id(message: dict) -> None:
            if message["type"] == "http.response.start":
                message["headers"] = [
                    *message.get("headers", []),
                    (encoded_header, request_id.encode()),
                ]
            await send(message)

        try:
            await app(scope, receive, send_with_id)
        finally:
            request_id_var.reset(token)

    return asgi_app

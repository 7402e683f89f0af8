"""ASGI middleware."""

from signdesk.middleware.request_id import RequestIDMiddleware

__all__ = ["RequestIDMiddleware"]

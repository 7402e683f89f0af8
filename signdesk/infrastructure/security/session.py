"""Session provider backed by a bearer token (implements ISessionProvider)."""

from __future__ import annotations

import logging

from signdesk.application.dtos.auth import AuthSession
from signdesk.infrastructure.security.jwt import verify_token

logger = logging.getLogger(__name__)


class BearerSessionProvider:
    """Resolves the session from the request's bearer token; invalid tokens mean no session."""

    def __init__(self, token: str | None) -> None:
        self._token = token
        self._session: AuthSession | None = None
        self._resolved = False

    async def get_session(self) -> AuthSession | None:
        if self._resolved:
            return self._session
        self._resolved = True
        if not self._token:
            return None
        try:
            payload = verify_token(self._token)
        except ValueError as e:
            logger.info("Rejected bearer token: %s", e)
            return None
        self._session = AuthSession(
            user_id=payload["sub"],
            email=payload.get("email"),
            role=payload.get("role"),
        )
        return self._session

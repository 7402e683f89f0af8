"""JWT verification for bearer tokens issued by the backend auth service.

Uses signdesk.core.config for the shared secret, algorithm and audience.
"""

from datetime import UTC, datetime, timedelta
from typing import Any, cast

from jose import JWTError, jwt

from signdesk.core.config import get_settings


def create_access_token(
    data: dict[str, Any],
    expires_delta: timedelta = timedelta(hours=1),
) -> str:
    """Create a token the way the auth service does (local tooling and tests).

    Args:
        data: Claims to encode (sub, email, role).
        expires_delta: Token lifetime.

    Returns:
        Encoded JWT string.
    """
    settings = get_settings()
    to_encode = data.copy()
    to_encode["exp"] = datetime.now(UTC) + expires_delta
    if settings.jwt_audience and "aud" not in to_encode:
        to_encode["aud"] = settings.jwt_audience
    encoded = jwt.encode(
        to_encode,
        settings.supabase_jwt_secret.get_secret_value(),
        algorithm=settings.jwt_algorithm,
    )
    return cast(str, encoded)


def verify_token(token: str) -> dict[str, Any]:
    """Verify and decode a JWT. Returns the payload.

    Enforces presence of exp and sub, and the configured audience when set.

    Args:
        token: JWT string (e.g. from Authorization header).

    Returns:
        Decoded payload dict.

    Raises:
        ValueError: If token is invalid, expired, or missing required claims.
    """
    settings = get_settings()
    secret = settings.supabase_jwt_secret.get_secret_value()
    if not secret:
        raise ValueError("Token verification is not configured")
    try:
        payload = jwt.decode(
            token,
            secret,
            algorithms=[settings.jwt_algorithm],
            audience=settings.jwt_audience,
            options={
                "require_exp": True,
                "require_sub": True,
                "verify_aud": settings.jwt_audience is not None,
            },
        )
    except JWTError as e:
        raise ValueError(f"Invalid token: {e!s}") from e
    if not payload.get("sub"):
        raise ValueError("Token missing required claim: sub")
    return payload

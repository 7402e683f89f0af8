"""DTOs for the authenticated session."""

from dataclasses import dataclass


@dataclass(frozen=True)
class AuthSession:
    """Signed-in user as seen by use cases (from a verified bearer token)."""

    user_id: str
    email: str | None = None
    role: str | None = None

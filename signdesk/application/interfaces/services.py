"""Service interfaces (ports) for the application layer.

Protocols define contracts for collaborators that live outside the
application layer (DIP): the current session and the hosted language model.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from signdesk.application.dtos.auth import AuthSession


# Session provider interface
class ISessionProvider(Protocol):
    """Protocol for resolving the signed-in user of the current viewer session."""

    async def get_session(self) -> AuthSession | None:
        """Return the current session, or None when not signed in."""


# LLM client interface
class ILLMClient(Protocol):
    """Protocol for a chat model that answers with a JSON document."""

    async def complete_json(self, system_prompt: str, user_prompt: str) -> str:
        """Return the raw JSON text produced for the prompts."""

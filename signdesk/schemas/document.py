"""Signed document file API schemas."""

from pydantic import BaseModel


class DocumentFileResponse(BaseModel):
    """Public URL of a stored final document (null when none exists yet)."""

    url: str | None = None

"""Logging setup for the application."""

from signdesk.shared.telemetry.logging import (
    RequestIDFilter,
    request_id_var,
    setup_logging,
)

__all__ = ["RequestIDFilter", "request_id_var", "setup_logging"]

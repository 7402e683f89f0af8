"""Shared utilities (datetime, id generation)."""

from signdesk.shared.utils.datetime import ensure_utc, from_timestamp_utc, utc_now
from signdesk.shared.utils.generators import generate_cuid

__all__ = ["ensure_utc", "from_timestamp_utc", "generate_cuid", "utc_now"]

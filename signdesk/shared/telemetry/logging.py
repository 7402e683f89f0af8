"""Logging configuration for the application."""

import logging
import sys
from contextvars import ContextVar

from signdesk.core.config import get_settings

# Set by RequestIDMiddleware for the duration of each HTTP request.
request_id_var: ContextVar[str] = ContextVar("request_id", default="-")


class RequestIDFilter(logging.Filter):
    """Adds the current request id to every record as %(request_id)s."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = request_id_var.get()
        return True


def setup_logging() -> None:
    """Configure application-wide logging.

    Level is DEBUG when settings.debug is True, otherwise INFO.
    Output goes to stdout. httpx request lines are kept at WARNING unless
    debugging, since every store call would otherwise be logged.
    """
    settings = get_settings()
    log_level = logging.DEBUG if settings.debug else logging.INFO
    handler = logging.StreamHandler(sys.stdout)
    handler.addFilter(RequestIDFilter())
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - [%(request_id)s] %(message)s",
        handlers=[handler],
    )
    if not settings.debug:
        logging.getLogger("httpx").setLevel(logging.WARNING)


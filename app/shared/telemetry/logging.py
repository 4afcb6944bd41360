"""Logging configuration for the application."""

import logging
import sys

from app.core.config import get_settings
from app.middleware.request_context import RequestContextLogFilter


def setup_logging() -> None:
    """Configure application-wide logging.

    Level is DEBUG when settings.debug is True, otherwise settings.log_level.
    Output goes to stdout; each line carries the request id. Transport
    loggers are held at WARNING so request bodies (passwords included)
    never reach the log.
    """
    settings = get_settings()
    log_level = logging.DEBUG if settings.debug else settings.log_level.upper()
    handler = logging.StreamHandler(sys.stdout)
    handler.addFilter(RequestContextLogFilter())
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - [%(request_id)s] %(message)s",
        handlers=[handler],
    )
    for noisy in ("httpx", "httpcore"):
        logging.getLogger(noisy).setLevel(logging.WARNING)

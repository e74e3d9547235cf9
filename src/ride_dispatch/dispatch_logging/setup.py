"""Root logger configuration for the dispatch service."""

import logging
import sys
from typing import TextIO

from ride_dispatch.settings import LoggingSettings

from .context import ContextFilter
from .filters import PIIFilter
from .formatters import DevFormatter, JSONFormatter

# Libraries whose INFO output drowns the dispatch logs
QUIET_LOGGERS = ("sqlalchemy.engine", "uvicorn.access", "httpx")


def setup_logging(settings: LoggingSettings | None = None, stream: TextIO | None = None) -> None:
    """Replace root handlers with one stream handler configured from settings."""
    settings = settings or LoggingSettings()
    root_logger = logging.getLogger()
    root_logger.handlers.clear()

    handler = logging.StreamHandler(stream or sys.stdout)
    if settings.format == "json":
        handler.setFormatter(JSONFormatter(settings.environment))
    else:
        handler.setFormatter(DevFormatter())

    handler.addFilter(ContextFilter())
    handler.addFilter(PIIFilter())

    root_logger.addHandler(handler)
    root_logger.setLevel(settings.level)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

"""Log formatters for JSON and human-readable output."""

import json
import logging
from datetime import UTC, datetime

# Record attributes set by log_context / extra= that identify the ride being handled
CONTEXT_FIELDS = ("request_id", "ride_id", "driver_id", "rider_id", "correlation_id")


def context_of(record: logging.LogRecord) -> dict[str, str]:
    return {
        field: str(getattr(record, field))
        for field in CONTEXT_FIELDS
        if getattr(record, field, None) is not None
    }


class JSONFormatter(logging.Formatter):
    """One JSON object per line, for log shipping in deployed environments."""

    def __init__(self, environment: str = "development", service: str = "ride-dispatch"):
        super().__init__()
        self.environment = environment
        self.service = service

    def format(self, record: logging.LogRecord) -> str:
        log_data: dict[str, str] = {
            "timestamp": datetime.fromtimestamp(record.created, UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "service": self.service,
            "env": self.environment,
        }
        log_data.update(context_of(record))

        if record.levelno >= logging.WARNING:
            log_data["source"] = f"{record.module}:{record.lineno}"
        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data)


class DevFormatter(logging.Formatter):
    """Single-line console format with the ride context in brackets."""

    def __init__(self) -> None:
        super().__init__(
            fmt="%(asctime)s [%(levelname)8s] %(name)s [%(context)s]: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

    def format(self, record: logging.LogRecord) -> str:
        context = context_of(record)
        # correlation_id repeats request_id for request-scoped work
        if context.get("correlation_id") == context.get("request_id"):
            context.pop("correlation_id", None)
        record.context = " ".join(f"{k}={v}" for k, v in context.items()) or "-"
        return super().format(record)

"""Structured logging configuration.

Provides JSON or text log output. Log lines written while an editing
session is being committed carry that session's id.
"""

import json
import logging
import sys
from contextvars import ContextVar
from datetime import UTC, datetime
from typing import Any

# Id of the editing session currently being committed, if any
session_id_ctx: ContextVar[str | None] = ContextVar("session_id", default=None)


class JsonFormatter(logging.Formatter):
    """Formats each record as a single JSON object.

    Keys: timestamp, level, service, logger, message, plus session_id
    while a commit is in progress and any extra fields passed through
    :class:`StructuredLogger`.
    """

    def __init__(self, service_name: str = "alert-profiles-api"):
        super().__init__()
        self.service_name = service_name

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "timestamp": datetime.now(UTC).isoformat(),
            "level": record.levelname,
            "service": self.service_name,
            "logger": record.name,
            "message": record.getMessage(),
        }

        session_id = session_id_ctx.get()
        if session_id:
            payload["session_id"] = session_id

        if hasattr(record, "extra_fields"):
            payload.update(record.extra_fields)

        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)

        return json.dumps(payload, default=str)


class TextFormatter(logging.Formatter):
    """Human-readable formatter for development.

    Format: timestamp - service - level - [session_id] - message key=value...
    """

    def __init__(self, service_name: str = "alert-profiles-api"):
        super().__init__()
        self.service_name = service_name

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.now(UTC).strftime("%Y-%m-%d %H:%M:%S")
        session_id = session_id_ctx.get() or "-"

        line = (
            f"{timestamp} - {self.service_name} - {record.levelname} - "
            f"[{session_id}] - {record.getMessage()}"
        )

        extra_fields = getattr(record, "extra_fields", None)
        if extra_fields:
            line += " " + " ".join(f"{k}={v}" for k, v in extra_fields.items())

        if record.exc_info:
            line += f"\n{self.formatException(record.exc_info)}"

        return line


def setup_logging(
    log_format: str = "json",
    log_level: str = "INFO",
    service_name: str = "alert-profiles-api",
) -> None:
    """Configure the root logger.

    Args:
        log_format: 'json' for structured logging, 'text' for human-readable
        log_level: Logging level name
        service_name: Service name to include in every line
    """
    level = getattr(logging, log_level.upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    if log_format.lower() == "json":
        handler.setFormatter(JsonFormatter(service_name=service_name))
    else:
        handler.setFormatter(TextFormatter(service_name=service_name))
    root_logger.addHandler(handler)

    # Reduce noise from third-party libraries
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("aiosqlite").setLevel(logging.WARNING)


class StructuredLogger:
    """Logger wrapper that accepts structured fields as keyword arguments."""

    def __init__(self, name: str):
        self._logger = logging.getLogger(name)

    def _log(self, level: int, msg: str, fields: dict[str, Any]) -> None:
        extra = {"extra_fields": fields} if fields else {}
        self._logger.log(level, msg, extra=extra)

    def debug(self, msg: str, **fields: Any) -> None:
        self._log(logging.DEBUG, msg, fields)

    def info(self, msg: str, **fields: Any) -> None:
        self._log(logging.INFO, msg, fields)

    def warning(self, msg: str, **fields: Any) -> None:
        self._log(logging.WARNING, msg, fields)

    def error(self, msg: str, **fields: Any) -> None:
        self._log(logging.ERROR, msg, fields)

    def exception(self, msg: str, **fields: Any) -> None:
        """Log at ERROR with the active exception's traceback."""
        extra = {"extra_fields": fields} if fields else {}
        self._logger.exception(msg, extra=extra)


def get_logger(name: str) -> StructuredLogger:
    """Get a structured logger instance (typically ``get_logger(__name__)``)."""
    return StructuredLogger(name)

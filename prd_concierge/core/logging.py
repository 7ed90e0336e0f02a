"""
Structured logging configuration for PRD Concierge.

Supports both human-readable (development) and JSON (staging/production) formats.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict

# Attributes every LogRecord carries; anything else was attached as an extra.
_RESERVED_ATTRS = frozenset((
    "name", "msg", "args", "created", "filename", "funcName",
    "levelname", "levelno", "lineno", "module", "msecs",
    "pathname", "process", "processName", "relativeCreated",
    "stack_info", "exc_info", "exc_text", "thread", "threadName",
    "message", "taskName",
))


class JSONFormatter(logging.Formatter):
    """
    JSON log formatter for structured logging.

    Output format compatible with log aggregators (ELK, CloudWatch, etc.)
    """

    def format(self, record: logging.LogRecord) -> str:
        log_data: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if record.pathname:
            log_data["location"] = {
                "file": record.pathname,
                "line": record.lineno,
                "function": record.funcName,
            }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        for key, value in record.__dict__.items():
            if key not in _RESERVED_ATTRS:
                log_data[key] = value

        return json.dumps(log_data, default=str, ensure_ascii=False)


class TextFormatter(logging.Formatter):
    """Human-readable formatter for development."""

    def __init__(self):
        super().__init__(
            fmt="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )


class LogContext:
    """
    Context manager for adding fields to log records.

    Usage:
        with LogContext(session_id="ss_abc", request_id="req-1"):
            logger.info("Processing input")  # record carries session_id and request_id
    """

    _context: Dict[str, Any] = {}

    def __init__(self, **kwargs):
        self._fields = kwargs
        self._old_values: Dict[str, Any] = {}

    def __enter__(self):
        for key, value in self._fields.items():
            self._old_values[key] = LogContext._context.get(key)
            LogContext._context[key] = value
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        for key, old_value in self._old_values.items():
            if old_value is None:
                LogContext._context.pop(key, None)
            else:
                LogContext._context[key] = old_value

    @classmethod
    def current(cls) -> Dict[str, Any]:
        """Snapshot of the active context fields."""
        return dict(cls._context)


class ContextFilter(logging.Filter):
    """Copies the active LogContext fields onto each record."""

    def filter(self, record: logging.LogRecord) -> bool:
        for key, value in LogContext.current().items():
            if not hasattr(record, key):
                setattr(record, key, value)
        return True


def configure_logging(level: str = "INFO", format_type: str = "text") -> None:
    """
    Configure application logging.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        format_type: "json" for structured, "text" for human-readable
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    root_logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    if format_type.lower() == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(TextFormatter())
    handler.addFilter(ContextFilter())

    root_logger.addHandler(handler)

    # Reduce noise from third-party libraries
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


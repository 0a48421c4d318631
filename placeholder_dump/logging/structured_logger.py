"""
Structured Logger
-----------------
Thin wrapper over a stdlib logger that emits one JSON document per event.

Every record carries:
{
    "timestamp": "ISO8601",
    "level": "DEBUG|INFO|WARNING|ERROR",
    "logger": "http.handlers.placeholder_dump.<suffix>",
    "message": "Human readable message",
    "context": {...}
}

The context dict is also attached to the LogRecord as ``record.context`` so
handlers can use the fields without parsing the JSON text.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional


class StructuredLogger:
    """Structured logger with named children, one per logger suffix."""

    def __init__(self, name: str, logger: Optional[logging.Logger] = None):
        self.name = name
        self.logger = logger or logging.getLogger(name)

    def named(self, suffix: str) -> "StructuredLogger":
        """Return the child logger ``<name>.<suffix>``."""
        return StructuredLogger(f"{self.name}.{suffix}", self.logger.getChild(suffix))

    def _log_structured(
        self,
        level: int,
        message: str,
        context: Optional[Dict[str, Any]] = None,
        exc_info: Optional[BaseException] = None,
    ) -> None:
        """Internal method to log structured event."""
        if not self.logger.isEnabledFor(level):
            return

        log_entry = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": logging.getLevelName(level),
            "logger": self.name,
            "message": message,
            "context": context or {},
        }

        if exc_info is not None:
            log_entry["exception"] = {
                "type": type(exc_info).__name__,
                "message": str(exc_info),
            }

        json_str = json.dumps(log_entry, default=str)
        self.logger.log(
            level,
            json_str,
            extra={"context": dict(context or {}), "event": message},
        )

    def debug(self, message: str, **context: Any) -> None:
        self._log_structured(logging.DEBUG, message, context)

    def info(self, message: str, **context: Any) -> None:
        self._log_structured(logging.INFO, message, context)

    def warning(self, message: str, **context: Any) -> None:
        self._log_structured(logging.WARNING, message, context)

    def error(
        self,
        message: str,
        error: Optional[BaseException] = None,
        **context: Any,
    ) -> None:
        """Log error event; ``error`` is rendered into the context."""
        if error is not None:
            context.setdefault("error", str(error))
        self._log_structured(logging.ERROR, message, context, exc_info=error)

"""Structured logging configuration using structlog.

JSON output for production and console output for development. Item rows
carry user fields (people pickers hold email addresses), so a redaction
processor masks them before rendering.
"""

import re
import sys
from collections.abc import MutableMapping
from typing import Any, cast

import structlog
from structlog.types import EventDict, WrappedLogger

# Event keys whose values are never rendered
SENSITIVE_KEYS: frozenset[str] = frozenset({
    "email",
    "emails",
    "password",
    "secret",
    "token",
    "access_token",
    "authorization",
    "properties",
    "list_row",
    "row",
})

EMAIL_PATTERN = re.compile(r"[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}")

_LEVELS = {
    "DEBUG": 10,
    "INFO": 20,
    "WARNING": 30,
    "ERROR": 40,
    "CRITICAL": 50,
}


class PIIRedactor:
    """Processor masking sensitive keys and email addresses in log events."""

    def __call__(
        self,
        _logger: WrappedLogger,
        _method_name: str,
        event_dict: EventDict,
    ) -> EventDict:
        return cast(EventDict, self._redact(event_dict))

    def _redact(self, data: Any) -> Any:
        if isinstance(data, MutableMapping):
            return {
                key: "[REDACTED]" if str(key).lower() in SENSITIVE_KEYS else self._redact(value)
                for key, value in data.items()
            }
        if isinstance(data, list | tuple):
            return [self._redact(item) for item in data]
        if isinstance(data, str):
            return EMAIL_PATTERN.sub("[EMAIL]", data)
        return data


def setup_logging(
    level: str = "INFO",
    format: str = "json",
    redact_pii: bool = True,
) -> None:
    """Configure structured logging.

    Args:
        level: Minimum log level (DEBUG, INFO, WARNING, ERROR)
        format: "json" for production, "console" for development
        redact_pii: Whether to redact PII from logs
    """
    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
    ]

    if redact_pii:
        processors.append(PIIRedactor())

    if format == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=True))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(_LEVELS.get(level.upper(), 20)),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(sys.stderr),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a logger bound to the given name (typically `__name__`)."""
    return cast(structlog.stdlib.BoundLogger, structlog.get_logger(name))

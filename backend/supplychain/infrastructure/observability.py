"""Structured Logging — JSON formatter and setup for production observability.

Invariants:
    - All logs include timestamp, level, logger name, and message
    - Dispatch extras (operation, transaction, error_kind, status_code, ...)
      surfaced when present, Enum members rendered as their wire value
    - A logged SupplyChainError fills error_kind / error_code / status_code
      from the exception itself, so every error line carries the same keys
    - JSON format in production, human-readable in development

Design Decisions:
    - JSONFormatter over third-party libs: zero dependencies, full control
    - httpx / httpcore request logs capped at WARNING: the ledger, Consul and
      peer clients already log each outbound call with dispatch context
    - setup_logging called once on startup via lifespan; a second call
      replaces the handler instead of stacking another one
"""

import json
import logging
from datetime import datetime, timezone
from enum import Enum

from supplychain.core.errors import ClassifiedError, SupplyChainError

_EXTRA_KEYS = (
    "operation", "transaction", "mode", "path", "method", "route",
    "error_kind", "error_code", "status_code", "context_id", "resolved_via",
)
_QUIET_LOGGERS = ("httpx", "httpcore")


def _render(value: object) -> object:
    return value.value if isinstance(value, Enum) else value


def _error_fields(exc: BaseException) -> dict:
    """Dispatch keys carried by a gateway exception."""
    if not isinstance(exc, SupplyChainError):
        return {}
    fields = {
        "error_kind": exc.kind.value,
        "error_code": exc.code,
        "status_code": exc.http_status,
    }
    if exc.context.operation:
        fields["operation"] = exc.context.operation
    if isinstance(exc, ClassifiedError) and exc.cause is not None:
        fields["cause"] = type(exc.cause).__name__
    return fields


class JSONFormatter(logging.Formatter):
    """Format logs as JSON for structured logging in production."""

    def format(self, record: logging.LogRecord) -> str:
        log = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key in _EXTRA_KEYS:
            val = record.__dict__.get(key)
            if val is not None:
                log[key] = _render(val)
        if record.exc_info:
            for key, val in _error_fields(record.exc_info[1]).items():
                log.setdefault(key, val)
            log["exception"] = self.formatException(record.exc_info)
        # datetimes and URLs in extras
        return json.dumps(log, ensure_ascii=False, default=str)


_handler: logging.Handler | None = None


def setup_logging(level: str = "INFO", fmt: str = "json"):
    """Configure logging for the application."""
    global _handler
    handler = logging.StreamHandler()
    if fmt == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(
            "%(asctime)s %(levelname)s %(name)s %(message)s",
        ))
    if _handler is not None:
        logging.root.removeHandler(_handler)
    _handler = handler
    logging.root.addHandler(handler)
    logging.root.setLevel(getattr(logging, level.upper(), logging.INFO))
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

"""Error Hierarchy — typed, categorized exceptions for every dispatch failure mode.

Invariants:
    - Every error has a code (str), kind (ErrorKind), severity and http_status
    - ClassifiedError is the only error the API boundary has to understand
    - to_response() produces the single-key {"error": message} envelope
    - The original failure is always reachable through __cause__ / .cause

Design Decisions:
    - Single hierarchy with SupplyChainError base: FastAPI global handler catches all
    - Typed markers (EntityNotFoundError, EntityAlreadyExistsError, LedgerConflictError)
      let the ledger path signal a precise condition without text matching
    - ErrorContext as dataclass: rich observability without coupling to logging
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from supplychain.core.domain_types import ErrorKind


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


# Upstream falls back to 400 when the peer gave no status of its own.
KIND_STATUS: dict[ErrorKind, int] = {
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.ALREADY_EXISTS: 409,
    ErrorKind.CONFLICT: 409,
    ErrorKind.BAD_REQUEST: 400,
    ErrorKind.UPSTREAM: 400,
    ErrorKind.UNKNOWN: 500,
}


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    operation: str | None = None
    context_id: str | None = None
    transaction: str | None = None
    debug_info: dict[str, Any] | None = None


class SupplyChainError(Exception):
    """Base exception for all gateway errors."""

    def __init__(
        self,
        message: str,
        code: str,
        kind: ErrorKind = ErrorKind.UNKNOWN,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
        http_status: int | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.kind = kind
        self.severity = severity
        self.context = context or ErrorContext()
        self.http_status = http_status or KIND_STATUS[kind]

    def to_response(self) -> dict:
        """Convert to the single-key REST error envelope."""
        return {"error": self.message}


# ─── Classified (API boundary) ──────────────────────────────────

class ClassifiedError(SupplyChainError):
    """Failure mapped to a stable kind. Carries the underlying cause."""

    def __init__(
        self,
        kind: ErrorKind,
        message: str,
        cause: BaseException | None = None,
        http_status: int | None = None,
        context: ErrorContext | None = None,
    ):
        severity = (
            ErrorSeverity.CRITICAL if kind == ErrorKind.UNKNOWN
            else ErrorSeverity.WARNING
        )
        super().__init__(
            message, kind.value.upper(), kind, severity, context, http_status,
        )
        self.cause = cause

    def __repr__(self) -> str:
        return (
            f"ClassifiedError(kind={self.kind.value!r}, "
            f"status={self.http_status}, message={self.message!r})"
        )


# ─── Ledger path ────────────────────────────────────────────────

class LedgerInvocationError(SupplyChainError):
    """Ledger submit/evaluate failed without a recognizable typed condition."""
    def __init__(
        self, message: str, transaction: str, context: ErrorContext | None = None,
    ):
        ctx = context or ErrorContext()
        ctx.transaction = transaction
        super().__init__(
            message, "LEDGER_ERROR", ErrorKind.UNKNOWN,
            ErrorSeverity.ERROR, ctx,
        )
        self.transaction = transaction


class EntityNotFoundError(LedgerInvocationError):
    """Typed marker: the ledger rejected because the entity is absent."""
    def __init__(
        self, message: str, transaction: str, context: ErrorContext | None = None,
    ):
        super().__init__(message, transaction, context)
        self.code = "ENTITY_NOT_FOUND"
        self.kind = ErrorKind.NOT_FOUND
        self.http_status = KIND_STATUS[ErrorKind.NOT_FOUND]


class EntityAlreadyExistsError(LedgerInvocationError):
    """Typed marker: a create collided with an existing entity."""
    def __init__(
        self, message: str, transaction: str, context: ErrorContext | None = None,
    ):
        super().__init__(message, transaction, context)
        self.code = "ENTITY_ALREADY_EXISTS"
        self.kind = ErrorKind.ALREADY_EXISTS
        self.http_status = KIND_STATUS[ErrorKind.ALREADY_EXISTS]


class LedgerConflictError(LedgerInvocationError):
    """Typed marker: generic state conflict (e.g. MVCC read conflict)."""
    def __init__(
        self, message: str, transaction: str, context: ErrorContext | None = None,
    ):
        super().__init__(message, transaction, context)
        self.code = "LEDGER_CONFLICT"
        self.kind = ErrorKind.CONFLICT
        self.http_status = KIND_STATUS[ErrorKind.CONFLICT]


# ─── Remote path ────────────────────────────────────────────────

class RemotePeerError(SupplyChainError):
    """Remote peer answered with a non-2xx status."""
    def __init__(
        self, status_code: int, body: str, url: str,
        context: ErrorContext | None = None,
    ):
        super().__init__(
            f"Remote peer returned {status_code} for {url}",
            "REMOTE_PEER_ERROR", ErrorKind.UPSTREAM,
            ErrorSeverity.ERROR, context, status_code,
        )
        self.status_code = status_code
        self.body = body
        self.url = url


class RemoteTransportError(SupplyChainError):
    """Remote peer unreachable: connection refused, timeout, protocol error."""
    def __init__(self, message: str, url: str, context: ErrorContext | None = None):
        super().__init__(
            f"Remote call to {url} failed: {message}",
            "REMOTE_TRANSPORT_ERROR", ErrorKind.UNKNOWN,
            ErrorSeverity.CRITICAL, context,
        )
        self.url = url


class ResponseParseError(SupplyChainError):
    """Response body present but unusable as JSON object or raw string."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "RESPONSE_PARSE_ERROR", ErrorKind.UNKNOWN,
            ErrorSeverity.ERROR, context,
        )

"""Error Classifier — deterministic mapping from any failure to a ClassifiedError.

Invariants:
    - classify() is total: every failure maps to exactly one ErrorKind
    - Precedence: typed marker > remote HTTP status > message predicates > operation fallback
    - Text matching never overrides a typed or structured signal
    - The original failure is retained as ClassifiedError.cause
    - An already-classified failure passes through unchanged

Design Decisions:
    - Strategy chain as an explicit ordered list: precedence is inspectable and
      each strategy is testable on its own
    - Message predicates are an ordered list of (predicate, kind) pairs, not
      nested conditionals
    - Fallback kind is recorded per operation at dispatch time, never guessed
      from the message
"""

from typing import Callable, Iterator

from supplychain.core.domain_types import ErrorKind
from supplychain.core.errors import (
    ClassifiedError,
    EntityAlreadyExistsError,
    EntityNotFoundError,
    ErrorContext,
    LedgerConflictError,
    RemotePeerError,
)
from supplychain.core.operations import Operation
from supplychain.core.response_envelope import RawString, StructuredMessage, parse_envelope, value_to_text

Strategy = Callable[[BaseException, Operation, str], "ClassifiedError | None"]
MessagePredicate = Callable[[str], bool]


def _contains_any(*needles: str) -> MessagePredicate:
    def predicate(text: str) -> bool:
        return any(n in text for n in needles)
    return predicate


# Order matters: "already exists" is checked before the not-found family.
MESSAGE_PREDICATES: list[tuple[MessagePredicate, ErrorKind]] = [
    (_contains_any("already exists"), ErrorKind.ALREADY_EXISTS),
    (_contains_any("not found", "does not exist", "not exist"), ErrorKind.NOT_FOUND),
]

_TYPED_MARKERS: list[tuple[type[BaseException], ErrorKind]] = [
    (EntityNotFoundError, ErrorKind.NOT_FOUND),
    (EntityAlreadyExistsError, ErrorKind.ALREADY_EXISTS),
    (LedgerConflictError, ErrorKind.CONFLICT),
]


def iter_causes(failure: BaseException) -> Iterator[BaseException]:
    """Walk the failure and its explicit causes, guarding against cycles."""
    seen: set[int] = set()
    current: BaseException | None = failure
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        yield current
        current = current.__cause__


def kind_message(kind: ErrorKind, operation: Operation, context_id: str) -> str:
    """User-facing message for a kind in the context of an operation."""
    if kind == ErrorKind.NOT_FOUND:
        return operation.not_found_message.format(id=context_id)
    if kind == ErrorKind.ALREADY_EXISTS:
        return operation.already_exists_message.format(id=context_id)
    return operation.failure_message


def _context(operation: Operation, context_id: str) -> ErrorContext:
    return ErrorContext(
        operation=operation.name.value,
        context_id=context_id,
        transaction=operation.transaction,
    )


# ─── Strategies ─────────────────────────────────────────────────

def match_typed_marker(
    failure: BaseException, operation: Operation, context_id: str,
) -> ClassifiedError | None:
    """Most precise: the ledger path raised a recognizable typed condition."""
    for exc in iter_causes(failure):
        for marker, kind in _TYPED_MARKERS:
            if isinstance(exc, marker):
                return ClassifiedError(
                    kind, kind_message(kind, operation, context_id),
                    cause=failure, context=_context(operation, context_id),
                )
    return None


def match_remote_status(
    failure: BaseException, operation: Operation, context_id: str,
) -> ClassifiedError | None:
    """Remote peer answered non-2xx: surface its status and its own message."""
    for exc in iter_causes(failure):
        if isinstance(exc, RemotePeerError):
            return ClassifiedError(
                ErrorKind.UPSTREAM,
                peer_error_message(exc.body) or operation.failure_message,
                cause=failure,
                http_status=exc.status_code,
                context=_context(operation, context_id),
            )
    return None


def match_message_text(
    failure: BaseException, operation: Operation, context_id: str,
) -> ClassifiedError | None:
    """Last resort: case-insensitive substring predicates over the message chain."""
    text = " ".join(str(exc) for exc in iter_causes(failure)).lower()
    for predicate, kind in MESSAGE_PREDICATES:
        if predicate(text):
            return ClassifiedError(
                kind, kind_message(kind, operation, context_id),
                cause=failure, context=_context(operation, context_id),
            )
    return None


STRATEGIES: list[Strategy] = [
    match_typed_marker,
    match_remote_status,
    match_message_text,
]


def match_success_body(
    text: str, operation: Operation, context_id: str,
) -> ClassifiedError | None:
    """A 2xx peer body that still reports the operation's rejection kind.

    Only operations with a `success_rejection_kind` are checked, using the
    same message predicates as the failure chain.
    """
    kind = operation.success_rejection_kind
    if kind is None:
        return None
    lowered = text.lower()
    for predicate, predicate_kind in MESSAGE_PREDICATES:
        if predicate_kind == kind and predicate(lowered):
            return ClassifiedError(
                kind, kind_message(kind, operation, context_id),
                context=_context(operation, context_id),
            )
    return None


def peer_error_message(body: str | None) -> str:
    """Peer's own error text: the "error" envelope value, else the body verbatim."""
    envelope = parse_envelope(body, "error")
    if isinstance(envelope, StructuredMessage):
        return value_to_text(envelope.value)
    if isinstance(envelope, RawString):
        return envelope.value
    return ""


def classify(
    failure: BaseException, operation: Operation, context_id: str,
) -> ClassifiedError:
    """Map a failure to exactly one ClassifiedError."""
    if isinstance(failure, ClassifiedError):
        return failure
    for strategy in STRATEGIES:
        classified = strategy(failure, operation, context_id)
        if classified is not None:
            return classified
    return ClassifiedError(
        operation.fallback_kind, operation.failure_message,
        cause=failure, context=_context(operation, context_id),
    )

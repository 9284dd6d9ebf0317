"""Response Envelope — single parse step from raw peer body to a tagged union.

Invariants:
    - parse_envelope() is the ONLY place a peer body is inspected
    - Priority: StructuredMessage(key present, non-null) > RawString(non-blank) > Empty
    - extract() is pure: same body + key always yields the same result
    - Non-UTF-8 bytes raise ResponseParseError (body present but unusable)

Design Decisions:
    - Tagged union of frozen dataclasses over ad hoc dict lookups per operation
    - Raw fallback exists because non-conforming peers answer with a bare string;
      conforming peers answer with this same service's single-key envelope
"""

import json
from dataclasses import dataclass
from typing import Union

from supplychain.core.domain_types import ErrorKind, NormalizedResult
from supplychain.core.errors import ClassifiedError, ResponseParseError


@dataclass(frozen=True)
class StructuredMessage:
    key: str
    value: object


@dataclass(frozen=True)
class RawString:
    value: str


@dataclass(frozen=True)
class Empty:
    pass


Envelope = Union[StructuredMessage, RawString, Empty]


def decode_body(raw_body: bytes | str | None) -> str | None:
    """Decode a raw body to text. None stays None."""
    if raw_body is None or isinstance(raw_body, str):
        return raw_body
    try:
        return raw_body.decode("utf-8")
    except UnicodeDecodeError as e:
        raise ResponseParseError(
            f"Response body is not valid UTF-8: {e}",
        ) from e


def parse_envelope(raw_body: bytes | str | None, expected_key: str) -> Envelope:
    """Classify a raw body into StructuredMessage | RawString | Empty."""
    text = decode_body(raw_body)
    if text is None or not text.strip():
        return Empty()
    try:
        parsed = json.loads(text)
    except ValueError:
        parsed = None
    if isinstance(parsed, dict) and parsed.get(expected_key) is not None:
        return StructuredMessage(expected_key, parsed[expected_key])
    return RawString(text)


def value_to_text(value: object) -> str:
    """String form of an envelope value — strings as-is, JSON otherwise."""
    if isinstance(value, str):
        return value
    return json.dumps(value, ensure_ascii=False)


def extract(
    raw_body: bytes | str | None,
    expected_key: str,
    *,
    raw_fallback: bool = True,
    empty_kind: ErrorKind | None = ErrorKind.NOT_FOUND,
    empty_message: str = "Not found",
) -> NormalizedResult:
    """Extract the logical payload of a peer response.

    Args:
        raw_body: body bytes/text as received (may be None).
        expected_key: envelope key of the producing route ("message", "product", ...).
        raw_fallback: accept a non-conforming body verbatim (per-operation
            policy, Operation.raw_fallback).
        empty_kind: kind raised when nothing usable is found; None means an
            empty body is a valid empty result.
        empty_message: message of the raised ClassifiedError.

    Raises:
        ClassifiedError: nothing usable and empty_kind is set.
        ResponseParseError: body bytes are not decodable.
    """
    envelope = parse_envelope(raw_body, expected_key)
    if isinstance(envelope, StructuredMessage):
        return NormalizedResult(value_to_text(envelope.value))
    if isinstance(envelope, RawString) and raw_fallback:
        return NormalizedResult(envelope.value)
    if empty_kind is None:
        return NormalizedResult("")
    raise ClassifiedError(empty_kind, empty_message)

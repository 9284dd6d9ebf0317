"""Ledger Gateway Client — LedgerClient over the ledger network's HTTP gateway.

Invariants:
    - submit() and evaluate() issue exactly one POST each; no retries
    - 2xx → raw body bytes, untouched
    - Gateway error codes NOT_FOUND / ALREADY_EXISTS / CONFLICT → typed markers
    - Every other failure (status, timeout, connection) → LedgerInvocationError

Design Decisions:
    - Wrapper over raw httpx: isolates wire format and error mapping from the
      dispatcher
    - Typed markers come from the gateway's structured "code", never from text
"""

import logging
from typing import Sequence

import httpx

from supplychain.core.domain_types import InvocationMode
from supplychain.core.errors import (
    EntityAlreadyExistsError,
    EntityNotFoundError,
    LedgerConflictError,
    LedgerInvocationError,
)

logger = logging.getLogger(__name__)

_TYPED_CODES: dict[str, type[LedgerInvocationError]] = {
    "NOT_FOUND": EntityNotFoundError,
    "ALREADY_EXISTS": EntityAlreadyExistsError,
    "CONFLICT": LedgerConflictError,
}


class LedgerGatewayClient:
    """Invokes chaincode transactions through the gateway's REST facade."""

    def __init__(self, client: httpx.AsyncClient, channel: str, contract: str):
        self._client = client
        self.channel = channel
        self.contract = contract

    async def submit(self, transaction: str, args: Sequence[str]) -> bytes:
        return await self._invoke(InvocationMode.SUBMIT, transaction, args)

    async def evaluate(self, transaction: str, args: Sequence[str]) -> bytes:
        return await self._invoke(InvocationMode.EVALUATE, transaction, args)

    async def _invoke(
        self, mode: InvocationMode, transaction: str, args: Sequence[str],
    ) -> bytes:
        payload = {
            "channel": self.channel,
            "contract": self.contract,
            "transaction": transaction,
            "arguments": list(args),
        }
        try:
            response = await self._client.post(
                f"/transactions/{mode.value}", json=payload,
            )
        except httpx.TimeoutException as e:
            raise LedgerInvocationError(
                f"Ledger {mode.value} timed out: {transaction}", transaction,
            ) from e
        except httpx.HTTPError as e:
            raise LedgerInvocationError(
                f"Ledger gateway unreachable: {e}", transaction,
            ) from e

        if response.is_success:
            logger.info(
                "Ledger invocation succeeded",
                extra={"transaction": transaction, "mode": mode.value},
            )
            return response.content
        raise self._map_error(response, transaction)

    def _map_error(
        self, response: httpx.Response, transaction: str,
    ) -> LedgerInvocationError:
        """Build the typed error for a non-2xx gateway answer."""
        message, code = _read_error_body(response)
        logger.warning(
            f"Ledger gateway rejected {transaction}: {message}",
            extra={"transaction": transaction, "status_code": response.status_code},
        )
        error_cls = _TYPED_CODES.get(code, LedgerInvocationError)
        return error_cls(message, transaction)


def _read_error_body(response: httpx.Response) -> tuple[str, str]:
    """Extract (message, code) from a gateway error body."""
    fallback = response.text or f"Ledger gateway returned {response.status_code}"
    try:
        body = response.json()
    except ValueError:
        return fallback, ""
    if not isinstance(body, dict):
        return fallback, ""
    message = body.get("error") or body.get("message") or fallback
    return str(message), str(body.get("code") or "").upper()

"""Operation Dispatch — routes each logical operation to the ledger or a remote peer.

Invariants:
    - remote_enabled off → LedgerClient called exactly once, resolver never consulted
    - remote_enabled on AND resolved base URL non-blank → exactly one HTTP call,
      LedgerClient never touched
    - Binary, non-retrying choice: no failover from remote to local within a call
    - Queries use evaluate, all other operations submit
    - Every failure leaves as ClassifiedError with the original cause chained
    - A 2xx remote body reporting a duplicate create is raised as ALREADY_EXISTS

Design Decisions:
    - Result normalization only on the remote path: the ledger answers raw bytes
      which are decoded as-is (empty results from writes are valid)
    - Classification happens here, once; the API boundary only maps kind → status
"""

import logging

from supplychain.core.boundary_protocols import LedgerClient
from supplychain.core.domain_types import InvocationMode, NormalizedResult, OperationName
from supplychain.core.error_classifier import classify, match_success_body
from supplychain.core.operations import Operation, OperationArgs, get_operation
from supplychain.core.response_envelope import decode_body, extract
from supplychain.services.endpoint_resolver import RemoteEndpoint, RemoteEndpointResolver
from supplychain.services.remote_peer_client import RemotePeerClient

logger = logging.getLogger(__name__)


class OperationDispatcher:
    """Executes an operation on the local ledger or a remote peer."""

    def __init__(
        self,
        ledger: LedgerClient,
        *,
        remote_enabled: bool = False,
        resolver: RemoteEndpointResolver | None = None,
        remote_client: RemotePeerClient | None = None,
    ):
        self._ledger = ledger
        self.remote_enabled = remote_enabled
        self._resolver = resolver
        self._remote_client = remote_client

    async def execute(
        self, operation: Operation | OperationName | str, args: OperationArgs,
    ) -> NormalizedResult:
        """Run one operation. Raises ClassifiedError on any failure."""
        if not isinstance(operation, Operation):
            operation = get_operation(operation)
        context_id = args.context_id
        try:
            endpoint = await self._remote_endpoint()
            if endpoint is not None:
                return await self._execute_remote(endpoint, operation, args)
            return await self._execute_local(operation, args)
        except Exception as e:
            classified = classify(e, operation, context_id)
            logger.warning(
                f"{operation.name.value} failed for id={context_id}: {e}",
                extra={
                    "operation": operation.name.value,
                    "context_id": context_id,
                    "error_kind": classified.kind.value,
                    "status_code": classified.http_status,
                },
            )
            if classified is e:
                raise
            raise classified from e

    async def _remote_endpoint(self) -> RemoteEndpoint | None:
        """Resolved peer endpoint when remote delegation applies, else None."""
        if not self.remote_enabled or self._resolver is None or self._remote_client is None:
            return None
        endpoint = await self._resolver.resolve()
        return endpoint if endpoint.available else None

    async def _execute_local(
        self, operation: Operation, args: OperationArgs,
    ) -> NormalizedResult:
        logger.info(
            f"Invoking ledger for {operation.name.value} id={args.context_id}",
            extra={
                "operation": operation.name.value,
                "transaction": operation.transaction,
                "mode": operation.mode.value,
            },
        )
        if operation.mode == InvocationMode.EVALUATE:
            raw = await self._ledger.evaluate(operation.transaction, list(args.values))
        else:
            raw = await self._ledger.submit(operation.transaction, list(args.values))
        return NormalizedResult(decode_body(raw) or "")

    async def _execute_remote(
        self, endpoint: RemoteEndpoint, operation: Operation, args: OperationArgs,
    ) -> NormalizedResult:
        raw = await self._remote_client.call(endpoint, operation, args)
        result = extract(
            raw,
            operation.envelope_key,
            raw_fallback=operation.raw_fallback,
            empty_kind=operation.empty_body_kind,
            empty_message=_empty_message(operation, args),
        )
        rejection = match_success_body(result, operation, args.context_id)
        if rejection is not None:
            raise rejection
        return result


def _empty_message(operation: Operation, args: OperationArgs) -> str:
    return operation.not_found_message.format(id=args.context_id)

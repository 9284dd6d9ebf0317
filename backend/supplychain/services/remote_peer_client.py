"""Remote Peer Client — mirrors an operation onto a peer instance's public route.

Invariants:
    - Exactly one HTTP request per call, verb taken from the Operation
    - Path fields substituted URL-encoded into the route template
    - Body fields serialized in the JSON shape the peer route expects;
      numeric fields as JSON integers
    - Non-2xx → RemotePeerError(status, body); transport failure → RemoteTransportError

Design Decisions:
    - Shares the Operation field list with the ledger path: no per-operation
      payload builders to drift apart
"""

import logging
from urllib.parse import quote

import httpx

from supplychain.core.domain_types import FieldPlacement
from supplychain.core.errors import RemotePeerError, RemoteTransportError
from supplychain.core.operations import Operation, OperationArgs, is_decimal_integer
from supplychain.services.endpoint_resolver import RemoteEndpoint

logger = logging.getLogger(__name__)


def build_path(operation: Operation, args: OperationArgs) -> str:
    """Route template with path fields substituted."""
    values = args.as_mapping(operation)
    path_values = {
        f.name: quote(values[f.name], safe="")
        for f in operation.fields if f.placement == FieldPlacement.PATH
    }
    return operation.route.format(**path_values)


def build_payload(operation: Operation, args: OperationArgs) -> dict | None:
    """JSON body for the peer route, or None when the route takes no body.

    Raises:
        ValueError: a numeric field is not a decimal integer string.
    """
    values = args.as_mapping(operation)
    body = {}
    for f in operation.fields:
        if f.placement != FieldPlacement.BODY:
            continue
        value = values[f.name]
        if f.numeric:
            if not is_decimal_integer(value):
                raise ValueError(f"{f.name} is not a decimal integer: {value!r}")
            body[f.name] = int(value)
        else:
            body[f.name] = value
    return body or None


class RemotePeerClient:
    """Issues the operation's HTTP call against a resolved peer endpoint."""

    def __init__(self, client: httpx.AsyncClient):
        self._client = client

    async def call(
        self, endpoint: RemoteEndpoint, operation: Operation, args: OperationArgs,
    ) -> bytes:
        url = endpoint.url_for(build_path(operation, args))
        payload = build_payload(operation, args)
        logger.info(
            f"Delegating {operation.name.value} to remote peer",
            extra={
                "operation": operation.name.value,
                "method": operation.method,
                "path": url,
            },
        )
        try:
            response = await self._client.request(
                operation.method, url, json=payload,
            )
        except httpx.HTTPError as e:
            raise RemoteTransportError(str(e) or type(e).__name__, url) from e

        logger.info(
            f"Remote peer answered {response.status_code}",
            extra={"operation": operation.name.value, "status_code": response.status_code},
        )
        if not response.is_success:
            raise RemotePeerError(response.status_code, response.text, url)
        return response.content

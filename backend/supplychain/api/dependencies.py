"""Route dependencies — access to lifespan-owned singletons."""

from fastapi import Request

from supplychain.services.endpoint_resolver import RemoteEndpointResolver
from supplychain.services.operation_dispatch import OperationDispatcher


def get_dispatcher(request: Request) -> OperationDispatcher:
    return request.app.state.dispatcher


def get_resolver(request: Request) -> RemoteEndpointResolver | None:
    return getattr(request.app.state, "resolver", None)

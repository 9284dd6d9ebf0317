"""Health & Readiness Probes — liveness and routing-mode endpoints.

Invariants:
    - GET /health/ always returns 200 if process is up (liveness)
    - GET /health/ready reports routing mode and the resolved remote endpoint;
      it never fails because the resolver never fails

Design Decisions:
    - Separate liveness/readiness: liveness restarts, readiness removes from
      load balancer
"""

import logging

from fastapi import APIRouter, Depends, status

from supplychain.api.dependencies import get_dispatcher, get_resolver
from supplychain.services.endpoint_resolver import RemoteEndpointResolver
from supplychain.services.operation_dispatch import OperationDispatcher

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/health", tags=["health"])


@router.get("/", status_code=status.HTTP_200_OK)
async def health_check():
    """Basic liveness probe. Returns 200 if the process is up."""
    return {
        "status": "healthy",
        "service": "supplychain-gateway",
        "version": "1.0.0",
    }


@router.get("/ready")
async def readiness_check(
    dispatcher: OperationDispatcher = Depends(get_dispatcher),
    resolver: RemoteEndpointResolver | None = Depends(get_resolver),
):
    """Readiness probe — which path operations will take right now."""
    if not dispatcher.remote_enabled or resolver is None:
        return {"status": "ready", "routing": "local"}
    endpoint = await resolver.resolve()
    return {
        "status": "ready",
        "routing": "remote" if endpoint.available else "local",
        "remote_endpoint": {
            "base_url": endpoint.base_url,
            "resolved_via": endpoint.resolved_via.value,
            "resolved_at": endpoint.resolved_at.isoformat(),
        },
    }

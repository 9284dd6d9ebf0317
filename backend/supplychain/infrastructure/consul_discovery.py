"""Consul Discovery — ServiceDiscovery over Consul's health API.

Invariants:
    - Only instances passing all health checks are returned (?passing=true)
    - Order of Consul's answer is preserved (callers pick the first)
    - Lookup failures propagate; the resolver owns the static fallback

Design Decisions:
    - Service address preferred over node address (Consul semantics: an empty
      Service.Address means "use the node's address")
    - secure = meta "secure" == "true" OR tag "secure" / "https"
"""

import logging

import httpx

from supplychain.core.boundary_protocols import ServiceInstance

logger = logging.getLogger(__name__)

_SECURE_TAGS = frozenset({"secure", "https"})


class ConsulServiceDiscovery:
    """Looks up healthy instances registered under a Consul service name."""

    def __init__(self, client: httpx.AsyncClient):
        self._client = client

    async def healthy_instances(self, service_id: str) -> list[ServiceInstance]:
        response = await self._client.get(
            f"/v1/health/service/{service_id}", params={"passing": "true"},
        )
        response.raise_for_status()
        entries = response.json() or []
        instances = [_to_instance(entry) for entry in entries]
        logger.debug(
            f"Consul returned {len(instances)} healthy instance(s) for {service_id}",
        )
        return instances


def _to_instance(entry: dict) -> ServiceInstance:
    service = entry.get("Service") or {}
    node = entry.get("Node") or {}
    meta = service.get("Meta") or {}
    tags = {str(t).lower() for t in service.get("Tags") or []}
    return ServiceInstance(
        host=service.get("Address") or node.get("Address", ""),
        port=int(service.get("Port", 0)),
        secure=str(meta.get("secure", "")).lower() == "true" or bool(tags & _SECURE_TAGS),
    )

"""Remote Endpoint Resolver — base URL of the peer to delegate to.

Invariants:
    - resolve() never raises: discovery failure falls back to the static URL
    - Static URL returned unchanged apart from trailing-slash stripping
      (blank means "remote unavailable")
    - First healthy discovered instance wins; no load-balancing policy
    - The cache is ONE reference to an immutable _Snapshot, replaced wholesale;
      readers never block and never see a half-updated value

Design Decisions:
    - Atomic reference swap over a lock: asyncio readers only need a consistent
      snapshot; two concurrent refreshes both produce valid endpoints
    - Injectable clock: TTL behavior testable without sleeping
"""

import logging
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable

from supplychain.core.boundary_protocols import ServiceDiscovery
from supplychain.core.domain_types import ResolvedVia

logger = logging.getLogger(__name__)


def strip_trailing_slashes(url: str | None) -> str:
    return (url or "").strip().rstrip("/")


@dataclass(frozen=True)
class RemoteEndpoint:
    """Resolved peer base URL. Immutable; replaced, never mutated."""
    base_url: str
    resolved_via: ResolvedVia
    resolved_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def available(self) -> bool:
        return bool(self.base_url.strip())

    def url_for(self, path: str) -> str:
        """Join base and operation path with exactly one separating slash."""
        return f"{self.base_url}/{path.lstrip('/')}"


@dataclass(frozen=True)
class _Snapshot:
    endpoint: RemoteEndpoint
    expires_at: float


class RemoteEndpointResolver:
    """Resolves the peer base URL from static config or service discovery."""

    def __init__(
        self,
        static_url: str,
        discovery: ServiceDiscovery | None = None,
        *,
        discovery_enabled: bool = False,
        service_id: str = "",
        cache_ttl_seconds: float = 0.0,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.static_url = strip_trailing_slashes(static_url)
        self._discovery = discovery
        self.discovery_enabled = discovery_enabled and discovery is not None
        self.service_id = service_id
        self.cache_ttl_seconds = cache_ttl_seconds
        self._clock = clock
        self._snapshot: _Snapshot | None = None

    @property
    def cached(self) -> RemoteEndpoint | None:
        snapshot = self._snapshot
        return snapshot.endpoint if snapshot else None

    async def resolve(self) -> RemoteEndpoint:
        """Cached endpoint while fresh, otherwise a new resolution."""
        snapshot = self._snapshot
        if snapshot is not None and self._clock() < snapshot.expires_at:
            return snapshot.endpoint
        return await self.refresh()

    async def refresh(self) -> RemoteEndpoint:
        """Force a new resolution and swap the cached snapshot."""
        endpoint = await self._resolve_uncached()
        self._snapshot = _Snapshot(endpoint, self._clock() + self.cache_ttl_seconds)
        return endpoint

    async def _resolve_uncached(self) -> RemoteEndpoint:
        if not self.discovery_enabled:
            return self._static()
        try:
            instances = await self._discovery.healthy_instances(self.service_id)
        except Exception as e:
            logger.warning(
                f"Service discovery failed for '{self.service_id}', "
                f"falling back to static URL: {e}",
                extra={"resolved_via": ResolvedVia.STATIC.value},
            )
            return self._static()
        if not instances:
            logger.info(
                f"No healthy instances for '{self.service_id}', using static URL",
            )
            return self._static()
        endpoint = RemoteEndpoint(
            base_url=strip_trailing_slashes(instances[0].base_url),
            resolved_via=ResolvedVia.DISCOVERY,
        )
        logger.info(
            f"Resolved remote peer {endpoint.base_url}",
            extra={"resolved_via": endpoint.resolved_via.value},
        )
        return endpoint

    def _static(self) -> RemoteEndpoint:
        return RemoteEndpoint(base_url=self.static_url, resolved_via=ResolvedVia.STATIC)

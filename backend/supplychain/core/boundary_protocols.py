"""Boundary Protocols — contracts between the dispatch core and its collaborators.

Invariants:
    - Core NEVER imports from shell — dependency arrows point inward only
    - The ledger is reached only through LedgerClient (submit / evaluate)
    - Service discovery is reached only through ServiceDiscovery

Design Decisions:
    - Protocol over ABC: structural subtyping, test fakes need no inheritance
    - Async in Protocol: implementations do IO; the dispatcher awaits exactly one
      call per invocation
"""

from dataclasses import dataclass
from typing import Protocol, Sequence


@dataclass(frozen=True)
class ServiceInstance:
    """A healthy instance registered under a discovery service id."""
    host: str
    port: int
    secure: bool = False

    @property
    def base_url(self) -> str:
        scheme = "https" if self.secure else "http"
        return f"{scheme}://{self.host}:{self.port}"


class LedgerClient(Protocol):
    """Contract for the external ledger network — implemented by shell."""
    async def submit(self, transaction: str, args: Sequence[str]) -> bytes: ...
    async def evaluate(self, transaction: str, args: Sequence[str]) -> bytes: ...


class ServiceDiscovery(Protocol):
    """Contract for healthy-instance lookup — implemented by shell."""
    async def healthy_instances(self, service_id: str) -> list[ServiceInstance]: ...

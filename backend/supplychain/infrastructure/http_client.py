"""HTTP Client Builder — one place to configure outbound httpx clients.

Invariants:
    - Every outbound client shares the configured timeout and JSON headers
    - No retries: a failure (timeout included) surfaces once to the caller

Design Decisions:
    - Builder over module-level client: lifespan owns creation and closing,
      tests inject an httpx.MockTransport
"""

import httpx

from supplychain.config import Settings


def build_async_client(
    settings: Settings,
    *,
    base_url: str = "",
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    """Create an `httpx.AsyncClient` with the gateway's defaults."""
    return httpx.AsyncClient(
        base_url=base_url,
        timeout=httpx.Timeout(settings.http_timeout_seconds),
        headers={
            "Accept": "application/json",
            "User-Agent": "supplychain-gateway",
        },
        transport=transport,
    )

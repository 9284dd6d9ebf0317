"""Supply Chain Gateway API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map SupplyChainError → {"error": ...} responses
    - Outbound httpx clients created in lifespan and closed on shutdown
    - Resolver and remote client only built when remote delegation is enabled

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - Dispatcher stored on app.state: routes get it through a dependency,
      tests replace it without patching modules
"""

import logging
from contextlib import AsyncExitStack, asynccontextmanager

from fastapi import FastAPI

from supplychain.api.error_handlers import register_error_handlers
from supplychain.api.routes import assets, health
from supplychain.config import Settings, get_settings
from supplychain.infrastructure.consul_discovery import ConsulServiceDiscovery
from supplychain.infrastructure.http_client import build_async_client
from supplychain.infrastructure.ledger_gateway_client import LedgerGatewayClient
from supplychain.infrastructure.observability import setup_logging
from supplychain.services.endpoint_resolver import RemoteEndpointResolver
from supplychain.services.operation_dispatch import OperationDispatcher
from supplychain.services.remote_peer_client import RemotePeerClient

logger = logging.getLogger(__name__)


def build_dispatcher(
    settings: Settings, stack: AsyncExitStack,
) -> tuple[OperationDispatcher, RemoteEndpointResolver | None]:
    """Wire ledger, resolver and remote client from settings."""
    ledger_http = build_async_client(settings, base_url=settings.ledger_gateway_url)
    stack.push_async_callback(ledger_http.aclose)
    ledger = LedgerGatewayClient(
        ledger_http, settings.ledger_channel, settings.ledger_contract,
    )

    if not settings.remote_enabled:
        return OperationDispatcher(ledger), None

    discovery = None
    if settings.discovery_enabled:
        consul_http = build_async_client(settings, base_url=settings.discovery_url)
        stack.push_async_callback(consul_http.aclose)
        discovery = ConsulServiceDiscovery(consul_http)

    resolver = RemoteEndpointResolver(
        settings.remote_url,
        discovery,
        discovery_enabled=settings.discovery_enabled,
        service_id=settings.discovery_service_id,
        cache_ttl_seconds=settings.discovery_cache_ttl_seconds,
    )
    remote_http = build_async_client(settings)
    stack.push_async_callback(remote_http.aclose)
    dispatcher = OperationDispatcher(
        ledger,
        remote_enabled=True,
        resolver=resolver,
        remote_client=RemotePeerClient(remote_http),
    )
    return dispatcher, resolver


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    async with AsyncExitStack() as stack:
        dispatcher, resolver = build_dispatcher(settings, stack)
        app.state.dispatcher = dispatcher
        app.state.resolver = resolver
        logger.info(
            "Supply Chain Gateway started",
            extra={"route": "remote" if settings.remote_enabled else "local"},
        )
        yield
        logger.info("Supply Chain Gateway shutting down")


def create_app() -> FastAPI:
    app = FastAPI(
        title="Supply Chain Gateway", version="1.0.0", lifespan=lifespan,
    )
    app.include_router(health.router)
    app.include_router(assets.router)
    register_error_handlers(app)
    return app


app = create_app()

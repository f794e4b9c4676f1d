"""
subgraph_orchestrator.api.app

FastAPI app factory for the deployment orchestrator.

Responsibilities:
- Build the FastAPI application and register routers.
- Own shared infrastructure: DB engine/sessionmaker and the admin endpoint http client.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI

from subgraph_orchestrator import __version__
from subgraph_orchestrator.api.routers.deployments import router as deployments_router
from subgraph_orchestrator.api.routers.health import router as health_router
from subgraph_orchestrator.api.routers.indexing_rules import router as indexing_rules_router
from subgraph_orchestrator.db.session import create_engine, create_sessionmaker, init_db
from subgraph_orchestrator.observability.logging import configure_logging, get_logger
from subgraph_orchestrator.settings import Settings

log = get_logger(__name__)


def create_app(
    *,
    settings: Settings,
    admin_transport: httpx.AsyncBaseTransport | None = None,
) -> FastAPI:
    """
    `admin_transport` replaces the network transport of the admin endpoint
    client (tests pass an `httpx.MockTransport`).
    """

    configure_logging(service_name=settings.service_name, level=settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        log.info(
            "startup",
            env=settings.env,
            admin_endpoint=settings.admin_endpoint,
            index_node_ids=settings.index_node_ids,
            auto_graft_resolver_depth=settings.auto_graft_resolver_depth,
        )
        engine = create_engine(settings)
        app.state.engine = engine
        app.state.sessionmaker = create_sessionmaker(engine)
        if settings.env in ("dev", "test"):
            # Production schemas are managed by the wider indexer deployment.
            await init_db(engine)

        app.state.admin_http = httpx.AsyncClient(
            base_url=settings.admin_endpoint,
            transport=admin_transport,
            timeout=httpx.Timeout(settings.rpc_timeout_seconds),
        )
        try:
            yield
        finally:
            await app.state.admin_http.aclose()
            await engine.dispose()
            log.info("shutdown")

    app = FastAPI(
        title="Subgraph Deployment Orchestrator",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings

    app.include_router(health_router, tags=["health"])
    app.include_router(deployments_router)
    app.include_router(indexing_rules_router)
    return app


# --- Module Notes -----------------------------------------------------------
# No authentication layer: the API is expected to be reachable only from the
# operator network, like the admin endpoint it fronts.

"""FastAPI application for the land parcel registry.

Exposes the registry operations over HTTP. The caller principal is taken
from the ``X-Principal`` header and each state-changing request is stamped
with the next block height from a logical ledger clock.
"""

from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from landregistry.core.clock import LedgerClock
from landregistry.core.config import Settings
from landregistry.core.types import HealthStatus
from landregistry.db.engine import DatabaseManager
from landregistry.finance.transfer import InMemoryLedger, ValueTransfer
from landregistry.governance.audit import AuditLogger
from landregistry.registry.service import LandRegistry
from landregistry.repositories.postgres.parcels import PostgresRegistryRepository
from landregistry.repositories.protocols import RegistryRepository
from landregistry.web.middleware import CallerMiddleware
from landregistry.web.registry_router import router as registry_router

logger = logging.getLogger(__name__)


def create_app(
    settings: Settings | None = None,
    transfer: ValueTransfer | None = None,
    audit_logger: AuditLogger | None = None,
    repository: RegistryRepository | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Uses the factory pattern so tests can create isolated app instances
    with mock dependencies.

    Args:
        settings: Application settings. Defaults to Settings().
        transfer: Value transfer primitive. Defaults to an InMemoryLedger.
        audit_logger: Optional pre-built AuditLogger. When omitted one is
            created from ``settings.audit`` if auditing is enabled.
        repository: Optional registry repository. When omitted and
            ``settings.db.url`` is set, a Postgres repository is created.

    Returns:
        A configured FastAPI instance.
    """
    if settings is None:
        settings = Settings()

    logging.getLogger("landregistry").setLevel(settings.log_level.upper())

    if audit_logger is None and settings.audit.enabled:
        audit_logger = AuditLogger(config=settings.audit)

    database: DatabaseManager | None = None
    if repository is None and settings.db.url:
        database = DatabaseManager(
            settings.db.url, echo=settings.db.echo, pool_size=settings.db.pool_size
        )
        repository = PostgresRegistryRepository(database)

    registry = LandRegistry(
        transfer=transfer or InMemoryLedger(),
        config=settings.registry,
        audit_logger=audit_logger,
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        if database is not None:
            await database.create_all()
        if repository is not None:
            snapshot = await repository.load_snapshot()
            if snapshot is not None:
                registry.restore(snapshot)
                app.state.clock = LedgerClock(height=registry.block_height)
        yield
        if database is not None:
            await database.close()

    app = FastAPI(
        title="Land Parcel Registry",
        description="Ledger-backed registry of land parcel declarations",
        version="0.1.0",
        lifespan=lifespan,
    )

    # CORS for development
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(CallerMiddleware)

    app.state.settings = settings
    app.state.registry = registry
    app.state.registry_lock = asyncio.Lock()
    app.state.clock = LedgerClock()
    app.state.audit_logger = audit_logger
    app.state.registry_repository = repository

    app.include_router(registry_router)

    @app.get("/api/health")
    async def health(request: Request) -> HealthStatus:
        """Health check endpoint."""
        registry = request.app.state.registry
        return HealthStatus(
            service="landregistry",
            healthy=True,
            details={
                "parcels": registry.get_parcel_count(),
                "authority_configured": registry.authority is not None,
                "block_height": request.app.state.clock.height,
            },
        )

    return app

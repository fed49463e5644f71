from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.concurrency import run_in_threadpool
from fastapi.middleware.cors import CORSMiddleware

from ..db.registry import SheetRegistry, resolve_dsn
from ..models.config_models import AppConfig
from ..services.cache import SheetRowsCache
from ..sheets.client import SheetsClient
from .errors import register_error_handlers
from .routes import router

"""FastAPI application factory.

The registry, the sheets client and the row cache live on ``app.state`` for
the lifetime of the process; the ``sheets`` table is created on startup.
"""

__all__ = [
    "create_app",
]

logger = logging.getLogger(__name__)


def create_app(
    config: AppConfig,
    registry: SheetRegistry | None = None,
    sheets_client: SheetsClient | None = None,
) -> FastAPI:
    """Build the API.

    Args:
        config: Loaded application configuration
        registry: Sheet registry; defaults to PostgreSQL from ``config.database``
        sheets_client: Google Sheets reader; defaults to the configured
            service account
    """
    if registry is None:
        registry = SheetRegistry(resolve_dsn(config.database))
    if sheets_client is None:
        sheets_client = SheetsClient(
            credentials_file=config.google.credentials_file,
            tab_range=config.google.tab_range,
        )

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        await run_in_threadpool(app.state.registry.init_schema)
        logger.info("sheets registry ready")
        yield

    app = FastAPI(title="Surebet Dashboard API", lifespan=lifespan)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.server.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.state.config = config
    app.state.registry = registry
    app.state.sheets_client = sheets_client
    app.state.cache = SheetRowsCache()

    register_error_handlers(app)
    app.include_router(router)
    return app

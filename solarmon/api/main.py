"""
FastAPI application entry point for the solar monitoring API.

``create_app()`` builds the application; the module-level ``app`` is what
``uvicorn solarmon.api.main:app`` serves. Settings are loaded when the app is
built, and the lifespan wires the database, telemetry store, sample
generator, and alert log onto ``app.state``.

CHANGELOG:
- 2026-10-19: Initial creation
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from solarmon.api.faults import router as faults_router
from solarmon.api.health import router as health_router
from solarmon.api.maintenance import router as maintenance_router
from solarmon.api.plants import router as plants_router
from solarmon.api.telemetry import router as telemetry_router
from solarmon.config import Settings
from solarmon.db.session import Database
from solarmon.errors import InvalidArgumentError, StorageUnavailableError
from solarmon.logs import configure_logging
from solarmon.services.faults import AlertLog
from solarmon.telemetry.documents import SqlDocumentStore
from solarmon.telemetry.generator import SampleGenerator
from solarmon.telemetry.store import TelemetryStore

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan: open storage on startup, release it on shutdown.

    Startup:
        - Configures logging from settings.
        - Creates the database schema if missing.
        - Builds the telemetry store, sample generator, and alert log.

    Shutdown:
        - Disposes the database engine.
    """
    settings: Settings = app.state.settings
    configure_logging(settings.log_level, settings.log_json)

    db = Database(settings.database_url)
    await db.create_all()
    documents = SqlDocumentStore(db.session_factory)

    app.state.db = db
    app.state.store = TelemetryStore(documents, retention=settings.history_retention)
    app.state.generator = SampleGenerator()
    app.state.alerts = AlertLog(documents)

    logger.info(
        "Solar monitoring API ready (retention=%d, cache=%s)",
        settings.history_retention,
        "redis" if settings.redis_url else "disabled",
    )
    try:
        yield
    finally:
        await db.dispose()
        logger.info("Solar monitoring API shutting down")


async def _invalid_argument_handler(request: Request, exc: InvalidArgumentError) -> JSONResponse:
    return JSONResponse(status_code=422, content={"detail": str(exc)})


async def _storage_unavailable_handler(
    request: Request, exc: StorageUnavailableError
) -> JSONResponse:
    logger.error(
        "Storage unavailable on %s %s: %s",
        request.method,
        request.url.path,
        exc,
        exc_info=exc,
    )
    return JSONResponse(status_code=503, content={"detail": "Storage unavailable."})


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the FastAPI application.

    Args:
        settings: Configuration; loaded from the environment when omitted.

    Returns:
        FastAPI: The configured application.
    """
    settings = settings or Settings()

    app = FastAPI(
        title="Solar Monitoring API",
        description="Plant registry, mock live telemetry, and daily energy history.",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origin_list,
        allow_methods=["GET", "POST", "PUT", "DELETE"],
        allow_headers=["Content-Type"],
    )
    app.add_exception_handler(InvalidArgumentError, _invalid_argument_handler)
    app.add_exception_handler(StorageUnavailableError, _storage_unavailable_handler)

    app.include_router(health_router)
    app.include_router(plants_router)
    app.include_router(telemetry_router)
    app.include_router(faults_router)
    app.include_router(maintenance_router)

    static_dir = Path(settings.static_dir) if settings.static_dir else None
    if static_dir is not None and static_dir.is_dir():
        # The dashboard's index.html takes over "/".
        app.mount("/", StaticFiles(directory=static_dir, html=True), name="frontend")
    else:

        @app.get("/")
        async def root() -> dict:
            """Root health check endpoint.

            Returns:
                dict: JSON object with application status.
            """
            return {"status": "ok"}

    return app


app = create_app()

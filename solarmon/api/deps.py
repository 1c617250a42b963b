"""
FastAPI dependency injection providers.

Everything a route needs lives on ``app.state`` (created in the lifespan);
these providers pull it off the request so handlers never touch module
globals.

CHANGELOG:
- 2026-10-19: Initial creation
"""

from collections.abc import AsyncGenerator
from typing import Annotated

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from solarmon.config import Settings
from solarmon.services.faults import AlertLog
from solarmon.services.plants import PlantRegistry
from solarmon.telemetry.generator import SampleGenerator
from solarmon.telemetry.store import TelemetryStore


async def get_db(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """Yield an async database session for the request.

    Yields:
        AsyncSession: An async SQLAlchemy session.
    """
    async for session in request.app.state.db.session():
        yield session


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_store(request: Request) -> TelemetryStore:
    return request.app.state.store


def get_generator(request: Request) -> SampleGenerator:
    return request.app.state.generator


def get_alert_log(request: Request) -> AlertLog:
    return request.app.state.alerts


async def get_registry(db: Annotated[AsyncSession, Depends(get_db)]) -> PlantRegistry:
    """Plant registry bound to the request's DB session."""
    return PlantRegistry(db)


# Type aliases for injecting dependencies via Depends().
# Usage in route handlers:
#   async def my_route(store: Store):
#       await store.append(...)
DbSession = Annotated[AsyncSession, Depends(get_db)]
AppSettings = Annotated[Settings, Depends(get_settings)]
Store = Annotated[TelemetryStore, Depends(get_store)]
Sampler = Annotated[SampleGenerator, Depends(get_generator)]
Alerts = Annotated[AlertLog, Depends(get_alert_log)]
Registry = Annotated[PlantRegistry, Depends(get_registry)]

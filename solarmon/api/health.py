"""
Liveness and readiness probes.

GET /health always answers ``{"status": "ok"}`` while the process is up.
GET /health/ready also runs a trivial query against the database, so a
container orchestrator can hold traffic until storage is reachable.

CHANGELOG:
- 2026-10-19: Initial creation
"""

import logging

from fastapi import APIRouter
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from solarmon.api.deps import DbSession

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/health", tags=["health"])


@router.get("")
async def health() -> dict[str, str]:
    """Report that the process is alive."""
    return {"status": "ok"}


@router.get("/ready", response_model=None)
async def ready(db: DbSession) -> dict[str, str] | JSONResponse:
    """Report whether the database answers queries.

    Returns:
        dict | JSONResponse: ``{"status": "ok", "database": "ok"}``, or 503
        with ``"database": "unavailable"``.
    """
    try:
        await db.execute(text("SELECT 1"))
    except SQLAlchemyError:
        logger.warning("Readiness probe: database unreachable", exc_info=True)
        return JSONResponse(
            status_code=503,
            content={"status": "degraded", "database": "unavailable"},
        )
    return {"status": "ok", "database": "ok"}

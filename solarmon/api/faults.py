"""
Fault detection and alert endpoints.

POST /api/fault-detection accepts a CSV upload (multipart field ``csvFile``)
and returns the mock fault report, recording an alert for each run.
GET /api/alerts lists recorded alerts, oldest first.

CHANGELOG:
- 2026-10-19: Initial creation
"""

import logging
from typing import Annotated

from fastapi import APIRouter, File, UploadFile

from solarmon.api.deps import Alerts
from solarmon.models import Alert, FaultResult
from solarmon.services.faults import detect_faults

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["faults"])


@router.post("/fault-detection", response_model=list[FaultResult])
async def fault_detection(
    csv_file: Annotated[UploadFile, File(alias="csvFile")],
    alerts: Alerts,
) -> list[FaultResult]:
    """Run mock fault detection over an uploaded CSV file."""
    try:
        content = await csv_file.read()
    finally:
        await csv_file.close()

    results, rows = detect_faults(content)
    await alerts.raise_alert("Fault detected in uploaded data", severity="warning")

    logger.info("Fault detection on %s: %d row(s)", csv_file.filename, rows)
    return results


@router.get("/alerts", response_model=list[Alert])
async def list_alerts(alerts: Alerts) -> list[Alert]:
    """Return all recorded alerts."""
    return await alerts.list_alerts()

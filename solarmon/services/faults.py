"""
Mock fault detection and the alert log.

Fault detection does not model anything: it checks that the upload parses
as CSV and returns a fixed three-inverter report. Every run records one
alert in the ``alerts`` document so the dashboard's alert list fills up.

CHANGELOG:
- 2026-10-19: Initial creation
"""

from __future__ import annotations

import csv
import io
import logging
import uuid
from collections.abc import Callable
from datetime import UTC, datetime

from solarmon.errors import InvalidArgumentError
from solarmon.models import Alert, FaultResult
from solarmon.telemetry.documents import DocumentStore

logger = logging.getLogger(__name__)

ALERTS_KEY = "alerts"

MOCK_FAULT_REPORT = (
    FaultResult(
        time="10:30",
        inverter_id="INV-001",
        issue="Normal Operation",
        severity="normal",
        action="No action required",
    ),
    FaultResult(
        time="11:45",
        inverter_id="INV-002",
        issue="Soiling Detected",
        severity="warning",
        action="Clean panels",
    ),
    FaultResult(
        time="12:15",
        inverter_id="INV-003",
        issue="Inverter Anomaly",
        severity="fault",
        action="Inspect inverter",
    ),
)


def detect_faults(csv_bytes: bytes) -> tuple[list[FaultResult], int]:
    """Run mock fault detection over an uploaded CSV file.

    Args:
        csv_bytes: Raw upload content, UTF-8 (a BOM is tolerated).

    Returns:
        tuple: The fault report and the number of data rows read.

    Raises:
        InvalidArgumentError: If the upload is empty or not UTF-8 text.
    """
    if not csv_bytes.strip():
        raise InvalidArgumentError("Uploaded CSV file is empty")
    try:
        text = csv_bytes.decode("utf-8-sig")
    except UnicodeDecodeError as exc:
        raise InvalidArgumentError("Uploaded CSV file is not UTF-8 text") from exc

    rows = [row for row in csv.reader(io.StringIO(text)) if row]
    data_rows = max(len(rows) - 1, 0)
    logger.info("Fault detection ran over %d data row(s)", data_rows)
    return [result.model_copy() for result in MOCK_FAULT_REPORT], data_rows


class AlertLog:
    """Append-only alert list stored as a single document.

    Args:
        documents: Persistence medium.
        clock: Callable returning the current aware datetime.
    """

    def __init__(
        self,
        documents: DocumentStore,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._documents = documents
        self._clock = clock or (lambda: datetime.now(UTC))

    async def raise_alert(self, message: str, severity: str = "warning") -> Alert:
        """Record a new active alert and return it."""
        alert = Alert(
            id=uuid.uuid4().hex,
            time=self._clock(),
            message=message,
            severity=severity,
        )
        payload = alert.model_dump(mode="json", by_alias=True)
        await self._documents.update(ALERTS_KEY, lambda alerts: [*alerts, payload], default=[])
        logger.info("Raised %s alert %s: %s", severity, alert.id, message)
        return alert

    async def list_alerts(self) -> list[Alert]:
        """All alerts, oldest first."""
        raw = await self._documents.get(ALERTS_KEY)
        return [Alert.model_validate(item) for item in raw or []]

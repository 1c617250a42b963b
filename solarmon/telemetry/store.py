"""
Bounded per-plant telemetry history with daily energy aggregation.

Each plant's history is one document (``history:{plant_id}``) holding the
retained samples in append order. Appends evict the oldest samples once the
retention bound is exceeded, so the history is a strict sliding window over
the most recent ``retention`` samples.

Appends for one plant are serialised by a per-plant asyncio.Lock owned by
the store, and the document write itself is an atomic update, so concurrent
appends never overwrite one another.

Daily aggregation buckets samples by UTC calendar day and reports
``sum(ac_power) / 1000`` per day, ascending by date.

CHANGELOG:
- 2026-10-19: Initial creation

TODO:
- None
"""

from __future__ import annotations

import asyncio
import logging
from collections import defaultdict
from collections.abc import AsyncIterator, Callable, Iterable
from contextlib import asynccontextmanager
from datetime import UTC, date, datetime, timedelta

from solarmon.errors import InvalidArgumentError
from solarmon.models import DailyAggregate, Sample
from solarmon.telemetry.documents import DocumentStore

logger = logging.getLogger(__name__)

DEFAULT_RETENTION = 1000

# Converts a sum of watt-scale readings to kWh-equivalent units.
ENERGY_DIVISOR = 1000


def history_key(plant_id: str) -> str:
    """Document key holding a plant's sample history."""
    return f"history:{plant_id}"


def sample_day(sample: Sample) -> str:
    """UTC calendar day of a sample as ``YYYY-MM-DD``."""
    return sample.timestamp.astimezone(UTC).date().isoformat()


def aggregate_daily(samples: Iterable[Sample], since: date | None = None) -> list[DailyAggregate]:
    """Sum AC power per UTC day and scale to energy units.

    Args:
        samples: Samples in any order.
        since: If given, days before this date are left out.

    Returns:
        list[DailyAggregate]: One entry per day, ascending by date.
    """
    totals: dict[str, float] = defaultdict(float)
    cutoff = since.isoformat() if since is not None else None
    for sample in samples:
        day = sample_day(sample)
        if cutoff is not None and day < cutoff:
            continue
        totals[day] += sample.ac_power

    return [
        DailyAggregate(date=day, total_energy=total / ENERGY_DIVISOR)
        for day, total in sorted(totals.items())
    ]


class TelemetryStore:
    """Owner of all plant histories.

    Args:
        documents: Persistence medium for history documents.
        retention: Maximum samples kept per plant (FIFO eviction).
        clock: Callable returning the current aware datetime; used to anchor
            the days window of :meth:`query_daily`.
    """

    def __init__(
        self,
        documents: DocumentStore,
        retention: int = DEFAULT_RETENTION,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        if retention < 1:
            raise InvalidArgumentError(f"retention must be >= 1 (got: {retention})")
        self._documents = documents
        self._retention = retention
        self._clock = clock or (lambda: datetime.now(UTC))
        # Per-plant lock and the number of appends holding or awaiting it;
        # an entry is dropped once nobody uses it.
        self._locks: dict[str, asyncio.Lock] = {}
        self._lock_users: dict[str, int] = {}
        self._append_count = 0

    @property
    def retention(self) -> int:
        return self._retention

    @property
    def append_count(self) -> int:
        """Appends completed by this store since it was created."""
        return self._append_count

    @asynccontextmanager
    async def _plant_lock(self, plant_id: str) -> AsyncIterator[None]:
        lock = self._locks.setdefault(plant_id, asyncio.Lock())
        self._lock_users[plant_id] = self._lock_users.get(plant_id, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._lock_users[plant_id] -= 1
            if not self._lock_users[plant_id]:
                del self._lock_users[plant_id]
                del self._locks[plant_id]

    async def append(self, plant_id: str, sample: Sample) -> int:
        """Append a sample to the plant's history, evicting the oldest overflow.

        Args:
            plant_id: Plant identifier; unseen plants get a new empty history.
            sample: The sample to record.

        Returns:
            int: History length after the append.

        Raises:
            StorageUnavailableError: If the history cannot be persisted.
        """
        payload = sample.model_dump(mode="json", by_alias=True)
        retention = self._retention

        def _append(history: list[dict]) -> list[dict]:
            return [*history, payload][-retention:]

        async with self._plant_lock(plant_id):
            history = await self._documents.update(history_key(plant_id), _append, default=[])
            self._append_count += 1

        logger.debug("Appended sample for plant %s (history=%d)", plant_id, len(history))
        return len(history)

    async def history(self, plant_id: str) -> list[Sample]:
        """Return the plant's retained samples in append order.

        Unknown plants have an empty history.
        """
        raw = await self._documents.get(history_key(plant_id))
        return [Sample.model_validate(item) for item in raw or []]

    async def query_daily(self, plant_id: str, days_window: int | None = None) -> list[DailyAggregate]:
        """Aggregate the plant's history into daily energy totals.

        Args:
            plant_id: Plant identifier. Unknown plants yield ``[]``.
            days_window: Keep only the trailing N UTC days, today included.
                None aggregates the whole retained history.

        Returns:
            list[DailyAggregate]: Ascending, one entry per day.

        Raises:
            InvalidArgumentError: If days_window is < 1.
            StorageUnavailableError: If the history cannot be read.
        """
        since: date | None = None
        if days_window is not None:
            if days_window < 1:
                raise InvalidArgumentError(f"days_window must be >= 1 (got: {days_window})")
            today = self._clock().astimezone(UTC).date()
            since = today - timedelta(days=days_window - 1)

        samples = await self.history(plant_id)
        aggregates = aggregate_daily(samples, since=since)
        logger.debug(
            "Daily aggregation: plant_id=%s days_window=%s samples=%d days=%d",
            plant_id,
            days_window,
            len(samples),
            len(aggregates),
        )
        return aggregates

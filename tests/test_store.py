"""
Unit tests for the TelemetryStore (bounded history and daily aggregation).

Tests verify:
- FIFO retention: N appends keep min(N, retention) newest samples in order.
- Unknown plants have empty history and empty aggregates.
- Daily aggregation sums acPower per UTC day, divides by 1000, and returns
  unique ascending dates.
- The days window keeps only the trailing N days; None keeps everything.
- Concurrent appends to one plant are all retained, in memory and in SQL.

CHANGELOG:
- 2026-10-19: Initial creation
"""

from __future__ import annotations

import asyncio
from datetime import UTC, datetime, timedelta, timezone
from pathlib import Path
from unittest.mock import AsyncMock

import pytest

from solarmon.db.session import Database
from solarmon.errors import InvalidArgumentError, StorageUnavailableError
from solarmon.telemetry.documents import MemoryDocumentStore, SqlDocumentStore
from solarmon.telemetry.store import TelemetryStore, aggregate_daily

NOW = datetime(2024, 1, 10, 15, 0, tzinfo=UTC)


def _store(retention: int = 1000) -> TelemetryStore:
    return TelemetryStore(MemoryDocumentStore(), retention=retention, clock=lambda: NOW)


# ---------------------------------------------------------------------------
# Retention (FIFO eviction)
# ---------------------------------------------------------------------------


class TestRetention:
    """History is a strict sliding window over the newest samples."""

    @pytest.mark.asyncio
    async def test_append_returns_length(self, make_sample) -> None:
        store = _store()
        assert await store.append("p1", make_sample()) == 1
        assert await store.append("p1", make_sample()) == 2

    @pytest.mark.asyncio
    async def test_1001_appends_evict_first(self, make_sample) -> None:
        """Samples numbered 0..1000: sample 0 is evicted, 1..1000 remain."""
        store = _store()
        for i in range(1001):
            await store.append("p1", make_sample(ac_power=float(i)))

        history = await store.history("p1")
        assert len(history) == 1000
        assert [s.ac_power for s in history] == [float(i) for i in range(1, 1001)]

    @pytest.mark.parametrize("count", [0, 1, 4, 5, 6, 17])
    @pytest.mark.asyncio
    async def test_length_is_min_of_count_and_retention(self, make_sample, count: int) -> None:
        store = _store(retention=5)
        for i in range(count):
            await store.append("p1", make_sample(ac_power=float(i)))

        history = await store.history("p1")
        expected = [float(i) for i in range(count)][-5:]
        assert len(history) == min(count, 5)
        assert [s.ac_power for s in history] == expected

    @pytest.mark.asyncio
    async def test_histories_are_per_plant(self, make_sample) -> None:
        store = _store(retention=2)
        await store.append("a", make_sample(ac_power=1.0))
        await store.append("b", make_sample(ac_power=2.0))
        await store.append("a", make_sample(ac_power=3.0))
        await store.append("a", make_sample(ac_power=4.0))

        assert [s.ac_power for s in await store.history("a")] == [3.0, 4.0]
        assert [s.ac_power for s in await store.history("b")] == [2.0]

    @pytest.mark.asyncio
    async def test_history_round_trips_sample_fields(self, make_sample) -> None:
        store = _store()
        sample = make_sample(ac_power=111.0, dc_power=133.0, pr=88.0)
        await store.append("p1", sample)
        assert await store.history("p1") == [sample]

    def test_retention_must_be_positive(self) -> None:
        with pytest.raises(InvalidArgumentError):
            TelemetryStore(MemoryDocumentStore(), retention=0)


# ---------------------------------------------------------------------------
# Daily aggregation
# ---------------------------------------------------------------------------


class TestQueryDaily:
    """Daily energy aggregation over a plant's history."""

    @pytest.mark.asyncio
    async def test_unknown_plant_is_empty(self) -> None:
        store = _store()
        assert await store.history("nope") == []
        assert await store.query_daily("nope") == []
        assert await store.query_daily("nope", 30) == []

    @pytest.mark.asyncio
    async def test_single_day_scenario(self, make_sample) -> None:
        """acPower 100, 150, 250 on 2024-01-01 -> one day with 0.5."""
        store = _store()
        for hour, ac in ((8, 100.0), (12, 150.0), (16, 250.0)):
            ts = datetime(2024, 1, 1, hour, tzinfo=UTC)
            await store.append("plant1", make_sample(ac_power=ac, timestamp=ts))

        result = await store.query_daily("plant1")
        assert [a.model_dump(by_alias=True) for a in result] == [
            {"date": "2024-01-01", "totalEnergy": 0.5}
        ]

    @pytest.mark.asyncio
    async def test_single_day_total_is_sum_over_1000(self, make_sample) -> None:
        store = _store()
        powers = [101.0, 117.0, 129.5, 100.25]
        for i, ac in enumerate(powers):
            ts = datetime(2024, 1, 5, 6 + i, tzinfo=UTC)
            await store.append("p1", make_sample(ac_power=ac, timestamp=ts))

        (agg,) = await store.query_daily("p1")
        assert agg.date == "2024-01-05"
        assert agg.total_energy == pytest.approx(sum(powers) / 1000)

    @pytest.mark.asyncio
    async def test_dates_unique_and_ascending(self, make_sample) -> None:
        store = _store()
        days = [3, 1, 2, 1, 3, 5, 2]
        for day in days:
            ts = datetime(2024, 1, day, 10, tzinfo=UTC)
            await store.append("p1", make_sample(ac_power=100.0, timestamp=ts))

        dates = [a.date for a in await store.query_daily("p1")]
        assert dates == sorted(set(dates))
        assert dates == ["2024-01-01", "2024-01-02", "2024-01-03", "2024-01-05"]

    @pytest.mark.asyncio
    async def test_buckets_by_utc_day(self, make_sample) -> None:
        """A reading at 23:30 UTC-5 belongs to the next UTC day."""
        store = _store()
        late_evening = datetime(2024, 1, 1, 23, 30, tzinfo=timezone(timedelta(hours=-5)))
        await store.append("p1", make_sample(ac_power=300.0, timestamp=datetime(2024, 1, 1, 20, tzinfo=UTC)))
        await store.append("p1", make_sample(ac_power=200.0, timestamp=late_evening))

        result = await store.query_daily("p1")
        assert [(a.date, a.total_energy) for a in result] == [("2024-01-01", 0.3), ("2024-01-02", 0.2)]

    @pytest.mark.asyncio
    async def test_days_window_keeps_trailing_days(self, make_sample) -> None:
        """NOW is 2024-01-10; a 3-day window keeps the 8th..10th."""
        store = _store()
        for day in (1, 7, 8, 9, 10):
            ts = datetime(2024, 1, day, 12, tzinfo=UTC)
            await store.append("p1", make_sample(ac_power=100.0, timestamp=ts))

        dates = [a.date for a in await store.query_daily("p1", 3)]
        assert dates == ["2024-01-08", "2024-01-09", "2024-01-10"]

    @pytest.mark.asyncio
    async def test_days_window_one_is_today(self, make_sample) -> None:
        store = _store()
        await store.append("p1", make_sample(timestamp=NOW - timedelta(days=1)))
        await store.append("p1", make_sample(timestamp=NOW))
        assert [a.date for a in await store.query_daily("p1", 1)] == ["2024-01-10"]

    @pytest.mark.asyncio
    async def test_no_window_aggregates_everything(self, make_sample) -> None:
        store = _store()
        await store.append("p1", make_sample(timestamp=datetime(2023, 1, 1, tzinfo=UTC)))
        await store.append("p1", make_sample(timestamp=NOW))
        assert len(await store.query_daily("p1", None)) == 2

    @pytest.mark.parametrize("days", [0, -3])
    @pytest.mark.asyncio
    async def test_invalid_window_raises(self, days: int) -> None:
        with pytest.raises(InvalidArgumentError):
            await _store().query_daily("p1", days)

    def test_aggregate_daily_empty(self) -> None:
        assert aggregate_daily([]) == []


# ---------------------------------------------------------------------------
# Concurrency
# ---------------------------------------------------------------------------


class TestConcurrentAppends:
    """Concurrent appends to the same plant are never lost."""

    @pytest.mark.asyncio
    async def test_concurrent_appends_in_memory(self, make_sample) -> None:
        store = _store()
        await asyncio.gather(
            *(store.append("p1", make_sample(ac_power=float(i))) for i in range(50))
        )
        history = await store.history("p1")
        assert sorted(s.ac_power for s in history) == [float(i) for i in range(50)]

    @pytest.mark.asyncio
    async def test_plant_locks_are_released_when_idle(self, make_sample) -> None:
        store = _store()
        await asyncio.gather(
            *(
                store.append(f"plant-{i % 7}", make_sample(ac_power=float(i)))
                for i in range(40)
            )
        )
        assert store._locks == {}
        assert store._lock_users == {}
        assert store.append_count == 40
        assert len(await store.history("plant-0")) == 6

    @pytest.mark.asyncio
    async def test_failed_append_releases_lock(self, make_sample) -> None:
        documents = MemoryDocumentStore()
        documents.update = AsyncMock(side_effect=StorageUnavailableError("disk full"))
        store = TelemetryStore(documents)

        with pytest.raises(StorageUnavailableError):
            await store.append("p1", make_sample())
        assert store._locks == {}
        assert store.append_count == 0

    @pytest.mark.asyncio
    async def test_concurrent_appends_across_store_instances(
        self, make_sample, tmp_path: Path
    ) -> None:
        """Two stores (separate locks) sharing one database behave like two
        processes; the versioned document update keeps both writes."""
        db = Database(f"sqlite+aiosqlite:///{tmp_path / 'concurrent.db'}")
        await db.create_all()
        try:
            first = TelemetryStore(SqlDocumentStore(db.session_factory))
            second = TelemetryStore(SqlDocumentStore(db.session_factory))

            await asyncio.gather(
                *(
                    (first if i % 2 else second).append("p1", make_sample(ac_power=float(i)))
                    for i in range(10)
                )
            )

            history = await first.history("p1")
            assert sorted(s.ac_power for s in history) == [float(i) for i in range(10)]
        finally:
            await db.dispose()

    @pytest.mark.asyncio
    async def test_two_appends_same_plant_sql(self, make_sample, tmp_path: Path) -> None:
        db = Database(f"sqlite+aiosqlite:///{tmp_path / 'pair.db'}")
        await db.create_all()
        try:
            store = TelemetryStore(SqlDocumentStore(db.session_factory))
            await asyncio.gather(
                store.append("p1", make_sample(ac_power=100.0)),
                store.append("p1", make_sample(ac_power=200.0)),
            )
            history = await store.history("p1")
            assert sorted(s.ac_power for s in history) == [100.0, 200.0]
        finally:
            await db.dispose()

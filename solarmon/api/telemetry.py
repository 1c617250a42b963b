"""
Live and historical telemetry endpoints.

GET /api/live/{plant_id} generates a mock sample from the plant's capacity,
records it in the plant's bounded history, and returns it.

GET /api/history/{plant_id}?days=N returns daily energy totals shaped for a
line chart. ``days`` selects the trailing N UTC days (today included) and
defaults to ``DEFAULT_HISTORY_DAYS``. Responses are cached in Redis when it
is configured; recording a live sample invalidates the plant's cached
charts.

CHANGELOG:
- 2026-10-19: Initial creation

TODO:
- None
"""

import logging
from typing import Annotated

from fastapi import APIRouter, HTTPException, Query
from pydantic import ValidationError

from solarmon.api.deps import AppSettings, Registry, Sampler, Store
from solarmon.cache.redis_client import (
    get_cached,
    history_cache_key,
    invalidate_history_cache,
    set_cached,
)
from solarmon.models import ChartSeries, DailyAggregate, HistoryChart, Sample

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["telemetry"])

AC_ENERGY_LABEL = "AC Power (kWh)"


def build_chart(aggregates: list[DailyAggregate]) -> HistoryChart:
    """Shape daily aggregates as chart labels plus one energy series."""
    return HistoryChart(
        labels=[agg.date for agg in aggregates],
        series=[
            ChartSeries(
                label=AC_ENERGY_LABEL,
                values=[agg.total_energy for agg in aggregates],
            )
        ],
    )


@router.get("/live/{plant_id}", response_model=Sample)
async def live(
    plant_id: str,
    settings: AppSettings,
    registry: Registry,
    generator: Sampler,
    store: Store,
) -> Sample:
    """Generate, record, and return a live sample for a plant.

    Raises:
        HTTPException: 404 if the plant is not registered.
    """
    capacity = await registry.get_capacity(plant_id)
    if capacity is None:
        raise HTTPException(status_code=404, detail="Plant not found")

    sample = generator.generate(capacity)
    length = await store.append(plant_id, sample)
    await invalidate_history_cache(settings.redis_url, plant_id)

    logger.debug(
        "Live sample recorded for plant %s",
        plant_id,
        extra={"plant_id": plant_id, "history_len": length},
    )
    return sample


@router.get("/history/{plant_id}", response_model=HistoryChart)
async def history(
    plant_id: str,
    settings: AppSettings,
    store: Store,
    days: Annotated[
        int | None,
        Query(ge=1, description="Trailing number of UTC days to include."),
    ] = None,
) -> HistoryChart:
    """Return daily energy totals for a plant as chart data.

    Unknown plants yield empty labels and values.
    """
    window = days if days is not None else settings.default_history_days
    cache_key = history_cache_key(plant_id, window)

    cached = await get_cached(settings.redis_url, cache_key)
    if cached is not None:
        try:
            return HistoryChart.model_validate(cached)
        except ValidationError:
            logger.warning("Ignoring malformed cached chart under %s", cache_key)

    appends_before = store.append_count
    aggregates = await store.query_daily(plant_id, window)
    chart = build_chart(aggregates)

    # A live append during the read may already have invalidated the cache;
    # caching this chart would then serve stale data until the TTL expires.
    # Appends made by other processes are only bounded by CACHE_TTL_S.
    if store.append_count != appends_before:
        logger.debug("Skipping history cache write for plant %s: appended during read", plant_id)
        return chart

    await set_cached(
        settings.redis_url,
        cache_key,
        chart.model_dump(mode="json", by_alias=True),
        settings.cache_ttl_s,
    )
    return chart

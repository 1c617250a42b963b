"""
Pydantic models for telemetry samples, aggregates, plants, and alerts.

Attributes are snake_case in Python; every model serialises with camelCase
aliases (``acPower``, ``dailyYield``, ``totalEnergy`` ...) because those are
the field names the dashboard frontend reads.

CHANGELOG:
- 2026-10-19: Initial creation

TODO:
- None
"""

from __future__ import annotations

from datetime import UTC, datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model that accepts either name form and emits camelCase.

    Non-finite floats (``inf``, ``nan``) are rejected: JSON cannot carry them
    back out, and a plant capacity of ``inf`` can never produce telemetry.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        allow_inf_nan=False,
    )


# ---------------------------------------------------------------------------
# Telemetry
# ---------------------------------------------------------------------------


class Sample(CamelModel):
    """A single telemetry reading for a plant.

    Attributes:
        ac_power: AC output power, watts-scale, derived from plant capacity.
        dc_power: DC input power, watts-scale.
        pr: Performance ratio in percent, within [80, 90).
        daily_yield: Daily yield magnitude (regenerated per reading, not
            cumulative).
        soiling_index: Soiling index in percent, within [5, 15).
        irradiance: Plane irradiance in W/m².
        timestamp: Instant the reading was taken (UTC).
    """

    ac_power: float = Field(ge=0)
    dc_power: float = Field(ge=0)
    pr: float = Field(ge=80, lt=90)
    daily_yield: float = Field(ge=0)
    soiling_index: float = Field(ge=5, lt=15)
    irradiance: float = Field(ge=0)
    timestamp: datetime

    @field_validator("timestamp")
    @classmethod
    def timestamp_must_be_aware(cls, v: datetime) -> datetime:
        """Treat naive timestamps as UTC so day bucketing is unambiguous."""
        if v.tzinfo is None:
            return v.replace(tzinfo=UTC)
        return v


class DailyAggregate(CamelModel):
    """Energy produced on one UTC calendar day.

    Attributes:
        date: Calendar day as ``YYYY-MM-DD``.
        total_energy: Sum of ``ac_power`` over the day's samples / 1000.
    """

    date: str
    total_energy: float


class ChartSeries(CamelModel):
    """One labelled data series of a chart."""

    label: str
    values: list[float]


class HistoryChart(CamelModel):
    """Chart-ready daily history: one label per day, values per series."""

    labels: list[str]
    series: list[ChartSeries]


# ---------------------------------------------------------------------------
# Plants
# ---------------------------------------------------------------------------


class PlantIn(CamelModel):
    """Payload for creating a plant."""

    name: str = Field(min_length=1)
    location: str = ""
    capacity: float = Field(gt=0, description="Rated capacity in kW.")
    inverters: int = Field(default=0, ge=0)
    latitude: float | None = None
    longitude: float | None = None


class PlantUpdate(CamelModel):
    """Partial update for a plant; unset fields keep their stored value."""

    name: str | None = Field(default=None, min_length=1)
    location: str | None = None
    capacity: float | None = Field(default=None, gt=0)
    inverters: int | None = Field(default=None, ge=0)
    latitude: float | None = None
    longitude: float | None = None


class PlantOut(PlantIn):
    """A stored plant."""

    model_config = ConfigDict(from_attributes=True)

    id: str


# ---------------------------------------------------------------------------
# Fault detection, alerts, maintenance
# ---------------------------------------------------------------------------


class FaultResult(CamelModel):
    """One row of a fault-detection report."""

    time: str
    inverter_id: str
    issue: str
    severity: str
    action: str


class Alert(CamelModel):
    """An operator-facing alert."""

    id: str
    time: datetime
    message: str
    severity: str
    status: str = "Active"


class MaintenanceTask(CamelModel):
    """A maintenance task, done or pending."""

    task: str
    date: datetime
    status: str


class MaintenanceSchedule(CamelModel):
    """Cleaning dates and maintenance tasks for a plant."""

    plant_id: str
    last_cleaning: datetime
    next_cleaning: datetime
    recent_maintenance: list[MaintenanceTask]
    upcoming_tasks: list[MaintenanceTask]

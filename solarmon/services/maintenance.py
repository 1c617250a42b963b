"""
Mock maintenance schedule for a plant.

There is no maintenance backend; the schedule is a fixed template placed
relative to the current day so dates stay plausible on the dashboard.

CHANGELOG:
- 2026-10-19: Initial creation
"""

from datetime import UTC, datetime, time, timedelta

from solarmon.models import MaintenanceSchedule, MaintenanceTask

# (task, day offset from today, time of day)
_RECENT = (
    ("Inverter 3 Repair", -19, time(14, 15)),
    ("String 2 Inspection", -24, time(11, 45)),
)
_UPCOMING = (
    ("MPPT Unit Check", 5, time(9, 0)),
    ("Wiring Inspection", 10, time(10, 30)),
)
CLEANING_INTERVAL = timedelta(days=31)


def _at(today, offset_days: int, at: time) -> datetime:
    return datetime.combine(today + timedelta(days=offset_days), at, tzinfo=UTC)


def maintenance_schedule(plant_id: str, now: datetime | None = None) -> MaintenanceSchedule:
    """Build the maintenance schedule for a plant as of ``now``."""
    today = (now or datetime.now(UTC)).astimezone(UTC).date()
    last_cleaning = _at(today, -14, time(10, 30))

    return MaintenanceSchedule(
        plant_id=plant_id,
        last_cleaning=last_cleaning,
        next_cleaning=_at(today, -14, time(10, 0)) + CLEANING_INTERVAL,
        recent_maintenance=[
            MaintenanceTask(task=task, date=_at(today, offset, at), status="completed")
            for task, offset, at in _RECENT
        ],
        upcoming_tasks=[
            MaintenanceTask(task=task, date=_at(today, offset, at), status="pending")
            for task, offset, at in _UPCOMING
        ],
    )

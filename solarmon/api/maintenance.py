"""
GET /api/maintenance/{plant_id}: mock cleaning and maintenance schedule.

CHANGELOG:
- 2026-10-19: Initial creation
"""

from fastapi import APIRouter

from solarmon.models import MaintenanceSchedule
from solarmon.services.maintenance import maintenance_schedule

router = APIRouter(prefix="/api", tags=["maintenance"])


@router.get("/maintenance/{plant_id}", response_model=MaintenanceSchedule)
async def maintenance(plant_id: str) -> MaintenanceSchedule:
    return maintenance_schedule(plant_id)

"""
Plant management endpoints.

GET/POST /api/plants and PUT/DELETE /api/plants/{plant_id}. Listing an
empty registry seeds the default plant.

CHANGELOG:
- 2026-10-19: Initial creation

TODO:
- None
"""

import logging

from fastapi import APIRouter, HTTPException, status

from solarmon.api.deps import Registry
from solarmon.models import PlantIn, PlantOut, PlantUpdate

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["plants"])


def _not_found() -> HTTPException:
    return HTTPException(status_code=404, detail="Plant not found")


@router.get("/plants", response_model=list[PlantOut])
async def list_plants(registry: Registry) -> list[PlantOut]:
    """Return every registered plant."""
    plants = await registry.list_plants()
    return [PlantOut.model_validate(plant) for plant in plants]


@router.post("/plants", response_model=PlantOut, status_code=status.HTTP_201_CREATED)
async def create_plant(payload: PlantIn, registry: Registry) -> PlantOut:
    """Register a new plant; the id is generated server-side."""
    plant = await registry.create_plant(payload)
    return PlantOut.model_validate(plant)


@router.put("/plants/{plant_id}", response_model=PlantOut)
async def update_plant(plant_id: str, payload: PlantUpdate, registry: Registry) -> PlantOut:
    """Merge the given fields into an existing plant.

    Raises:
        HTTPException: 404 if the plant does not exist.
    """
    plant = await registry.update_plant(plant_id, payload)
    if plant is None:
        raise _not_found()
    return PlantOut.model_validate(plant)


@router.delete("/plants/{plant_id}")
async def delete_plant(plant_id: str, registry: Registry) -> dict[str, str]:
    """Delete a plant.

    Raises:
        HTTPException: 404 if the plant does not exist.
    """
    if not await registry.delete_plant(plant_id):
        raise _not_found()
    return {"message": "Plant deleted"}

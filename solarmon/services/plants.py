"""
Plant registry service.

CRUD over the ``plants`` table. Listing an empty registry seeds one default
plant so a fresh dashboard always has something to show. The telemetry
endpoints only need ``get_capacity`` from here.

CHANGELOG:
- 2026-10-19: Initial creation

TODO:
- None
"""

import logging
import uuid

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from solarmon.db.models import Plant
from solarmon.errors import StorageUnavailableError
from solarmon.models import PlantIn, PlantUpdate

logger = logging.getLogger(__name__)

DEFAULT_PLANT = {
    "id": "plant1",
    "name": "Plant 1",
    "location": "Chennai, India",
    "capacity": 500.0,
    "inverters": 3,
    "latitude": 13.0827,
    "longitude": 80.2707,
}


class PlantRegistry:
    """Plant CRUD bound to one database session.

    Args:
        session: Async SQLAlchemy session (one per request).
    """

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def _all_plants(self) -> list[Plant]:
        result = await self.session.execute(select(Plant).order_by(Plant.name, Plant.id))
        return list(result.scalars().all())

    async def list_plants(self) -> list[Plant]:
        """Return all plants, seeding the default plant if there are none.

        Concurrent first requests may all try to seed; the losers of the
        insert race read back the winner's row.
        """
        try:
            plants = await self._all_plants()
            if plants:
                return plants

            plant = Plant(**DEFAULT_PLANT)
            self.session.add(plant)
            try:
                await self.session.commit()
            except IntegrityError:
                await self.session.rollback()
                logger.debug("Default plant seeded by a concurrent request")
                return await self._all_plants()
        except SQLAlchemyError as exc:
            await self.session.rollback()
            raise StorageUnavailableError("Failed to list plants") from exc

        logger.info("Seeded default plant %s", plant.id)
        return [plant]

    async def get_plant(self, plant_id: str) -> Plant | None:
        try:
            return await self.session.get(Plant, plant_id)
        except SQLAlchemyError as exc:
            raise StorageUnavailableError(f"Failed to read plant '{plant_id}'") from exc

    async def get_capacity(self, plant_id: str) -> float | None:
        """Rated capacity of a plant, or None if it does not exist."""
        plant = await self.get_plant(plant_id)
        return None if plant is None else plant.capacity

    async def create_plant(self, data: PlantIn) -> Plant:
        """Insert a new plant with a server-generated id."""
        plant = Plant(id=uuid.uuid4().hex, **data.model_dump())
        try:
            self.session.add(plant)
            await self.session.commit()
        except SQLAlchemyError as exc:
            await self.session.rollback()
            raise StorageUnavailableError("Failed to create plant") from exc

        logger.info("Created plant %s (%s, capacity=%s)", plant.id, plant.name, plant.capacity)
        return plant

    async def update_plant(self, plant_id: str, data: PlantUpdate) -> Plant | None:
        """Merge the set fields of ``data`` into a plant.

        Returns:
            Plant | None: The updated plant, or None if it does not exist.
        """
        plant = await self.get_plant(plant_id)
        if plant is None:
            return None

        for field, value in data.model_dump(exclude_unset=True).items():
            # Only coordinates may be cleared with an explicit null.
            if value is None and field not in ("latitude", "longitude"):
                continue
            setattr(plant, field, value)
        try:
            await self.session.commit()
        except SQLAlchemyError as exc:
            await self.session.rollback()
            raise StorageUnavailableError(f"Failed to update plant '{plant_id}'") from exc
        return plant

    async def delete_plant(self, plant_id: str) -> bool:
        """Delete a plant. Returns False if it did not exist.

        The plant's telemetry history is kept.
        """
        plant = await self.get_plant(plant_id)
        if plant is None:
            return False
        try:
            await self.session.delete(plant)
            await self.session.commit()
        except SQLAlchemyError as exc:
            await self.session.rollback()
            raise StorageUnavailableError(f"Failed to delete plant '{plant_id}'") from exc

        logger.info("Deleted plant %s", plant_id)
        return True

"""
Synthetic telemetry sample generator.

Produces one mock ``Sample`` for a plant from its rated capacity. The shape
of every field is fixed relative to ``base = capacity / 5``; the values are
uniform integer draws on top of that base.

This class is the seam for real ingestion: an adapter that reads actual
inverter data only needs to keep the ``generate(capacity) -> Sample``
signature.

CHANGELOG:
- 2026-10-19: Initial creation
"""

from __future__ import annotations

import logging
import math
import random
from collections.abc import Callable
from datetime import UTC, datetime

from solarmon.errors import InvalidArgumentError
from solarmon.models import Sample

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(UTC)


class SampleGenerator:
    """Generate mock telemetry samples scaled to plant capacity.

    Args:
        rng: Random source. Pass a seeded ``random.Random`` for reproducible
            output; defaults to a fresh unseeded instance.
        clock: Callable returning the current aware datetime.
    """

    def __init__(
        self,
        rng: random.Random | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._rng = rng or random.Random()
        self._clock = clock or _utcnow

    def _draw(self, upper: float) -> int:
        """Uniform integer in [0, upper), floored."""
        return math.floor(self._rng.random() * upper)

    def generate(self, capacity: float) -> Sample:
        """Produce one sample for a plant of the given capacity.

        Args:
            capacity: Rated plant capacity (kW-scale). Must be > 0.

        Returns:
            Sample: A fresh reading stamped with the current time.

        Raises:
            InvalidArgumentError: If capacity is not a finite positive number.
        """
        if not math.isfinite(capacity) or capacity <= 0:
            raise InvalidArgumentError(f"capacity must be > 0 (got: {capacity!r})")

        base = capacity / 5
        sample = Sample(
            ac_power=self._draw(base * 0.3) + base,
            dc_power=self._draw(base * 0.4) + base * 1.2,
            pr=self._draw(10) + 80,
            daily_yield=self._draw(base * 2) + base * 4,
            soiling_index=self._draw(10) + 5,
            irradiance=self._draw(200) + 600,
            timestamp=self._clock(),
        )
        logger.debug("Generated sample for capacity=%s: ac_power=%s", capacity, sample.ac_power)
        return sample

"""
SQLAlchemy ORM models for the monitoring database.

Defines the ``plants`` registry table and the ``documents`` table, a
key -> JSON blob store with a version column for optimistic concurrency.
Telemetry histories and the alert log are stored as documents.

CHANGELOG:
- 2026-10-19: Initial creation

TODO:
- None
"""

import datetime

from sqlalchemy import DateTime, Double, Integer, Text, func, text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """SQLAlchemy declarative base for all solarmon ORM models."""

    pass


class Plant(Base):
    """A monitored solar plant.

    Attributes:
        id: Plant identifier (string; ``plant1`` for the seeded default).
        name: Display name.
        location: Free-text location, e.g. ``Chennai, India``.
        capacity: Rated capacity in kW. Drives mock telemetry magnitude.
        inverters: Number of inverters at the plant.
        latitude: Latitude in decimal degrees (nullable).
        longitude: Longitude in decimal degrees (nullable).
    """

    __tablename__ = "plants"

    id: Mapped[str] = mapped_column(Text, primary_key=True)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    location: Mapped[str] = mapped_column(Text, nullable=False, server_default=text("''"))
    capacity: Mapped[float] = mapped_column(Double, nullable=False)
    inverters: Mapped[int] = mapped_column(Integer, nullable=False, server_default=text("0"))
    latitude: Mapped[float | None] = mapped_column(Double, nullable=True)
    longitude: Mapped[float | None] = mapped_column(Double, nullable=True)

    def __repr__(self) -> str:
        """Return string representation of the Plant."""
        return f"Plant(id={self.id!r}, name={self.name!r}, capacity={self.capacity!r})"


class Document(Base):
    """A whole JSON document stored under a key.

    ``version`` is bumped on every write; updates are conditional on the
    version the writer read, so concurrent writers cannot overwrite each
    other's changes.
    """

    __tablename__ = "documents"

    key: Mapped[str] = mapped_column(Text, primary_key=True)
    body: Mapped[str] = mapped_column(Text, nullable=False)
    version: Mapped[int] = mapped_column(Integer, nullable=False, server_default=text("1"))
    updated_at: Mapped[datetime.datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

    def __repr__(self) -> str:
        """Return string representation of the Document."""
        return f"Document(key={self.key!r}, version={self.version!r})"

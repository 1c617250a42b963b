"""
Whole-document key-value storage for telemetry histories and the alert log.

A document is any JSON-serialisable value stored under a string key. Besides
plain get/set, stores provide ``update(key, fn, default)``, an atomic
read-modify-write: the new value is computed from the current one and
written only if nobody else wrote the key in between.

Implementations:
- ``MemoryDocumentStore``: process-local dict guarded by an asyncio.Lock.
- ``SqlDocumentStore``: SQLAlchemy ``documents`` table with a version column;
  updates are conditional on the version read and retried on conflict, so
  concurrent writers in different processes do not lose updates either.

CHANGELOG:
- 2026-10-19: Initial creation

TODO:
- None
"""

from __future__ import annotations

import asyncio
import copy
import json
import logging
from collections.abc import Callable
from typing import Any, Protocol

from sqlalchemy import func, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from solarmon.db.models import Document
from solarmon.errors import StorageUnavailableError

logger = logging.getLogger(__name__)

Updater = Callable[[Any], Any]


class DocumentStore(Protocol):
    """Get/set-whole-document storage keyed by name."""

    async def get(self, key: str) -> Any | None: ...

    async def set(self, key: str, value: Any) -> None: ...

    async def update(self, key: str, fn: Updater, default: Any = None) -> Any: ...


class MemoryDocumentStore:
    """In-memory document store.

    Values are kept as JSON text so callers never share mutable state with
    the store, matching what a persistent backend would do.
    """

    def __init__(self) -> None:
        self._docs: dict[str, str] = {}
        self._lock = asyncio.Lock()

    async def get(self, key: str) -> Any | None:
        raw = self._docs.get(key)
        return None if raw is None else json.loads(raw)

    async def set(self, key: str, value: Any) -> None:
        async with self._lock:
            self._docs[key] = json.dumps(value)

    async def update(self, key: str, fn: Updater, default: Any = None) -> Any:
        async with self._lock:
            raw = self._docs.get(key)
            current = copy.deepcopy(default) if raw is None else json.loads(raw)
            new_value = fn(current)
            self._docs[key] = json.dumps(new_value)
            return new_value


class SqlDocumentStore:
    """Document store backed by the ``documents`` table.

    Args:
        session_factory: Async session factory for the target database.
        max_attempts: Conflicting-write retries before ``update`` gives up.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        max_attempts: int = 20,
    ) -> None:
        self._session_factory = session_factory
        self._max_attempts = max_attempts

    async def get(self, key: str) -> Any | None:
        """Return the document stored under ``key``, or None.

        Raises:
            StorageUnavailableError: If the database cannot be read.
        """
        try:
            async with self._session_factory() as session:
                result = await session.execute(select(Document.body).where(Document.key == key))
                body = result.scalar_one_or_none()
        except SQLAlchemyError as exc:
            raise StorageUnavailableError(f"Failed to read document '{key}'") from exc
        return None if body is None else json.loads(body)

    async def set(self, key: str, value: Any) -> None:
        """Replace the document stored under ``key``."""
        await self.update(key, lambda _current: value)

    async def update(self, key: str, fn: Updater, default: Any = None) -> Any:
        """Atomically replace the document under ``key`` with ``fn(current)``.

        ``fn`` receives a deep copy of ``default`` when the key does not exist
        yet. It may be called more than once if another writer races us, so
        it must not have side effects.

        Args:
            key: Document key.
            fn: Pure function computing the new value from the current one.
            default: Value passed to ``fn`` for a missing key.

        Returns:
            The value that was written.

        Raises:
            StorageUnavailableError: On database failure, or when every
                attempt lost the race to a concurrent writer.
        """
        for attempt in range(1, self._max_attempts + 1):
            try:
                written, value = await self._try_update(key, fn, default)
            except SQLAlchemyError as exc:
                raise StorageUnavailableError(f"Failed to write document '{key}'") from exc
            if written:
                return value
            logger.debug("Write conflict on document %s (attempt %d), retrying", key, attempt)

        raise StorageUnavailableError(
            f"Gave up writing document '{key}' after {self._max_attempts} conflicting attempts"
        )

    async def _try_update(self, key: str, fn: Updater, default: Any) -> tuple[bool, Any]:
        """One optimistic read-modify-write. Returns (written, value)."""
        async with self._session_factory() as session:
            result = await session.execute(
                select(Document.body, Document.version).where(Document.key == key)
            )
            row = result.one_or_none()

            if row is None:
                value = fn(copy.deepcopy(default))
                session.add(Document(key=key, body=json.dumps(value), version=1))
                try:
                    await session.commit()
                except IntegrityError:
                    # Another writer created the key first.
                    await session.rollback()
                    return False, None
                return True, value

            value = fn(json.loads(row.body))
            result = await session.execute(
                update(Document)
                .where(Document.key == key, Document.version == row.version)
                .values(body=json.dumps(value), version=row.version + 1, updated_at=func.now())
                .execution_options(synchronize_session=False)
            )
            if result.rowcount != 1:
                await session.rollback()
                return False, None
            await session.commit()
            return True, value

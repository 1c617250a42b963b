"""
Shared test fixtures for solarmon tests.

Provides a configured TestClient for FastAPI integration testing backed by a
throwaway SQLite database per test, and a mock Redis client. Environment
variables are set to test values so the application starts without real
services.

CHANGELOG:
- 2026-10-19: Initial creation
"""

from collections.abc import Callable, Generator
from datetime import UTC, datetime
from pathlib import Path
from unittest.mock import AsyncMock

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from solarmon.models import Sample

# All Settings environment variable names, used for cleanup.
_ALL_ENV_VARS = (
    "DATABASE_URL",
    "REDIS_URL",
    "HISTORY_RETENTION",
    "DEFAULT_HISTORY_DAYS",
    "CACHE_TTL_S",
    "CORS_ORIGINS",
    "STATIC_DIR",
    "LOG_LEVEL",
    "LOG_JSON",
)


@pytest.fixture(autouse=True)
def _set_test_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Point the app at a per-test SQLite file and disable Redis.

    Changes working directory to tmp_path so no .env file is accidentally
    loaded by Pydantic BaseSettings.
    """
    for var in _ALL_ENV_VARS:
        monkeypatch.delenv(var, raising=False)
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("DATABASE_URL", f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    monkeypatch.setenv("REDIS_URL", "")
    monkeypatch.setenv("LOG_JSON", "false")


@pytest.fixture()
def mock_redis() -> AsyncMock:
    """Create a mock async Redis client.

    Returns:
        AsyncMock: A mock that behaves like a redis.asyncio.Redis client.
    """
    client = AsyncMock()
    client.get = AsyncMock(return_value=None)
    client.set = AsyncMock()
    client.delete = AsyncMock()
    client.aclose = AsyncMock()
    return client


@pytest.fixture()
def app() -> FastAPI:
    """A fresh application built from the test environment."""
    from solarmon.api.main import create_app

    return create_app()


@pytest.fixture()
def client(app: FastAPI) -> Generator[TestClient, None, None]:
    """Create a FastAPI TestClient for integration testing.

    Uses a context manager so the application lifespan (database setup and
    teardown) runs.

    Yields:
        TestClient: Configured test client for the app.
    """
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture()
def make_sample() -> Callable[..., Sample]:
    """Factory for valid Samples with sensible defaults.

    Call as ``make_sample(ac_power=100.0, timestamp=...)``; any other Sample
    field can be overridden by keyword.
    """

    def _make(
        ac_power: float = 120.0,
        timestamp: datetime | None = None,
        **overrides: float,
    ) -> Sample:
        fields = {
            "ac_power": ac_power,
            "dc_power": 140.0,
            "pr": 85.0,
            "daily_yield": 450.0,
            "soiling_index": 7.0,
            "irradiance": 700.0,
            "timestamp": timestamp or datetime(2024, 1, 1, 12, 0, tzinfo=UTC),
        }
        fields.update(overrides)
        return Sample(**fields)

    return _make

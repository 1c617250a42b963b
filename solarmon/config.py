"""
Service configuration loaded from environment variables.

Uses Pydantic BaseSettings for automatic env var loading and validation.
Every value has a default suitable for local development, so the service
starts with an on-disk SQLite database and no Redis cache.

CHANGELOG:
- 2026-10-19: Initial creation

TODO:
- None
"""

from pydantic import field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Monitoring service configuration.

    Attributes:
        database_url: SQLAlchemy async URL for plants and telemetry documents.
        redis_url: Redis URL for the history response cache. Empty disables
            caching.
        history_retention: Maximum samples retained per plant (FIFO).
        default_history_days: Days window used by the history endpoint when
            the request does not pass ``days``.
        cache_ttl_s: TTL in seconds for cached history responses.
        cors_origins: Comma-separated list of allowed CORS origins.
        static_dir: Optional directory with a prebuilt dashboard frontend.
        log_level: Root log level name.
        log_json: Emit JSON log lines instead of plain text.
    """

    database_url: str = "sqlite+aiosqlite:///./data/solarmon.db"
    redis_url: str = ""
    history_retention: int = 1000
    default_history_days: int = 30
    cache_ttl_s: int = 5
    cors_origins: str = "http://localhost:5000,http://localhost:5173"
    static_dir: str = ""
    log_level: str = "INFO"
    log_json: bool = True

    @field_validator("history_retention", "default_history_days")
    @classmethod
    def must_be_positive(cls, v: int) -> int:
        """Validate retention and default window are at least 1."""
        if v < 1:
            raise ValueError("HISTORY_RETENTION and DEFAULT_HISTORY_DAYS must be >= 1")
        return v

    @field_validator("cache_ttl_s")
    @classmethod
    def cache_ttl_must_be_non_negative(cls, v: int) -> int:
        """Validate cache TTL is non-negative (0 disables caching)."""
        if v < 0:
            raise ValueError("CACHE_TTL_S must be >= 0")
        return v

    @field_validator("log_level")
    @classmethod
    def log_level_must_be_known(cls, v: str) -> str:
        """Normalise and validate the log level name."""
        level = v.strip().upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"LOG_LEVEL must be a standard level name (got: '{v}')")
        return level

    @property
    def cors_origin_list(self) -> list[str]:
        """Return CORS origins as a list, skipping blank entries."""
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}

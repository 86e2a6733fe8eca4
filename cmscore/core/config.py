"""Framework configuration (settings and environment).

Single source of truth for all configuration. Uses pydantic-settings
with .env support. Values are validated at load time, not at import time.
"""

from functools import lru_cache

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from cmscore.shared.enums import Connective, EnvironmentType

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class Settings(BaseSettings):
    """Framework settings loaded from environment and .env.

    Nothing is required: a bare environment yields a dev-mode configuration
    with no database. database_url is only read when a DataList is executed.
    """

    # App
    app_name: str = "cmscore"
    app_version: str = "1.0.0"
    debug: bool = False

    # Environment: "dev" | "test" | "live" (live enables friendly error pages)
    environment_type: str = EnvironmentType.DEV.value
    base_url: str = "http://localhost/"

    # Database (async SQLAlchemy URL, e.g. postgresql+asyncpg://... or sqlite+aiosqlite://)
    database_url: str = ""
    database_echo: bool = False

    # Search
    search_default_connective: str = Connective.AND.value
    # Upper bound for numeric search limits; None = unbounded.
    search_max_limit: int | None = None

    # Logging: level names (DEBUG, INFO, WARNING, ERROR, CRITICAL).
    # log_level is raised to DEBUG when debug is set. search_log_level applies
    # to cmscore.orm.search only (ignored and skipped search parameters log
    # at DEBUG); None inherits log_level.
    log_level: str = "INFO"
    search_log_level: str | None = None

    # OpenTelemetry (API only; exporters are configured by the host application)
    telemetry_enabled: bool = True

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    @model_validator(mode="after")
    def validate_environment_and_limits(self) -> "Settings":
        """Validate environment type, log levels and search limit bounds."""
        if self.environment_type not in EnvironmentType.values():
            raise ValueError(
                f"environment_type must be one of {EnvironmentType.values()}, "
                f"got: {self.environment_type!r}"
            )
        for name in ("log_level", "search_log_level"):
            level = getattr(self, name)
            if level is not None and level.upper() not in LOG_LEVELS:
                raise ValueError(f"{name} must be one of {LOG_LEVELS}, got: {level!r}")
        if self.search_max_limit is not None and self.search_max_limit < 1:
            raise ValueError(
                f"search_max_limit must be a positive integer, got: {self.search_max_limit}"
            )
        return self

    @property
    def is_dev(self) -> bool:
        return self.environment_type == EnvironmentType.DEV.value

    @property
    def is_live(self) -> bool:
        return self.environment_type == EnvironmentType.LIVE.value


@lru_cache
def get_settings() -> Settings:
    """Return cached settings (single instance per process).

    In tests, call get_settings.cache_clear() after overriding env vars so
    the next get_settings() picks up the new values.

    Returns:
        Loaded and validated Settings instance.
    """
    return Settings()

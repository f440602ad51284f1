"""
Application configuration using Pydantic Settings.

Loads configuration from environment variables with validation,
type coercion, and sensible defaults.
"""

from datetime import timedelta
from functools import lru_cache
from typing import Literal

from pydantic import Field, SecretStr, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class SteamAPIConfig(BaseSettings):
    """Steam API specific configuration."""

    model_config = SettingsConfigDict(env_prefix="STEAM_")

    api_key: SecretStr = Field(
        default=...,
        description="Steam Web API key from https://steamcommunity.com/dev/apikey",
    )
    base_url: str = Field(
        default="https://api.steampowered.com",
        description="Base URL for Steam Web API",
    )
    store_url: str = Field(
        default="https://store.steampowered.com",
        description="Base URL for the Steam storefront (appdetails, appreviews)",
    )
    app_list_url: str = Field(
        default="https://api.steampowered.com/ISteamApps/GetAppList/v2/",
        description="Full app listing endpoint mirrored into the local catalog",
    )
    requests_per_minute: int = Field(
        default=40,
        ge=1,
        le=200,
        description="Rate limit for per-title lookups per minute",
    )
    timeout_seconds: int = Field(
        default=30,
        ge=5,
        le=120,
        description="HTTP request timeout in seconds",
    )


class CatalogConfig(BaseSettings):
    """Local catalog mirror and synchronizer configuration."""

    model_config = SettingsConfigDict(env_prefix="CATALOG_")

    database_url: str = Field(
        default="sqlite+aiosqlite:///databases/steam_game.db",
        description="SQLAlchemy async URL of the catalog database",
    )
    refresh_interval_days: float = Field(
        default=3.0,
        gt=0,
        le=90,
        description="Minimum age of the last successful sync before a new one runs",
    )
    check_interval_seconds: int = Field(
        default=3600,
        ge=1,
        description="Fixed delay between sync due-checks",
    )
    batch_size: int = Field(
        default=1000,
        ge=1,
        le=50_000,
        description="Records upserted per batch",
    )
    prune_missing: bool = Field(
        default=True,
        description="Delete entries that vanished from the remote listing after a full sync",
    )
    records_path: str = Field(
        default="applist.apps.item",
        description="ijson prefix locating app records in the listing document",
    )
    stream_timeout_seconds: int = Field(
        default=300,
        ge=10,
        le=3600,
        description="Read timeout while streaming the remote listing",
    )

    @field_validator("database_url")
    @classmethod
    def validate_database_url(cls, v: str) -> str:
        """The catalog relies on SQLite upserts and an async driver."""
        if not v.startswith("sqlite+aiosqlite://"):
            raise ValueError(f"Unsupported catalog database URL: {v}")
        return v

    @property
    def refresh_interval(self) -> timedelta:
        """Refresh interval as a timedelta."""
        return timedelta(days=self.refresh_interval_days)


class ResolverConfig(BaseSettings):
    """Decision thresholds for the fuzzy resolver."""

    model_config = SettingsConfigDict(env_prefix="RESOLVER_")

    eligibility_threshold: float = Field(
        default=60.0,
        description="Candidates must score strictly above this to be considered",
    )
    confident_threshold: float = Field(
        default=75.0,
        description="Minimum best score for a confident match",
    )
    confident_margin: float = Field(
        default=15.0,
        ge=0,
        description="Minimum lead over the runner-up for a confident match",
    )
    max_suggestions: int = Field(
        default=3,
        ge=1,
        le=10,
        description="Suggestions returned for ambiguous queries",
    )
    candidate_limit: int = Field(
        default=500,
        ge=1,
        le=10_000,
        description="Maximum candidates pulled from the store per query",
    )
    min_query_length: int = Field(
        default=2,
        ge=1,
        description="Canonical queries shorter than this are rejected",
    )

    @model_validator(mode="after")
    def validate_threshold_order(self) -> "ResolverConfig":
        """A confident match must also be an eligible one."""
        if self.confident_threshold < self.eligibility_threshold:
            raise ValueError(
                f"confident_threshold ({self.confident_threshold}) must not be below "
                f"eligibility_threshold ({self.eligibility_threshold})"
            )
        return self


class CacheConfig(BaseSettings):
    """TTL and size bounds for in-process caches."""

    model_config = SettingsConfigDict(env_prefix="CACHE_")

    resolution_ttl_seconds: int = Field(
        default=21_600,
        ge=1,
        description="TTL for confident resolutions",
    )
    player_count_ttl_seconds: int = Field(default=300, ge=1)
    reviews_ttl_seconds: int = Field(default=3600, ge=1)
    details_ttl_seconds: int = Field(default=86_400, ge=1)
    max_entries: int = Field(
        default=1000,
        ge=1,
        le=1_000_000,
        description="Maximum entries per cache before oldest-inserted eviction",
    )
    sweep_interval_seconds: int = Field(
        default=3600,
        ge=1,
        description="Delay between expired-entry sweeps",
    )


class RetryConfig(BaseSettings):
    """Retry behavior configuration."""

    model_config = SettingsConfigDict(env_prefix="RETRY_")

    max_attempts: int = Field(
        default=3,
        ge=1,
        le=10,
        description="Maximum number of retry attempts",
    )
    base_delay_seconds: float = Field(
        default=1.0,
        ge=0.1,
        le=30.0,
        description="Base delay between retries (exponential backoff)",
    )
    max_delay_seconds: float = Field(
        default=60.0,
        ge=1.0,
        le=300.0,
        description="Maximum delay between retries",
    )
    exponential_base: float = Field(
        default=2.0,
        ge=1.5,
        le=4.0,
        description="Base for exponential backoff calculation",
    )


class LoggingConfig(BaseSettings):
    """Logging configuration."""

    model_config = SettingsConfigDict(env_prefix="LOG_")

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level",
    )
    format: Literal["json", "console"] = Field(
        default="json",
        description="Log output format",
    )
    include_timestamp: bool = Field(
        default=True,
        description="Include timestamp in log entries",
    )


class Settings(BaseSettings):
    """
    Main application settings.

    Aggregates all configuration sections and provides
    a single entry point for configuration access.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Environment
    environment: Literal["development", "staging", "production"] = Field(
        default="development",
        description="Deployment environment",
    )

    # Sub-configurations
    steam: SteamAPIConfig = Field(default_factory=SteamAPIConfig)
    catalog: CatalogConfig = Field(default_factory=CatalogConfig)
    resolver: ResolverConfig = Field(default_factory=ResolverConfig)
    cache: CacheConfig = Field(default_factory=CacheConfig)
    retry: RetryConfig = Field(default_factory=RetryConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == "production"


@lru_cache
def get_settings() -> Settings:
    """
    Get cached application settings.

    Uses lru_cache to ensure settings are only loaded once
    and reused across the application.

    Returns:
        Settings: Application configuration instance
    """
    return Settings()

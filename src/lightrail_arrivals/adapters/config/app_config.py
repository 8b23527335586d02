"""12-factor configuration adapter using environment variables."""

from typing import Self

from pydantic import AliasChoices, Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

CACHE_BACKENDS = ("auto", "memory", "redis", "none")

# Default TTLs differ per backend: the in-process cache is cheap to keep longer,
# the shared store is refreshed more often because several instances read it.
DEFAULT_MEMORY_CACHE_TTL_SECONDS = 300
DEFAULT_REDIS_CACHE_TTL_SECONDS = 120


class AppConfig(BaseSettings):
    """Application configuration following 12-factor principles."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    # Server configuration
    host: str = Field(default="0.0.0.0", description="Host to bind the server to")
    port: int = Field(default=3000, description="Port to bind the server to")
    idle_timeout_seconds: int = Field(
        default=120,
        description="Keep-alive timeout; generous because a cold aggregation can be slow",
    )
    log_level: str = Field(default="INFO", description="Root log level")

    # Upstream API configuration
    agency_id: str = Field(default="40", description="OneBusAway agency id (Sound Transit)")
    onebusaway_api_key: str = Field(default="TEST", description="OneBusAway API key")
    onebusaway_base_url: str = Field(
        default="https://api.pugetsound.onebusaway.org",
        description="Base URL of the OneBusAway REST API",
    )
    upstream_timeout_seconds: float = Field(
        default=30.0, description="Total timeout for a single upstream request"
    )
    upstream_max_retries: int = Field(
        default=3, ge=0, description="Retries for transient upstream failures"
    )
    upstream_backoff_base_seconds: float = Field(
        default=0.5, description="Base delay for exponential retry backoff"
    )
    upstream_backoff_max_seconds: float = Field(
        default=8.0, description="Upper bound for a single retry delay"
    )
    upstream_min_interval_ms: int = Field(
        default=0,
        ge=0,
        description="Minimum time between two upstream requests (0 disables)",
    )

    # Aggregation configuration
    arrivals_horizon_minutes: int = Field(
        default=60, ge=1, description="Forward window for arrival lookups"
    )
    batch_width: int = Field(
        default=5, description="Number of stops whose arrivals are fetched concurrently"
    )
    batch_delay_ms: int = Field(
        default=500, ge=0, description="Pause between two batches of stops"
    )

    # Cache configuration
    cache_backend: str = Field(
        default="auto",
        description="Snapshot cache: 'auto', 'memory', 'redis' or 'none'",
    )
    cache_url: str | None = Field(
        default=None,
        validation_alias=AliasChoices("cache_url", "redis_url"),
        description="Connection URL of the external key-value store",
    )
    cache_key: str = Field(default="lightrail:routes", description="Key of the cached snapshot")
    cache_ttl_seconds: int | None = Field(
        default=None,
        ge=1,
        description="Snapshot TTL; defaults to 300s in memory and 120s in redis",
    )
    cache_single_flight: bool = Field(
        default=False,
        description="Let only one of several concurrent cache misses aggregate",
    )

    # HTTP front configuration
    rate_limit_per_minute: int = Field(
        default=100,
        description="Maximum requests per IP address per minute (0 disables)",
    )
    disable_http_caching: bool = Field(
        default=True,
        description="Send no-store headers so browsers and proxies never cache responses",
    )

    @field_validator("cache_backend")
    @classmethod
    def validate_cache_backend(cls, v: str) -> str:
        """Validate the cache backend is one of the supported names."""
        if v.lower() not in CACHE_BACKENDS:
            raise ValueError(f"cache_backend must be one of {', '.join(CACHE_BACKENDS)}")
        return v.lower()

    @field_validator("batch_width")
    @classmethod
    def validate_batch_width(cls, v: int) -> int:
        """Validate at least one stop is fetched per batch."""
        if v < 1:
            raise ValueError("batch_width must be at least 1")
        return v

    @model_validator(mode="after")
    def validate_redis_url(self) -> Self:
        """A redis backend cannot work without a connection URL."""
        if self.cache_backend == "redis" and not self.cache_url:
            raise ValueError("cache_backend 'redis' requires CACHE_URL or REDIS_URL")
        return self

    def resolved_cache_backend(self) -> str:
        """The backend actually used once 'auto' is resolved."""
        if self.cache_backend == "auto":
            return "redis" if self.cache_url else "memory"
        return self.cache_backend

    def effective_cache_ttl_seconds(self) -> int:
        """The snapshot TTL for the resolved backend."""
        if self.cache_ttl_seconds is not None:
            return self.cache_ttl_seconds
        if self.resolved_cache_backend() == "redis":
            return DEFAULT_REDIS_CACHE_TTL_SECONDS
        return DEFAULT_MEMORY_CACHE_TTL_SECONDS

"""Configuration settings for the Riot API access layer."""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

if TYPE_CHECKING:
    from .riot_api.models import RateLimitConfig

# Load environment variables from .env file
load_dotenv()


class Settings(BaseSettings):
    """Client settings loaded from ``RIOT_``-prefixed environment variables."""

    # Riot API Configuration
    api_key: str = Field(default="dev_api_key")
    user_agent: Optional[str] = Field(default=None)

    # Rate Limiting
    limit_per_10_seconds: int = Field(default=10, gt=0)
    limit_per_10_minutes: int = Field(default=500, gt=0)
    rate_limit_enabled: bool = Field(default=True)

    # Response Cache
    cache_enabled: bool = Field(default=True)
    cache_ttl_seconds: float = Field(default=600.0, gt=0)
    cache_capacity: Optional[int] = Field(
        default=None,
        ge=0,
        description="Defaults to limit_per_10_minutes when unset",
    )

    # Transport
    request_timeout_seconds: float = Field(default=30.0, gt=0)

    # Logging
    log_level: str = Field(default="INFO")
    json_logs: bool = Field(default=True)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="RIOT_",
        case_sensitive=False,
        extra="ignore",
    )

    @property
    def effective_cache_capacity(self) -> int:
        """One cache slot per request allowed in the rolling window unless overridden."""
        if self.cache_capacity is None:
            return self.limit_per_10_minutes
        return self.cache_capacity

    def rate_limit_config(self) -> RateLimitConfig:
        """Build the rate limiter configuration from these settings."""
        from .riot_api.models import RateLimitConfig

        return RateLimitConfig(
            limit_per_10_seconds=self.limit_per_10_seconds,
            limit_per_10_minutes=self.limit_per_10_minutes,
        )


def get_settings(**overrides) -> Settings:
    """Get a settings instance, environment values overridden by keyword arguments."""
    return Settings(**overrides)


# Create a global settings instance lazily
settings: Settings | None = None


def get_global_settings() -> Settings:
    """Get or create the global settings instance."""
    global settings
    if settings is None:
        settings = get_settings()
    return settings

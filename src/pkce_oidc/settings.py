"""Client settings loaded from the environment.

Only the outer services read these; the validators take every value as
an explicit argument.
"""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings loaded from ``OIDC_``-prefixed environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="OIDC_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # production, development or test
    environment: str = "production"
    clock_tolerance: float = 30.0
    http_timeout: float = 30.0


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()

"""Configuration for the Metrofor schedule scraper.

Settings are read from environment variables prefixed with ``METROFOR_``
(or a ``.env`` file) and validated by pydantic.
"""

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/140.0.0.0 Safari/537.36"
)


class Settings(BaseSettings):
    """Application settings loaded from the environment."""

    model_config = SettingsConfigDict(
        env_prefix="METROFOR_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    base_url: str = Field(
        default="https://info.metrofor.ce.gov.br",
        description="Root URL of the upstream schedule site",
    )
    line_pk: str = Field(default="1", description="Upstream line id (Linha Sul)")
    timeout: float = Field(
        default=15.0, gt=0, le=120, description="HTTP timeout in seconds"
    )
    cache_ttl_seconds: int = Field(
        default=3600, ge=1, le=86400, description="Session cache lifetime"
    )
    honor_cookie_expiry: bool = Field(
        default=True,
        description="Expire the cached session when its cookies expire",
    )
    user_agent: str = Field(default=DEFAULT_USER_AGENT)
    log_level: str = Field(default="WARNING", description="Application log level")

    @field_validator("base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper = v.upper()
        if upper not in valid_levels:
            raise ValueError(f"Invalid log level: {v}. Must be one of {valid_levels}")
        return upper

    @property
    def schedule_url(self) -> str:
        return f"{self.base_url}/horarios"


@lru_cache()
def get_settings() -> Settings:
    """Get the application settings (cached singleton)."""
    return Settings()


def reset_settings() -> None:
    """Reset the cached settings (useful for testing)."""
    get_settings.cache_clear()

"""
Configuration and settings for the site cards service.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal, Optional, get_args

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Levels known to both the logging module and uvicorn.
LogLevel = Literal["critical", "error", "warning", "info", "debug"]
LOG_LEVELS = get_args(LogLevel)


class Settings(BaseSettings):
    """Environment-backed settings for the FastAPI service."""

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    api_prefix: str = Field(default="/api")

    # Database (Postgres expected). Unset means the in-memory store.
    database_url: Optional[str] = Field(default=None)
    database_sslmode: Optional[str] = Field(default="require")

    # HTTP server
    listen_host: str = Field(default="0.0.0.0")
    port: int = Field(default=3000)
    log_level: LogLevel = Field(default="info")

    # Optional static tree served at the web root
    static_dir: Optional[str] = Field(default=None)

    @field_validator("log_level", mode="before")
    @classmethod
    def _lowercase_level(cls, value):
        return value.lower() if isinstance(value, str) else value

    @property
    def use_database(self) -> bool:
        return bool((self.database_url or "").strip())


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached settings instance."""
    return Settings()

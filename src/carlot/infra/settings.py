from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    APP_ENV: str = Field(default="development")
    APP_SECRET: str = Field(default="please-change-me")
    LOG_LEVEL: str = Field(default="INFO")

    STORAGE_ROOT: Path = Field(default=Path("var/storage"))
    PUBLIC_BASE_URL: str = Field(default="http://localhost:8000")
    SIGNED_URL_TTL_SECONDS: int = Field(default=3600, gt=0)

    ACCESS_TOKEN_TTL_SECONDS: int = Field(default=3600, gt=0)
    REFRESH_TOKEN_TTL_SECONDS: int = Field(default=60 * 60 * 24 * 30, gt=0)
    PASSWORD_HASH_ITERATIONS: int = Field(default=390000, gt=0)

    STATS_STREAM_KEEPALIVE_SECONDS: float = Field(default=15.0, gt=0)


@lru_cache
def get_settings() -> Settings:
    return Settings()

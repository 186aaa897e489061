from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime settings, read from ``PROCSIM_*`` environment variables or ``.env``."""

    model_config = SettingsConfigDict(env_prefix="PROCSIM_", env_file=".env", extra="ignore")

    log_level: str = "INFO"
    log_file: str | None = None
    random_seed: int | None = None
    crystallization_dt: float = Field(default=0.1, gt=0)
    api_title: str = "Process Simulation API"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()


__all__ = ["Settings", "get_settings"]

# src/ds_app/core/config.py
from __future__ import annotations

import os
from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    App settings (12-factor). Override via env vars, e.g.
      DS_LOG_LEVEL=DEBUG  DS_DRY_RUN_DEFAULT=false  DS_SCAN_WORKERS=8
    """

    # App
    VERSION: str = "0.1.0"
    DEBUG: bool = False

    # Logging
    LOG_LEVEL: str = "WARNING"
    LOG_JSON: bool = False

    # Dedup toggles
    DRY_RUN_DEFAULT: bool = True
    FOLLOW_FILE_SYMLINKS: bool = False  # directory symlinks are never followed
    DELETE_MISMATCHED: bool = False  # delete from groups whose sizes disagree

    # Scanning
    SCAN_WORKERS: int | None = Field(default=None, ge=1)  # stat threads; None = sized from CPU count

    model_config = SettingsConfigDict(
        env_prefix="DS_",
        env_file=".env",
        extra="ignore",
    )

    @field_validator("LOG_LEVEL")
    @classmethod
    def _upper_level(cls, v: str) -> str:
        return v.strip().upper()

    @property
    def effective_log_level(self) -> str:
        return "DEBUG" if self.DEBUG else self.LOG_LEVEL

    @property
    def scan_workers(self) -> int:
        if self.SCAN_WORKERS is not None:
            return self.SCAN_WORKERS
        # stat calls mostly wait on the disk, so oversubscribe the CPUs
        return max(4, min(64, (os.cpu_count() or 4) * 4))


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Cached getter; call `get_settings.cache_clear()` after changing the environment.
    """
    return Settings()

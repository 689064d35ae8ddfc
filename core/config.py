"""
Pydantic-based process settings.

These are defaults only: every knob can be overridden through a TCPSCAN_*
environment variable or a .env file, and the CLI turns them into argparse
defaults. A single scan run is described by core.models.ScanConfig.
"""

import logging
from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

MIN_TIMEOUT_MS = 50
MAX_TIMEOUT_MS = 100_000
MIN_CONCURRENCY = 1
MAX_CONCURRENCY = 50


class Settings(BaseSettings):
    model_config = SettingsConfigDict(case_sensitive=False, env_file=".env", env_prefix="TCPSCAN_", extra="ignore")

    # Probing
    default_timeout_ms: int = Field(100, description="connect/recv timeout in milliseconds")
    default_concurrency: int = Field(5, description="number of worker threads")
    banner_size: int = Field(1024, gt=0, description="max bytes read when grabbing a banner")

    # Diagnostics
    log_level: str = Field("WARNING", description="root log level for the CLI")

    @field_validator("default_timeout_ms")
    @classmethod
    def validate_timeout(cls, v: int) -> int:
        if not MIN_TIMEOUT_MS <= v <= MAX_TIMEOUT_MS:
            raise ValueError(f"timeout must be within {MIN_TIMEOUT_MS}..{MAX_TIMEOUT_MS} ms")
        return v

    @field_validator("default_concurrency")
    @classmethod
    def validate_concurrency(cls, v: int) -> int:
        if not MIN_CONCURRENCY <= v <= MAX_CONCURRENCY:
            raise ValueError(f"concurrency must be within {MIN_CONCURRENCY}..{MAX_CONCURRENCY}")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"unknown log level {v!r}")
        return level


@lru_cache()
def get_settings() -> Settings:
    return Settings()

"""Runtime configuration using Pydantic settings."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class StoreSettings(BaseSettings):
    """Where the answer table lives; needs no credentials.

    Every field maps to a ``LUCCA_``-prefixed environment variable and may
    also come from a ``.env`` file in the working directory.
    """

    model_config = SettingsConfigDict(
        env_prefix="LUCCA_", env_file=".env", extra="ignore"
    )

    store_path: Path = Path("data")


class Settings(StoreSettings):
    """Portal location, credentials and play options."""

    url: str
    email: str
    password: SecretStr

    # Training games are created through a dedicated endpoint
    learning: bool = False

    timeout: float = 30.0
    flush_each_question: bool = False
    log_level: str = "WARNING"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Load and cache configuration for the current process."""

    return Settings()  # type: ignore[call-arg]


__all__ = ["Settings", "StoreSettings", "get_settings"]

"""
Configuration using pydantic-settings.

Loads configuration from HYPODEX_* environment variables and .env files.
"""

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class StorageSettings(BaseSettings):
    """Hypothesis store settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="HYPODEX_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Storage
    base_dir: Path = Field(
        default=Path("."),
        description="Directory containing the .research/ tree",
    )
    auto_rebuild_index: bool = Field(
        default=True,
        description="Rebuild the index synchronously after every write",
    )
    on_corrupt_session: Literal["fail", "skip"] = Field(
        default="fail",
        description="Index rebuild behaviour when a session file cannot be decoded",
    )
    serialize_writes: bool = Field(
        default=True,
        description="Serialise read-modify-write sequences per session within the process",
    )

    # Application
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level",
    )


@lru_cache
def get_settings() -> StorageSettings:
    """
    Get cached settings.

    Returns:
        StorageSettings: Settings instance.
    """
    return StorageSettings()


__all__ = ["StorageSettings", "get_settings"]

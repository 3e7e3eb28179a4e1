"""Pydantic settings for the implementors tooling.

Values come from ``DOCSINDEX_*`` environment variables, falling back to the
defaults below::

    DOCSINDEX_LOG_LEVEL=DEBUG
    DOCSINDEX_LOG_FORMAT=json
    DOCSINDEX_OUTPUT_DIR=~/site/static
    DOCSINDEX_STRICT=false
"""

from __future__ import annotations

from enum import Enum
from functools import lru_cache
from pathlib import Path
from typing import Any

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

__all__ = ["LogLevel", "LogFormat", "ImplementorsCfg", "get_settings", "reset_settings"]


class LogLevel(str, Enum):
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"


class LogFormat(str, Enum):
    CONSOLE = "console"
    JSON = "json"


class ImplementorsCfg(BaseSettings):
    """Configuration for loading, checking, and emitting implementor tables."""

    model_config = SettingsConfigDict(
        env_prefix="DOCSINDEX_",
        case_sensitive=False,
        extra="ignore",
    )

    log_level: LogLevel = Field(LogLevel.INFO, description="Logging level")
    log_format: LogFormat = Field(LogFormat.CONSOLE, description="Pretty console or structured JSON")
    output_dir: Path = Field(
        Path("Data/Implementors"), description="Root directory for emitted implementors scripts"
    )
    strict: bool = Field(
        True, description="Reject parsed tables with empty group names or empty groups"
    )

    @field_validator("output_dir", mode="before")
    @classmethod
    def expand_paths(cls, v: Any) -> Any:
        """Expand user home."""
        if isinstance(v, str):
            return Path(v).expanduser()
        if isinstance(v, Path):
            return v.expanduser()
        return v


@lru_cache(maxsize=1)
def get_settings() -> ImplementorsCfg:
    return ImplementorsCfg()


def reset_settings() -> None:
    """Forget the cached settings so the environment is read again."""
    get_settings.cache_clear()

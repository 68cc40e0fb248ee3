"""Lightweight configuration for the circle battle engine."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings, read from ``CIRCLEBATTLE_*`` variables or ``.env``."""

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", env_prefix="CIRCLEBATTLE_"
    )

    enable_mock_fallback: bool = Field(
        default=False,
        description="Substitute generated cards when a circle's card pool cannot be loaded",
    )
    store_backend: Literal["memory", "json", "sql"] = Field(
        default="sql", description="Where battles and battle requests are persisted"
    )
    card_source_backend: Literal["memory", "sql"] = Field(
        default="sql", description="Where circles and their cards are read from"
    )
    data_dir: Path = Field(default=Path("battles"), description="Root of the JSON store")
    database_url: str = Field(
        default="sqlite:///circlebattle.db", description="SQLAlchemy URL for the SQL store"
    )
    database_echo: bool = Field(default=False, description="Log every SQL statement")
    database_pool_size: int = Field(default=5, ge=1)
    database_max_overflow: int = Field(default=10, ge=0)
    card_pool_limit: int = Field(
        default=20, ge=1, description="Maximum number of cards read for one circle"
    )
    log_level: str = Field(default="INFO", description="Root logging level")
    cors_origins: list[str] = Field(
        default_factory=lambda: ["http://localhost:3000", "http://127.0.0.1:3000"],
        description="Origins allowed to call the HTTP API",
    )


@lru_cache
def get_settings() -> Settings:
    """Return a cached Settings instance."""

    return Settings()

"""Provider configuration via pydantic-settings."""

from __future__ import annotations

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="REDSHIFT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Cluster connection
    database_url: str = Field(
        default="postgresql+psycopg://admin@localhost:5439/dev",
        repr=False,
    )
    pool_size: int = 5
    pool_pre_ping: bool = True
    connect_timeout: int = 10

    # Catalog propagation after CREATE DATABASE
    settle_timeout: float = 30.0
    settle_base_delay: float = 0.5
    settle_max_delay: float = 5.0

    # Logging
    log_level: str = "INFO"
    log_format: Literal["console", "json"] = "console"

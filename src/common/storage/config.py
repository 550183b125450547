"""
Storage Configuration

PostgreSQL connection and pool settings with environment variable support.
"""

from __future__ import annotations

from urllib.parse import quote

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class StorageConfig(BaseSettings):
    """
    Configuration for the pgvector datastore.

    Supports environment variables with DB_ prefix:
    - DB_HOST, DB_PORT, DB_NAME, DB_USER, DB_PASSWORD
    - DB_POOL_MIN, DB_POOL_MAX, DB_COMMAND_TIMEOUT
    """

    model_config = SettingsConfigDict(
        env_prefix="DB_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    host: str = Field(default="localhost", description="PostgreSQL host")
    port: int = Field(default=5432, ge=1, le=65535, description="PostgreSQL port")
    name: str = Field(default="rickandmorty", description="Database name")
    user: str = Field(default="postgres", description="Database user")
    password: str = Field(default="", description="Database password")

    pool_min: int = Field(
        default=2,
        ge=1,
        description="Minimum connection pool size",
    )
    pool_max: int = Field(
        default=10,
        ge=1,
        description="Maximum connection pool size",
    )
    command_timeout: int = Field(
        default=60,
        ge=1,
        description="Command timeout in seconds",
    )
    max_inactive_lifetime: float = Field(
        default=300.0,
        ge=0.0,
        description="Maximum seconds a connection can be idle before closing",
    )

    @property
    def dsn(self) -> str:
        """asyncpg connection URL."""
        credentials = quote(self.user, safe="")
        if self.password:
            credentials += ":" + quote(self.password, safe="")
        return f"postgresql://{credentials}@{self.host}:{self.port}/{self.name}"

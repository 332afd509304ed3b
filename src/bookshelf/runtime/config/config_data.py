"""Pydantic models for parsing the config.yaml configuration file.

This module contains Pydantic models that correspond to the structure of config.yaml.
These models handle validation and type conversion of the YAML configuration data.
"""

from __future__ import annotations

from typing import Literal

from loguru import logger
from pydantic import BaseModel, Field, computed_field, field_validator
from sqlalchemy.engine import URL


class CORSConfig(BaseModel):
    """CORS configuration for the application."""

    origins: list[str] = Field(
        default=["http://localhost:3000", "http://localhost:3001"]
    )
    allow_credentials: bool = True
    allow_methods: list[str] = Field(default=["GET", "POST", "DELETE", "OPTIONS"])
    allow_headers: list[str] = Field(default=["*"])


class LoggingConfig(BaseModel):
    """Logging configuration model."""

    level: str = Field(default="INFO", description="Logging level")
    format: Literal["json", "plain"] = Field(default="plain", description="Log format")
    file: str | None = Field(default=None, description="Log file path")
    max_size_mb: int = Field(default=10, description="Maximum log file size in MB")
    backup_count: int = Field(
        default=5, description="Number of backup log files to keep"
    )
    sqlalchemy_level: str = Field(
        default="WARNING", description="Level for the sqlalchemy engine and pool loggers"
    )
    uvicorn_level: str = Field(
        default="INFO", description="Level for uvicorn server lifecycle logs"
    )

    @field_validator("level", "sqlalchemy_level", "uvicorn_level")
    @classmethod
    def _upper_level(cls, value: str) -> str:
        return value.upper()


class DatabaseConfig(BaseModel):
    """Database configuration model.

    The connection is normally described by its parts (host, user, password,
    name, port, sslmode). Setting ``url`` overrides the parts entirely, which is
    how tests and local runs point the service at SQLite.
    """

    url: str | None = Field(
        default=None, description="Full database URL, overrides the parts below"
    )
    driver: str = Field(
        default="postgresql+psycopg2", description="SQLAlchemy driver name"
    )
    host: str = Field(default="localhost", description="Database host")
    port: int = Field(default=5432, description="Database port")
    user: str = Field(default="postgres", description="Database username")
    password: str | None = Field(default=None, description="Database password")
    name: str = Field(default="books", description="Database name")
    sslmode: str = Field(default="disable", description="PostgreSQL SSL mode")
    pool_size: int = Field(default=10, description="Connection pool size")
    max_overflow: int = Field(default=10, description="Maximum pool overflow")
    pool_timeout: int = Field(default=30, description="Pool timeout in seconds")
    pool_recycle: int = Field(default=1800, description="Pool recycle time in seconds")

    @field_validator("url", "password", mode="before")
    @classmethod
    def _blank_to_none(cls, value: object) -> object:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @computed_field
    @property
    def connection_string(self) -> str:
        """Construct the database connection string."""
        if self.url:
            if self.password:
                logger.warning(
                    "Database URL is set; ignoring the separately configured password."
                )
            return self.url

        url = URL.create(
            self.driver,
            username=self.user,
            password=self.password,
            host=self.host,
            port=self.port,
            database=self.name,
            query={"sslmode": self.sslmode},
        )
        # render_as_string masks the password by default
        return url.render_as_string(hide_password=False)

    @property
    def is_sqlite(self) -> bool:
        return self.connection_string.startswith("sqlite")


class SeedConfig(BaseModel):
    """Startup seeding configuration."""

    enabled: bool = Field(
        default=False,
        description="Insert the example books on startup when the table is empty",
    )


class AppConfig(BaseModel):
    """Application configuration model."""

    environment: Literal["development", "production", "test"] = Field(
        default="development", description="Application environment"
    )
    host: str = Field(default="0.0.0.0", description="Application host")
    port: int = Field(default=8080, description="Application port")
    cors: CORSConfig = Field(
        default_factory=CORSConfig, description="CORS configuration"
    )


class ConfigData(BaseModel):
    """Root configuration model that matches the config.yaml structure."""

    app: AppConfig = Field(
        default_factory=AppConfig, description="Application configuration"
    )
    database: DatabaseConfig = Field(
        default_factory=DatabaseConfig, description="Database configuration"
    )
    logging: LoggingConfig = Field(
        default_factory=LoggingConfig, description="Logging configuration"
    )
    seed: SeedConfig = Field(
        default_factory=SeedConfig, description="Seed data configuration"
    )

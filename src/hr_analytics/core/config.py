# HR Analytics - Intern, Housing and Department Analytics Backend
# Copyright (C) 2025 Luiz Frias <luizf35@gmail.com>
# Form F[x] Labs
#
# This software is dual-licensed under AGPL-3.0 and Commercial License.
# For commercial licensing, contact: luizf35@gmail.com
# See LICENSE file for full terms.

"""Configuration management using Pydantic Settings."""

from urllib.parse import unquote

from beartype import beartype
from pydantic import Field, ValidationInfo, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

SSL_MODES = ("disable", "allow", "prefer", "require", "verify-ca", "verify-full")


class Settings(BaseSettings):
    """Application settings with immutable configuration."""

    model_config = SettingsConfigDict(
        env_file=None,
        env_file_encoding="utf-8",
        frozen=True,  # Immutable settings
        validate_default=True,
        extra="ignore",
    )

    # Database connection
    db_host: str = Field(
        default="localhost",
        description="PostgreSQL server host",
        min_length=1,
    )
    db_port: int = Field(
        default=5432,
        ge=1,
        le=65535,
        description="PostgreSQL server port",
    )
    db_name: str = Field(
        default="postgres",
        description="Database name",
        min_length=1,
    )
    db_user: str = Field(
        default="postgres",
        description="Database user",
        min_length=1,
    )
    db_password: str = Field(
        default="",
        description="Database password, URL-encoded characters are decoded",
    )
    db_ssl_mode: str = Field(
        default="require",
        description="TLS mode ('disable' turns TLS off)",
    )

    # Pool sizing and timeouts
    db_pool_min: int = Field(
        default=1,
        ge=0,
        le=5,
        description="Minimum connections held open",
    )
    db_pool_max: int = Field(
        default=5,
        ge=1,
        le=20,
        description="Maximum pooled connections",
    )
    db_idle_timeout: float = Field(
        default=15.0,
        gt=0,
        le=3600.0,
        description="Seconds before an idle connection is closed",
    )
    db_connect_timeout: float = Field(
        default=8.0,
        gt=0,
        le=120.0,
        description="Connection establishment timeout in seconds",
    )
    db_statement_timeout: float = Field(
        default=15.0,
        gt=0,
        le=600.0,
        description="Statement timeout in seconds",
    )
    db_keepalive: bool = Field(
        default=True,
        description="Enable TCP keep-alive on pooled connections",
    )

    # Retry policy
    db_retry_attempts: int = Field(
        default=3,
        ge=1,
        le=10,
        description="Total attempts per query (first try included)",
    )
    db_retry_delay: float = Field(
        default=1.0,
        ge=0.0,
        le=60.0,
        description="Fixed delay between attempts in seconds",
    )
    db_retry_connection_errors_only: bool = Field(
        default=False,
        description="Only retry errors classified as connection failures",
    )

    # API Configuration
    app_name: str = Field(
        default="HR Analytics",
        description="Application name",
        min_length=1,
    )
    api_host: str = Field(
        default="0.0.0.0",  # nosec B104 - Binding to all interfaces is needed for containerized deployment
        description="API host to bind to",
    )
    api_port: int = Field(
        default=8000,
        ge=1,
        le=65535,
        description="API port to bind to",
    )
    api_env: str = Field(
        default="development",
        pattern="^(development|staging|production)$",
        description="API environment",
    )
    api_cors_origins: list[str] = Field(
        default_factory=lambda: ["http://localhost:3000"],
        description="Allowed CORS origins",
    )

    @field_validator("db_password")
    @classmethod
    def decode_password(cls: type["Settings"], v: str) -> str:
        """Decode URL-encoded characters in the password."""
        return unquote(v)

    @field_validator("db_ssl_mode")
    @classmethod
    def validate_ssl_mode(cls: type["Settings"], v: str) -> str:
        """Normalize and validate the TLS mode."""
        mode = v.strip().lower()
        if mode not in SSL_MODES:
            raise ValueError(
                f"Invalid DB_SSL_MODE '{v}', expected one of: {', '.join(SSL_MODES)}"
            )
        return mode

    @field_validator("db_pool_max")
    @classmethod
    def validate_pool_sizes(cls: type["Settings"], v: int, info: ValidationInfo) -> int:
        """Ensure pool max is greater than pool min."""
        if "db_pool_min" in info.data:
            min_size = info.data["db_pool_min"]
            if v < min_size:
                raise ValueError(
                    f"db_pool_max ({v}) must be >= db_pool_min ({min_size})"
                )
        return v

    @field_validator("api_cors_origins")
    @classmethod
    def validate_cors_origins(cls: type["Settings"], v: list[str]) -> list[str]:
        """Validate CORS origins are proper URLs."""
        for origin in v:
            if not origin.startswith(("http://", "https://")):
                raise ValueError(f"Invalid CORS origin: {origin}")
        return v

    @property
    @beartype
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.api_env == "production"

    @property
    @beartype
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.api_env == "development"


_settings: Settings | None = None


@beartype
def get_settings() -> Settings:
    """Get cached settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


@beartype
def clear_settings_cache() -> None:
    """Clear settings cache (for testing)."""
    global _settings
    _settings = None

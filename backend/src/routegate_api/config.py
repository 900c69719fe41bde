"""Application configuration."""

from functools import lru_cache
from typing import Literal

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from routegate_api.constants.languages import DEFAULT_LANGUAGE, SUPPORTED_LANGUAGES


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "Route Access API"
    debug: bool = False
    environment: Literal["development", "staging", "production"] = "development"

    # Database (required - no default)
    database_url: str = Field(
        description="Database connection URL. Must be set via environment variable."
    )
    database_pool_size: int = 5
    database_max_overflow: int = 10
    # Isolation for the snapshot transaction of one resolution call
    database_isolation_level: Literal[
        "READ COMMITTED", "REPEATABLE READ", "SERIALIZABLE"
    ] = "REPEATABLE READ"

    # Fallback UI language for missing or unsupported language codes
    default_language: str = DEFAULT_LANGUAGE.value

    # Resolution
    resolution_timeout_seconds: float = Field(default=5.0, gt=0)

    # CORS settings
    cors_origins: str = "http://localhost:3000"  # Comma-separated list

    @model_validator(mode="after")
    def validate_settings(self) -> "Settings":
        """Validate settings for security and consistency requirements."""
        if self.environment == "production" and self.debug:
            raise ValueError(
                "DEBUG mode cannot be enabled in production environment. "
                "This would expose API documentation and detailed error messages."
            )

        url = self.database_url
        if self.environment == "production":
            if not url.startswith(("postgresql://", "postgres://")):
                raise ValueError(
                    "DATABASE_URL must be a PostgreSQL URL starting with "
                    "'postgresql://' or 'postgres://' in production"
                )
        elif not url.startswith(("postgresql://", "postgres://", "sqlite+aiosqlite://")):
            raise ValueError(
                "DATABASE_URL must be a PostgreSQL URL or a sqlite+aiosqlite URL"
            )

        if self.default_language not in SUPPORTED_LANGUAGES:
            raise ValueError(
                f"DEFAULT_LANGUAGE must be one of: {', '.join(sorted(SUPPORTED_LANGUAGES))}"
            )

        return self

    @property
    def is_postgres(self) -> bool:
        """Whether the configured database is PostgreSQL."""
        return self.database_url.startswith(("postgresql://", "postgres://"))

    @property
    def async_database_url(self) -> str:
        """Get async database URL for SQLAlchemy.

        PostgreSQL URLs are rewritten to use asyncpg, and sslmode is
        converted to ssl for asyncpg compatibility.
        """
        url = self.database_url
        if not self.is_postgres:
            return url
        url = url.replace("postgres://", "postgresql://", 1)
        url = url.replace("postgresql://", "postgresql+asyncpg://", 1)
        url = url.replace("sslmode=", "ssl=")
        return url

    @property
    def cors_origins_list(self) -> list[str]:
        """Get CORS origins as a list."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()

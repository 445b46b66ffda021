"""
Application settings loaded from environment variables.

Uses pydantic-settings for validation and type safety.
Shared by the API process and the import worker.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field
from functools import lru_cache
from typing import Optional


class Settings(BaseSettings):
    """
    Application settings.

    All values loaded from .env file or environment variables.
    Validation happens automatically on startup.
    """

    model_config = SettingsConfigDict(
        env_file=(".env", "../.env"),  # Check current dir, then parent
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"  # Ignore extra env vars
    )

    # ===================
    # CMS (CATALOG + AUTH)
    # ===================
    cms_api_url: str = Field(
        default="http://localhost:1337",
        description="Headless CMS base URL (catalog and authentication)"
    )
    cms_timeout_seconds: float = Field(
        default=30,
        gt=0,
        le=300,
        description="Timeout for each CMS request in seconds"
    )

    # ===================
    # JOB QUEUE
    # ===================
    redis_url: Optional[str] = Field(
        None,
        description="Redis URL for the import job queue (unset = background imports disabled)"
    )

    # ===================
    # IMPORT LIMITS
    # ===================
    import_max_rows: int = Field(
        default=5000,
        ge=1,
        le=100000,
        description="Maximum rows accepted in a single import request"
    )
    import_job_max_attempts: int = Field(
        default=3,
        ge=1,
        le=10,
        description="Attempts for a background batch whose runner crashes"
    )
    import_job_backoff_seconds: float = Field(
        default=2,
        ge=0,
        le=300,
        description="First retry delay for a crashed batch, doubled each attempt"
    )
    import_job_retention_seconds: int = Field(
        default=7 * 24 * 60 * 60,
        ge=60,
        description="How long finished job records stay queryable"
    )
    import_row_retry_attempts: int = Field(
        default=1,
        ge=1,
        le=5,
        description="Attempts per row for transient CMS failures (1 = no row retry)"
    )
    import_row_retry_backoff_seconds: float = Field(
        default=0.5,
        ge=0,
        le=30,
        description="Base delay between row retries"
    )

    # ===================
    # APP SETTINGS
    # ===================
    environment: str = Field(
        default="development",
        pattern="^(development|staging|production)$",
        description="Application environment"
    )
    debug: bool = Field(
        default=True,
        description="Enable debug mode"
    )
    log_level: str = Field(
        default="INFO",
        pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$",
        description="Logging level"
    )
    api_host: str = Field(
        default="0.0.0.0",
        description="API host"
    )
    api_port: int = Field(
        default=8000,
        ge=1000,
        le=65535,
        description="API port"
    )
    cors_origins: list[str] = Field(
        default=["http://localhost:3000"],
        description="Origins allowed to call the API (admin console)"
    )

    # ===================
    # COMPUTED PROPERTIES
    # ===================
    @property
    def is_production(self) -> bool:
        """Check if running in production."""
        return self.environment == "production"

    @property
    def queue_configured(self) -> bool:
        """Check if the background job queue is configured."""
        return bool(self.redis_url)


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    Call get_settings.cache_clear() to reload.

    Returns:
        Settings: Application settings

    Raises:
        ValidationError: If env vars are invalid
    """
    return Settings()


# For convenient imports: from config.settings import settings
settings = get_settings()

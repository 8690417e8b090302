"""
Configuration management for Family Calendar.

Uses Pydantic Settings for type-safe environment variable loading.
Configured via .env file in project root.
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_SESSION_SECRET = "change-me-in-production"


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings can be configured via .env file or environment variables.
    """

    # Python & Application
    python_env: Literal["development", "production"] = Field(
        default="development",
        description="Application environment"
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Logging level"
    )

    # Database
    database_url: str = Field(
        default="sqlite:///./data/family_calendar.db",
        description="Database connection URL"
    )
    database_auto_create: bool = Field(
        default=False,
        description="Create missing tables at startup (development only; use Alembic otherwise)"
    )

    # API Configuration
    api_host: str = Field(
        default="0.0.0.0",
        description="API server host"
    )
    api_port: int = Field(
        default=8000,
        description="API server port"
    )
    api_reload: bool = Field(
        default=True,
        description="Enable auto-reload in development"
    )

    # Session authentication
    session_secret_key: str = Field(
        default=DEFAULT_SESSION_SECRET,
        description="Secret used to sign the session cookie"
    )
    session_cookie_name: str = Field(
        default="family_calendar_session",
        description="Name of the session cookie"
    )
    session_max_age: int = Field(
        default=14 * 24 * 60 * 60,
        description="Session lifetime in seconds"
    )

    # Google Calendar Configuration (Service Account)
    google_service_account_file: str = Field(
        default="",
        description="Path to Google service account JSON key file"
    )
    google_service_account_json: str = Field(
        default="",
        description="Google service account JSON (alternative to file, for deployments)"
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.python_env == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.python_env == "production"

    @property
    def uses_postgresql(self) -> bool:
        """Check if PostgreSQL is the configured database."""
        return "postgresql" in self.database_url.lower()

    @property
    def has_google_credentials(self) -> bool:
        """Check if a Google service account is configured."""
        return bool(self.google_service_account_file or self.google_service_account_json)

    def validate_production_config(self) -> None:
        """
        Validate configuration for production environment.

        Raises:
            ValueError: If required production settings are missing or invalid
        """
        if not self.is_production:
            return

        errors = []

        if not self.uses_postgresql:
            errors.append(
                "Production requires PostgreSQL. "
                "Set DATABASE_URL to a PostgreSQL connection string."
            )

        if self.session_secret_key == DEFAULT_SESSION_SECRET:
            errors.append("SESSION_SECRET_KEY must be changed in production.")

        if not self.has_google_credentials:
            errors.append(
                "Google Calendar requires authentication. "
                "Set either GOOGLE_SERVICE_ACCOUNT_FILE or GOOGLE_SERVICE_ACCOUNT_JSON."
            )

        if errors:
            raise ValueError("Production configuration errors:\n- " + "\n- ".join(errors))


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    This function is cached to ensure we only load settings once.

    Returns:
        Settings instance loaded from environment

    Example:
        >>> from src.config import get_settings
        >>> settings = get_settings()
        >>> print(settings.database_url)
    """
    return Settings()

"""Configuration and settings management using pydantic-settings."""
from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Calendar node settings with environment variable loading."""

    model_config = SettingsConfigDict(
        env_prefix="CALENDAR_NODES_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Core service settings
    env: str = Field(default="development", description="Environment name")
    log_level: str = Field(default="INFO", description="Log level")

    # Calendar target
    calendar_id: str = Field(
        default="primary",
        description="Google Calendar ID used by every node",
    )
    application_name: str = Field(
        default="calendar-nodes",
        description="Application name sent with Google API requests",
    )

    # Credentials
    service_account_file: str | None = Field(
        default=None,
        description="Path to the Google service account JSON file",
    )
    delegated_subject: str | None = Field(
        default=None,
        description="User to impersonate via domain-wide delegation",
    )
    access_token: SecretStr | None = Field(
        default=None,
        description="Pre-issued OAuth access token (takes precedence over the service account)",
    )

    # Transport
    api_base_url: str = Field(
        default="https://www.googleapis.com/calendar/v3",
        description="Google Calendar API base URL",
    )
    http_timeout_s: float = Field(
        default=30.0,
        description="Timeout for a single Calendar API request in seconds",
    )

    # Node defaults
    default_max_results: int = Field(
        default=10,
        description="Max results used by list nodes when none is configured",
    )

    @field_validator("http_timeout_s")
    @classmethod
    def validate_timeout(cls, v: float) -> float:
        """Validate that the HTTP timeout is positive."""
        if v <= 0:
            raise ValueError("http_timeout_s must be positive")
        return v

    @field_validator("default_max_results")
    @classmethod
    def validate_max_results(cls, v: int) -> int:
        """Validate that the default max results is positive."""
        if v <= 0:
            raise ValueError("default_max_results must be positive")
        return v


# Global settings instance
_settings: Settings | None = None


def get_settings() -> Settings:
    """Get or create the global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """Reset settings (useful for testing)."""
    global _settings
    _settings = None

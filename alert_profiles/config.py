"""Application configuration using Pydantic Settings."""

from pydantic_settings import BaseSettings, SettingsConfigDict

from alert_profiles.core.units import GlucoseUnit


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
    )

    # Database
    # Deployments point this at postgresql+asyncpg://...
    database_url: str = "sqlite+aiosqlite:///./alert_profiles.db"

    # Logging
    log_format: str = "json"  # 'json' or 'text'
    log_level: str = "INFO"
    service_name: str = "alert-profiles-api"

    # Display preferences
    glucose_unit: GlucoseUnit = GlucoseUnit.MGDL

    # Defaults for new alert types
    default_alert_type_name: str = "Default"
    default_snooze_period_minutes: int = 60

    # Testing
    testing: bool = False  # Set to True during tests to disable connection pooling


settings = Settings()

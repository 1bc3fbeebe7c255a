import os
from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

BASE_DIR = Path(__file__).resolve().parent.parent.parent


class Settings(BaseSettings):
    env: str = Field(default="dev", description="Deployment environment")
    app_name: str = "MERIT EMS Timeclock API"
    database_url: str = Field(
        default=f"sqlite:///{BASE_DIR / 'merit_ems.db'}",
        description="Database connection string",
    )
    create_schema_on_startup: bool = True
    cors_origins: str = ""
    log_level: str = "INFO"
    sentry_dsn: str | None = Field(default=None, description="Sentry DSN for error monitoring")
    otlp_endpoint: str | None = Field(default=None, description="OTLP endpoint for traces/metrics")

    default_hourly_rate: float = Field(default=15.0, description="Rate used when a pay period has none")
    deduction_per_warning: float = Field(default=5.0, description="Amount deducted per timeclock warning")
    default_lookback_days: int = Field(default=30, ge=1, description="Rebuild window when none is given")

    model_config = SettingsConfigDict(env_prefix="MERIT_", extra="ignore")

    @field_validator("log_level")
    @classmethod
    def normalize_level(cls, value: str) -> str:
        return value.strip().upper()

    @property
    def cors_origin_list(self) -> list[str]:
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]


@lru_cache
def get_settings() -> Settings:
    return Settings(_env_file=get_settings_env_file())


def get_settings_env_file() -> str | None:
    """Resolve environment-specific env file if it exists."""
    env = os.getenv("MERIT_ENV", "dev")
    env_file = BASE_DIR / f".env.{env}"
    default_file = BASE_DIR / ".env"
    if env_file.exists():
        return str(env_file)
    if default_file.exists():
        return str(default_file)
    return None


settings = get_settings()

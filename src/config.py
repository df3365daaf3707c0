from functools import lru_cache
from typing import Any, Literal
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Application Configuration
    TASKS_VERSION: str = "v1.0.x"
    API_NAME: str = "Tasks"
    API_SUMMARY: str = "A minimal task-tracking REST API"
    API_BANNER: str = "Todo Backend"

    TASKS_API_KEY: str | None = None

    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"

    CORS_ENABLED: bool = False
    CORS_ORIGINS: list[str] = ["*"]

    # Database Configuration
    DATABASE_URL: str = "sqlite:///./tasks.db"  # Use a postgresql:// URL in production
    TASKS_TABLE_NAME: str = "tasks"

    # Listing
    DEFAULT_LIST_LIMIT: int = 5

    # OpenTelemetry Settings
    OTEL_ENABLED: bool = False
    OTEL_SERVICE_NAME: str = "tasks"

    @field_validator("LOG_LEVEL", mode="before")
    def normalize_log_level(cls, v: Any):
        if isinstance(v, str):
            return v.upper()
        return v

    @field_validator("CORS_ORIGINS", mode="before")
    def validate_list_from_string(cls, v: Any):
        if isinstance(v, str):
            return [item.strip() for item in v.split(",")]
        return v

    @field_validator("DEFAULT_LIST_LIMIT")
    def validate_default_list_limit(cls, v: int):
        if v < 1:
            raise ValueError("DEFAULT_LIST_LIMIT must be at least 1")
        return v

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


@lru_cache
def get_settings():
    return Settings()

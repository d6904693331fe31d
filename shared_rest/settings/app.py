"""Application settings powered by Pydantic BaseSettings."""

from typing import Annotated, Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class RestSettings(BaseSettings):
    """Centralized environment configuration for the rest layer."""

    model_config = SettingsConfigDict(
        env_prefix="SHARED_REST_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    default_timeout_seconds: Annotated[float, Field(gt=0.0, le=300.0)] = 2.0
    user_agent: Annotated[str, Field(min_length=1, max_length=500)] = (
        "shared-rest/0.1"
    )
    follow_redirects: bool = True
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_json: bool = True


def get_settings() -> RestSettings:
    """Get a settings instance."""
    return RestSettings()

"""
Application configuration loaded from environment variables.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(
        env_file = ".env",
        env_file_encoding = "utf-8",
        extra = "ignore"
    )
    
    # Database
    database_url: str = Field(default="sqlite+aiosqlite:///./certflow.db", alias="DATABASE_URL")
    
    # Application
    app_name: str = Field(default="Certflow Verification Service", alias="APP_NAME")
    app_version: str = Field(default="0.1.0", alias="APP_VERSION")
    debug: bool = Field(default=False, alias="DEBUG")
    port: int = Field(default=8000, alias="PORT")

    # Logging
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    environment: str = Field(default="development", alias="ENVIRONMENT")

    # Workflow
    enforce_single_decision: bool = Field(
        default=False,
        alias="ENFORCE_SINGLE_DECISION",
        description="Guard decision writes with a status condition so a second decision fails"
    )

    # Dashboard
    api_base_url: str = Field(default="http://localhost:8000", alias="API_BASE_URL")


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()

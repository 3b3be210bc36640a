"""Configuration management for the Puzzle Engine."""

from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env", case_sensitive=False, extra="ignore", populate_by_name=True
    )

    # Metadata provider
    tmdb_api_key: Optional[str] = Field(None, validation_alias="TMDB_API_KEY")
    tmdb_base_url: str = Field("https://api.themoviedb.org/3", validation_alias="TMDB_BASE_URL")
    verification_timeout_seconds: float = Field(10.0, validation_alias="VERIFICATION_TIMEOUT_SECONDS")

    # Application Settings
    environment: str = Field("development", validation_alias="ENVIRONMENT")
    log_level: str = Field("INFO", validation_alias="LOG_LEVEL")
    api_host: str = Field("0.0.0.0", validation_alias="API_HOST")
    api_port: int = Field(8000, validation_alias="API_PORT")

    # Generation Settings
    quality_threshold: float = Field(35.0, validation_alias="QUALITY_THRESHOLD")
    max_generation_attempts: int = Field(10, validation_alias="MAX_GENERATION_ATTEMPTS")
    min_pool_size: int = Field(50, validation_alias="MIN_POOL_SIZE")
    min_filtered_pool_size: int = Field(100, validation_alias="MIN_FILTERED_POOL_SIZE")
    themes_path: Optional[str] = Field(None, validation_alias="THEMES_PATH")


def get_settings() -> Settings:
    """Get application settings instance."""
    return Settings()


# Global settings instance
settings = get_settings()

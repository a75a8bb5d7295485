"""
Configuration management for the concentration heatmap pipeline.

Uses pydantic-settings for type-safe configuration with environment variable support.
"""

from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class PipelineSettings(BaseSettings):
    """Data pipeline settings."""

    model_config = SettingsConfigDict(
        env_prefix="HEATMAP_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Input document (data_url wins over data_path when set)
    data_path: Path = Field(default=Path("./data/personnes.json"))
    data_url: Optional[str] = None

    # Output directory for static exports
    export_dir: Path = Field(default=Path("./public/data"))

    # Logging
    log_level: str = "INFO"
    log_file: Optional[Path] = None  # rotated file sink, off when unset
    log_rotation: str = "10 MB"
    log_retention: str = "1 week"

    # HTTP settings
    http_timeout: int = 30  # seconds
    http_max_retries: int = 3
    http_retry_delay: float = 1.0  # seconds

    # Diagnostics
    rejected_sample_size: int = 3  # rejected raw entries kept in the report

    # Presentation
    display_member_limit: int = 5  # members listed per cluster

    @field_validator("data_path", "export_dir", "log_file", mode="before")
    @classmethod
    def ensure_path(cls, v):
        """Convert string to Path."""
        return Path(v) if v is not None else None

    @field_validator("rejected_sample_size", "display_member_limit")
    @classmethod
    def non_negative(cls, v: int) -> int:
        if v < 0:
            raise ValueError("must be >= 0")
        return v


class APISettings(BaseSettings):
    """API server settings."""

    model_config = SettingsConfigDict(
        env_prefix="API_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    host: str = "0.0.0.0"
    port: int = 8000
    debug: bool = False
    cors_origins: str = "http://localhost:3000,http://localhost:5173"
    cache_ttl: int = 300  # seconds a load result is served before reloading

    @property
    def cors_origins_list(self) -> list[str]:
        """Parse CORS origins into a list."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]


class Settings(BaseSettings):
    """Main settings class that combines all settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    pipeline: PipelineSettings = Field(default_factory=PipelineSettings)
    api: APISettings = Field(default_factory=APISettings)


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return Settings()


# Convenience function for quick access
settings = get_settings()

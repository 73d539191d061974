"""
Centralized Configuration Management

This module loads and validates configuration for the channelframe service from
environment variables and .env files, organised into nested sections.
"""

from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class NeynarConfig(BaseSettings):
    """Neynar API configuration."""

    model_config = SettingsConfigDict(
        env_prefix="NEYNAR_", env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    # Left empty when unset; Neynar then rejects calls with 401
    api_key: str = ""
    base_url: str = "https://api.neynar.com/v2"
    timeout: float = 10.0


class RenderConfig(BaseSettings):
    """Frame rendering configuration."""

    model_config = SettingsConfigDict(
        env_prefix="RENDER_", env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    template_path: str = "public/template.png"
    placeholder_url: str = "https://www.svgrepo.com/show/508699/landscape-placeholder.svg"
    image_timeout: float = 10.0
    max_image_bytes: int = 10 * 1024 * 1024

    # Artwork box and nudge relative to the centred position
    max_artwork_size: int = 670
    shift_up: float = 28.5
    shift_right: float = 0.1

    cache_max_age: int = 300


class AppConfig(BaseSettings):
    """
    Centralized application configuration with nested sections.
    """

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    log_level: str = "INFO"
    log_format: str = "text"  # "text" or "json"
    log_file: Optional[str] = None

    host: str = "0.0.0.0"
    port: int = 8000

    # Nested configuration sections
    neynar: NeynarConfig = Field(default_factory=NeynarConfig)
    render: RenderConfig = Field(default_factory=RenderConfig)


def create_settings() -> AppConfig:
    """Create settings instance from environment variables and .env files only."""
    return AppConfig()


settings = create_settings()


def get_settings() -> AppConfig:
    """Get the global settings instance."""
    return settings

"""
Configuration management for Hang Tag Service.
Loads environment variables with validation.
"""

from typing import Literal
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # =============================================================================
    # Hang Tag Rendering Defaults
    # =============================================================================
    default_title_size: int = 11
    default_price_size: int = 24

    # =============================================================================
    # Archive & Static Files
    # =============================================================================
    archive_filename: str = "hang-tags.zip"
    static_dir: str = "public"

    # =============================================================================
    # Request Constraints
    # =============================================================================
    max_request_body_mb: int = 50
    cors_origins: list[str] = []

    # =============================================================================
    # Deployment Configuration
    # =============================================================================
    port: int = 8001
    log_level: Literal["debug", "info", "warning", "error"] = "info"
    environment: Literal["development", "staging", "production"] = "development"

    # =============================================================================
    # Computed Properties
    # =============================================================================
    @property
    def max_request_body_bytes(self) -> int:
        """Convert max request body size from MB to bytes."""
        return self.max_request_body_mb * 1024 * 1024

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == "production"

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.environment == "development"


# Global settings instance
settings = Settings()

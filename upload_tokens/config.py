"""Application configuration with Pydantic Settings.

This module provides centralized configuration management using pydantic-settings.
Settings are loaded from environment variables and .env files.

Examples:
    >>> from upload_tokens.config import get_settings
    >>> get_settings().UPLOAD_DISK
    'local'

Tests:
    - tests/unit/test_config.py
"""

from enum import Enum
from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Extensions a temporary upload may be previewed with.
DEFAULT_PREVIEW_MIMES: list[str] = [
    "png", "gif", "bmp", "svg", "wav", "mp4",
    "mov", "avi", "wmv", "mp3", "m4a",
    "jpg", "jpeg", "mpga", "webp", "wma",
]


class Environment(str, Enum):
    """Application environment."""

    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"


class Settings(BaseSettings):
    """Application settings for temporary uploads.

    Settings are loaded from environment variables and .env file.

    Attributes:
        UPLOAD_DISK: Identifier of the active storage disk
        UPLOAD_ROOT: Root directory of the local disk
        UPLOAD_DIRECTORY: Directory (inside the disk) holding temporary uploads
        UPLOAD_PREVIEW_MIMES: Extensions eligible for preview URLs
        SIGNING_SECRET_KEY: HS256 key for self-signed preview URLs
        PREVIEW_URL_TTL_MINUTES: Lifetime of self-signed preview URLs
        TEMPORARY_URL_TTL_HOURS: Lifetime of backend-issued temporary URLs
        APP_URL: Public base URL used to build preview links
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # Application Settings
    ENVIRONMENT: Environment = Field(
        default=Environment.DEVELOPMENT,
        description="Application environment",
    )
    DEBUG: bool = Field(
        default=True,
        description="Enable debug mode",
    )
    APP_URL: str = Field(
        default="http://localhost:8000",
        description="Public base URL of this service",
    )

    # Storage
    UPLOAD_DISK: str = Field(
        default="local",
        description="Active storage disk identifier",
    )
    UPLOAD_ROOT: str = Field(
        default="./storage/app",
        description="Root directory of the local disk",
    )
    UPLOAD_DIRECTORY: str = Field(
        default="livewire-tmp",
        description="Directory holding temporary uploads",
    )
    UPLOAD_PREVIEW_MIMES: list[str] = Field(
        default_factory=lambda: list(DEFAULT_PREVIEW_MIMES),
        description="Extensions eligible for preview",
    )

    # Signing
    SIGNING_SECRET_KEY: str = Field(
        default="change-me-in-production",
        description="HS256 key for signed preview URLs",
    )
    PREVIEW_URL_TTL_MINUTES: int = Field(
        default=30,
        description="Self-signed preview URL lifetime (minutes)",
        ge=1,
    )
    TEMPORARY_URL_TTL_HOURS: int = Field(
        default=24,
        description="Backend temporary URL lifetime (hours)",
        ge=1,
    )

    @field_validator("UPLOAD_DIRECTORY")
    @classmethod
    def validate_directory(cls, v: str) -> str:
        """Strip surrounding separators from the upload directory."""
        v = v.strip("/")
        if not v:
            raise ValueError("UPLOAD_DIRECTORY must not be empty")
        return v

    @field_validator("UPLOAD_PREVIEW_MIMES")
    @classmethod
    def validate_preview_mimes(cls, v: list[str]) -> list[str]:
        """Normalize preview extensions to lower case without dots."""
        return [ext.lower().lstrip(".") for ext in v]

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.ENVIRONMENT == Environment.PRODUCTION


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    Returns:
        Settings: The application settings.
    """
    return Settings()

"""Storage configuration model."""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator

from upload_tokens.config import DEFAULT_PREVIEW_MIMES, Settings


class StorageConfig(BaseModel):
    """Configuration for temporary upload storage.

    Passed explicitly to the codec, sidecar store, resolver and token
    deserializer so none of them read process-wide settings.

    Attributes:
        disk: Identifier of the active storage disk.
        root: Root directory of the local disk.
        directory: Directory (inside the disk) holding temporary uploads.
        preview_mimes: Lower-cased extensions eligible for preview.
        app_url: Base URL for self-signed preview links.
        signing_key: HS256 key for self-signed preview links.
        preview_url_ttl_minutes: Self-signed preview link lifetime.
        temporary_url_ttl_hours: Backend-issued temporary URL lifetime.
    """

    disk: str = Field(default="local", description="Active storage disk")
    root: str = Field(default="./storage/app", description="Local disk root directory")
    directory: str = Field(default="livewire-tmp", description="Temporary upload directory")
    preview_mimes: list[str] = Field(
        default_factory=lambda: list(DEFAULT_PREVIEW_MIMES),
        description="Extensions eligible for preview",
    )
    app_url: str = Field(default="http://localhost:8000", description="Public base URL")
    signing_key: str = Field(default="change-me-in-production", description="Preview URL signing key")
    preview_url_ttl_minutes: int = Field(default=30, ge=1)
    temporary_url_ttl_hours: int = Field(default=24, ge=1)

    @field_validator("directory")
    @classmethod
    def validate_directory(cls, v: str) -> str:
        """Strip surrounding separators from the temporary directory."""
        v = v.strip("/")
        if not v:
            raise ValueError("directory must not be empty")
        return v

    @field_validator("preview_mimes")
    @classmethod
    def validate_preview_mimes(cls, v: list[str]) -> list[str]:
        """Normalize preview extensions to lower case without dots."""
        return [ext.lower().lstrip(".") for ext in v]

    @classmethod
    def from_settings(cls, settings: Settings) -> "StorageConfig":
        """Build a storage config from application settings."""
        return cls(
            disk=settings.UPLOAD_DISK,
            root=settings.UPLOAD_ROOT,
            directory=settings.UPLOAD_DIRECTORY,
            preview_mimes=settings.UPLOAD_PREVIEW_MIMES,
            app_url=settings.APP_URL,
            signing_key=settings.SIGNING_SECRET_KEY,
            preview_url_ttl_minutes=settings.PREVIEW_URL_TTL_MINUTES,
            temporary_url_ttl_hours=settings.TEMPORARY_URL_TTL_HOURS,
        )

    def path(self, name: str = "") -> str:
        """Disk-relative path of a file inside the temporary directory."""
        return f"{self.directory}/{name}" if name else self.directory

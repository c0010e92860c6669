"""
MediaRelay Backend — Application Configuration
================================================

What:  Centralized configuration management using Pydantic Settings.
How:   Pydantic Settings reads environment variables (or a .env file), coerces
       types and exposes a `settings` object. Upload limits are frozen into an
       UploadLimits value at app creation and injected from there; request
       handling code never reads these fields directly.
Who:   Imported by main.py (app factory, logging, CORS) and the remote store.
When:  Loaded once at module import time.

Upload limit parsing:
    MAX_UPLOAD_SIZE_MB   finite number > 0, otherwise the 2 MB default
    MAX_UPLOAD_FILES     integer > 0, otherwise the default of 5
    ALLOWED_MIME_TYPES   comma-separated, case-insensitive; empty list →
                         jpeg/png/webp/gif
"""

import math
from typing import Any, List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings

from mediarelay.models.upload import (
    DEFAULT_MAX_FILE_SIZE_MB,
    DEFAULT_MAX_FILES,
    DEFAULT_MIME_TYPES,
    UploadLimits,
)


def _split_csv(value: str) -> List[str]:
    return [part.strip() for part in value.split(",") if part.strip()]


def _media_types(value: str) -> List[str]:
    # Compared against lowercased Content-Type headers
    return [part.lower() for part in _split_csv(value)]


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings have development defaults. Production deployments must
    provide the Cloudinary credentials.
    """

    # ── Upload Limits ─────────────────────────────────────────────────────
    max_upload_size_mb: float = Field(default=DEFAULT_MAX_FILE_SIZE_MB)
    max_upload_files: int = Field(default=DEFAULT_MAX_FILES)
    allowed_mime_types: str = Field(default="")

    @field_validator("max_upload_size_mb", mode="before")
    @classmethod
    def fallback_size(cls, v: Any) -> float:
        """Non-numeric, non-finite or non-positive sizes fall back to the default."""
        try:
            parsed = float(v)
        except (TypeError, ValueError):
            return float(DEFAULT_MAX_FILE_SIZE_MB)
        if not math.isfinite(parsed) or parsed <= 0:
            return float(DEFAULT_MAX_FILE_SIZE_MB)
        return parsed

    @field_validator("max_upload_files", mode="before")
    @classmethod
    def fallback_count(cls, v: Any) -> int:
        """Only positive integers are accepted; '2.5' or '0' use the default."""
        try:
            parsed = float(v)
        except (TypeError, ValueError):
            return DEFAULT_MAX_FILES
        if not parsed.is_integer() or parsed <= 0:
            return DEFAULT_MAX_FILES
        return int(parsed)

    @property
    def allowed_mime_types_list(self) -> List[str]:
        return _media_types(self.allowed_mime_types) or list(DEFAULT_MIME_TYPES)

    def upload_limits(self) -> UploadLimits:
        """Freeze the upload limits into the value injected into services."""
        return UploadLimits(
            max_file_bytes=int(self.max_upload_size_mb * 1024 * 1024),
            max_files=self.max_upload_files,
            allowed_mime_types=frozenset(self.allowed_mime_types_list),
        )

    # ── Cloudinary ────────────────────────────────────────────────────────
    cloudinary_cloud_name: str = Field(default="")
    cloudinary_api_key: str = Field(default="")
    cloudinary_api_secret: str = Field(default="")

    # Destination folder for uploads; empty means the account default
    cloudinary_folder: Optional[str] = Field(default=None)

    # Client-side timeout in seconds, handed to the SDK untouched
    cloudinary_timeout: Optional[float] = Field(default=None, gt=0)

    @field_validator("cloudinary_folder", mode="before")
    @classmethod
    def blank_folder_is_none(cls, v: Any) -> Optional[str]:
        if v is None or (isinstance(v, str) and not v.strip()):
            return None
        return v

    # ── CORS ──────────────────────────────────────────────────────────────
    # Comma-separated origins; "*" allows every origin
    allowed_origins: str = Field(default="*")

    @property
    def allowed_origins_list(self) -> List[str]:
        return _split_csv(self.allowed_origins) or ["*"]

    # ── Server ────────────────────────────────────────────────────────────
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=8080, ge=1, le=65535)
    service_name: str = Field(default="mediarelay")
    log_level: str = Field(default="INFO")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensures log level is a valid Python logging level name."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper = v.upper()
        if upper not in valid_levels:
            raise ValueError(f"Invalid log_level '{v}'. Must be one of: {valid_levels}")
        return upper

    # ── Pydantic Settings Config ──────────────────────────────────────────
    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "env_ignore_empty": True,
        "extra": "ignore",
    }

    def validate_required_for_production(self) -> None:
        """
        Checks that the remote store credentials are configured.

        Called during app startup (lifespan). Raises ValueError listing every
        missing variable.
        """
        missing = [
            name
            for name, value in (
                ("CLOUDINARY_CLOUD_NAME", self.cloudinary_cloud_name),
                ("CLOUDINARY_API_KEY", self.cloudinary_api_key),
                ("CLOUDINARY_API_SECRET", self.cloudinary_api_secret),
            )
            if not value
        ]
        if missing:
            raise ValueError(
                "Configuration validation failed:\n"
                + "\n".join(f"  - {name} is not set" for name in missing)
            )


settings = Settings()

"""Configuration models describing randimg settings."""

from __future__ import annotations

from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_EXTENSIONS = ["jpg", "jpeg", "png", "gif", "webp", "avif"]
DEFAULT_PREFERENCES = {
    "mobile": "portrait",
    "tablet": "landscape",
    "desktop": "landscape",
}
LogLevel = Literal["CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"]


class RandimgBaseModel(BaseModel):
    """Shared configuration for randimg Pydantic models."""

    model_config = ConfigDict(extra="forbid")


class ImageSettings(RandimgBaseModel):
    """Settings describing where images are discovered.

    Attributes:
        directory: Directory scanned (non-recursively) for images.
        extensions: Accepted file extensions, matched case-insensitively.
    """

    directory: str = "images"
    extensions: List[str] = Field(default_factory=lambda: list(DEFAULT_EXTENSIONS))

    @field_validator("extensions")
    @classmethod
    def _normalize_extensions(cls, value: List[str]) -> List[str]:
        normalized: List[str] = []
        for entry in value:
            ext = str(entry).strip().lower().lstrip(".")
            if ext and ext not in normalized:
                normalized.append(ext)
        return normalized


class CacheSettings(RandimgBaseModel):
    """Metadata cache options.

    Attributes:
        directory: Directory holding the persisted snapshot.
        key: Fixed identifier of the snapshot record.
        ttl_seconds: Lifetime of a snapshot before it is rebuilt.
    """

    directory: str = "~/.randimg/cache"
    key: str = "image_info"
    ttl_seconds: int = Field(default=86_400, ge=0)


class SelectionSettings(RandimgBaseModel):
    """Image selection policy.

    Attributes:
        strict_mode: Return nothing rather than fall back to non-preferred images.
        preferences: Preferred orientation for each device type.
    """

    strict_mode: bool = False
    preferences: Dict[str, Literal["portrait", "landscape"]] = Field(
        default_factory=lambda: dict(DEFAULT_PREFERENCES)
    )


class LoggingSettings(RandimgBaseModel):
    """Runtime logging configuration.

    Attributes:
        level: Logging verbosity level.
        file: Optional log file path; console-only when unset.
        max_size_mb: Maximum log size before rotation.
        backup_count: Number of historical log files to retain.
    """

    level: LogLevel = "WARNING"
    file: Optional[str] = None
    max_size_mb: int = 100
    backup_count: int = 5

    @field_validator("level", mode="before")
    @classmethod
    def _upper_level(cls, value: object) -> object:
        return value.strip().upper() if isinstance(value, str) else value


class ServerSettings(RandimgBaseModel):
    """HTTP server bind options."""

    host: str = "127.0.0.1"
    port: int = 8000


class RandimgConfig(RandimgBaseModel):
    """Top-level configuration struct for randimg.

    Attributes:
        images: Image discovery settings.
        cache: Metadata cache settings.
        selection: Orientation selection policy.
        logging: Logging configuration.
        server: HTTP server settings.
    """

    images: ImageSettings = Field(default_factory=ImageSettings)
    cache: CacheSettings = Field(default_factory=CacheSettings)
    selection: SelectionSettings = Field(default_factory=SelectionSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    server: ServerSettings = Field(default_factory=ServerSettings)


__all__ = [
    "DEFAULT_EXTENSIONS",
    "DEFAULT_PREFERENCES",
    "RandimgBaseModel",
    "ImageSettings",
    "CacheSettings",
    "SelectionSettings",
    "LoggingSettings",
    "ServerSettings",
    "RandimgConfig",
]

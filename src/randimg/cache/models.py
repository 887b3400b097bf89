"""Cached image metadata models."""

from __future__ import annotations

from datetime import datetime, timedelta
from enum import Enum
from typing import Dict

from pydantic import AwareDatetime, BaseModel, ConfigDict, Field, computed_field, model_validator


class Orientation(str, Enum):
    """Orientation derived from an image's pixel dimensions."""

    PORTRAIT = "portrait"
    LANDSCAPE = "landscape"

    @classmethod
    def from_size(cls, width: int, height: int) -> "Orientation":
        """Return portrait when taller than wide, landscape otherwise (squares included)."""
        return cls.PORTRAIT if height > width else cls.LANDSCAPE


class ImageRecord(BaseModel):
    """Metadata describing one discovered image file.

    Orientation and aspect ratio are computed from the stored dimensions, so
    stale values carried in a persisted payload are ignored on load.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    path: str
    width: int = Field(gt=0)
    height: int = Field(gt=0)
    modified_at: AwareDatetime

    @computed_field  # type: ignore[prop-decorator]
    @property
    def orientation(self) -> Orientation:
        return Orientation.from_size(self.width, self.height)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def aspect_ratio(self) -> float:
        return round(self.height / self.width, 2)


class MetadataSnapshot(BaseModel):
    """Full set of image metadata captured by one directory scan."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    directory: str
    created_at: AwareDatetime
    expires_at: AwareDatetime
    records: Dict[str, ImageRecord] = Field(default_factory=dict)

    @model_validator(mode="after")
    def _keys_match_paths(self) -> "MetadataSnapshot":
        for key, record in self.records.items():
            if key != record.path:
                raise ValueError(f"record keyed {key!r} describes {record.path!r}")
        return self

    @classmethod
    def build(
        cls,
        directory: str,
        records: Dict[str, ImageRecord],
        *,
        now: datetime,
        ttl_seconds: int,
    ) -> "MetadataSnapshot":
        """Return a snapshot created at `now` that expires after `ttl_seconds`."""
        return cls(
            directory=directory,
            created_at=now,
            expires_at=now + timedelta(seconds=ttl_seconds),
            records=records,
        )

    def is_expired(self, now: datetime) -> bool:
        """Return True once `now` has reached the expiry timestamp."""
        return now >= self.expires_at


__all__ = ["Orientation", "ImageRecord", "MetadataSnapshot"]

"""Snapshot persistence for the image metadata cache."""

from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path

from pydantic import ValidationError

from .errors import CacheError, MissingSnapshotError, SnapshotCorruptError
from .models import ImageRecord, MetadataSnapshot, Orientation

DEFAULT_CACHE_KEY = "image_info"


class SnapshotRepository:
    """Persist a single metadata snapshot per cache key as a JSON document."""

    def __init__(self, directory: Path, default_key: str = DEFAULT_CACHE_KEY) -> None:
        """Initialize the repository.

        Args:
            directory: Directory that holds snapshot files.
            default_key: Key used when callers do not pass one.
        """
        self._directory = directory.expanduser()
        self._default_key = default_key

    @property
    def directory(self) -> Path:
        """Return the directory that stores snapshot files."""
        return self._directory

    def path_for(self, key: str | None = None) -> Path:
        """Return the snapshot file path for a cache key.

        Args:
            key: Cache key; defaults to the repository's default key.

        Returns:
            Path: Location of the JSON document.
        """
        return self._directory / f"{key or self._default_key}.json"

    def load(self, key: str | None = None) -> MetadataSnapshot:
        """Load the snapshot stored under `key`.

        Args:
            key: Cache key; defaults to the repository's default key.

        Returns:
            MetadataSnapshot: Deserialized snapshot.

        Raises:
            MissingSnapshotError: If nothing is stored under the key.
            SnapshotCorruptError: If the stored document cannot be parsed.
        """
        path = self.path_for(key)
        try:
            raw = path.read_text(encoding="utf-8")
        except FileNotFoundError as exc:
            raise MissingSnapshotError(f"No snapshot found at {path}") from exc
        except (OSError, UnicodeDecodeError) as exc:
            raise SnapshotCorruptError(f"Unreadable snapshot at {path}: {exc}") from exc

        try:
            return MetadataSnapshot.model_validate(json.loads(raw))
        except (json.JSONDecodeError, ValidationError) as exc:
            raise SnapshotCorruptError(f"Invalid snapshot data at {path}: {exc}") from exc

    def save(self, snapshot: MetadataSnapshot, key: str | None = None) -> Path:
        """Persist `snapshot`, atomically replacing any previous one.

        The document is written to a temporary file in the cache directory and
        moved into place with `os.replace`, so readers observe either the old
        or the new snapshot.

        Args:
            snapshot: Snapshot to serialize.
            key: Cache key; defaults to the repository's default key.

        Returns:
            Path: Location of the written document.
        """
        target = self.path_for(key)
        target.parent.mkdir(parents=True, exist_ok=True)
        payload = json.dumps(snapshot.model_dump(mode="json"), indent=2)

        fd, tmp_name = tempfile.mkstemp(prefix=f".{target.stem}.", suffix=".tmp", dir=target.parent)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write(payload)
                fh.flush()
                os.fsync(fh.fileno())
            os.replace(tmp_name, target)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
        return target

    def delete(self, key: str | None = None) -> bool:
        """Remove the snapshot stored under `key`.

        Returns:
            bool: True if a snapshot was removed, False if none existed.
        """
        try:
            self.path_for(key).unlink()
        except FileNotFoundError:
            return False
        return True


__all__ = [
    "SnapshotRepository",
    "DEFAULT_CACHE_KEY",
    "MetadataSnapshot",
    "ImageRecord",
    "Orientation",
    "CacheError",
    "MissingSnapshotError",
    "SnapshotCorruptError",
]

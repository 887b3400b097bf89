"""Metadata store: validate, reuse, or rebuild the image snapshot."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, Dict, Optional

from randimg.scanning import (
    DimensionReader,
    DirectoryScanner,
    DirectoryUnavailableError,
    ImageReadError,
    file_state,
)

from . import SnapshotRepository
from .errors import MissingSnapshotError, SnapshotCorruptError
from .models import ImageRecord, MetadataSnapshot

LOGGER = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class MetadataStore:
    """Serve a validated metadata snapshot for one image directory.

    A persisted snapshot is reused while it is unexpired and every file it
    references still exists with an unchanged modification time. Otherwise
    the directory is rescanned and the snapshot replaced wholesale.
    """

    def __init__(
        self,
        directory: Path,
        repository: SnapshotRepository,
        *,
        ttl_seconds: int,
        scanner: DirectoryScanner,
        reader: Optional[DimensionReader] = None,
        clock: Optional[Clock] = None,
    ) -> None:
        self.directory = directory.expanduser().resolve()
        self.repository = repository
        self.ttl_seconds = ttl_seconds
        self.scanner = scanner
        self.reader = reader or DimensionReader()
        self._clock = clock or utc_now

    def get_snapshot(self) -> MetadataSnapshot:
        """Return a fresh snapshot, rebuilding it when the cached one is stale."""
        try:
            snapshot = self.repository.load()
        except MissingSnapshotError:
            LOGGER.info("No cached image metadata; rebuilding.")
            return self.rebuild()
        except SnapshotCorruptError as exc:
            LOGGER.warning("Discarding corrupt image cache: %s", exc)
            return self.rebuild()

        reason = self.check(snapshot)
        if reason is not None:
            LOGGER.info("Image cache is stale (%s); rebuilding.", reason)
            return self.rebuild()

        LOGGER.debug("Using valid image cache with %d record(s).", len(snapshot.records))
        return snapshot

    def check(self, snapshot: MetadataSnapshot) -> Optional[str]:
        """Return why `snapshot` can no longer be served, or None if it is fresh."""
        if snapshot.is_expired(self._clock()):
            return "expired"
        if snapshot.directory != str(self.directory):
            return "directory changed"
        for path, record in snapshot.records.items():
            live = file_state(Path(path))
            if live is None:
                return f"missing: {path}"
            if live != record.modified_at:
                return f"modified: {path}"
        return None

    def rebuild(self) -> MetadataSnapshot:
        """Rescan the directory and persist a brand-new snapshot."""
        records: Dict[str, ImageRecord] = {}
        try:
            for image in self.scanner.scan(self.directory):
                try:
                    width, height = self.reader.read(image.path)
                except ImageReadError as exc:
                    LOGGER.warning("Skipping unreadable image %s", exc)
                    continue
                key = str(image.path)
                records[key] = ImageRecord(
                    path=key,
                    width=width,
                    height=height,
                    modified_at=image.modified_at,
                )
        except DirectoryUnavailableError as exc:
            LOGGER.error("%s", exc)

        LOGGER.info("Found %d image(s) in %s", len(records), self.directory)
        snapshot = MetadataSnapshot.build(
            str(self.directory),
            records,
            now=self._clock(),
            ttl_seconds=self.ttl_seconds,
        )
        try:
            self.repository.save(snapshot)
        except OSError as exc:
            LOGGER.error("Could not persist image cache: %s", exc)
        return snapshot

    def invalidate(self) -> bool:
        """Delete the persisted snapshot so the next access rebuilds it.

        Returns:
            bool: True if a snapshot was removed.
        """
        removed = self.repository.delete()
        LOGGER.info("Image cache %s.", "cleared" if removed else "already empty")
        return removed


__all__ = ["MetadataStore", "Clock", "utc_now"]

"""Image file discovery utilities."""

from __future__ import annotations

import os
import stat
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable, Iterator

from .errors import DirectoryUnavailableError


def modified_at(info: os.stat_result) -> datetime:
    """Return the modification time of a stat result as an aware UTC datetime."""
    return datetime.fromtimestamp(info.st_mtime, tz=timezone.utc)


@dataclass(frozen=True, slots=True)
class ImageFile:
    """A candidate image found in the scanned directory.

    Attributes:
        path: Absolute path to the file.
        modified_at: Modification time observed during the scan.
    """

    path: Path
    modified_at: datetime


class DirectoryScanner:
    """List image files directly inside a directory, filtered by extension."""

    def __init__(self, extensions: Iterable[str]) -> None:
        self.extensions = frozenset(ext.lower().lstrip(".") for ext in extensions)

    def accepts(self, name: str) -> bool:
        """Return True when `name` carries one of the accepted extensions."""
        suffix = Path(name).suffix
        return bool(suffix) and suffix[1:].lower() in self.extensions

    def scan(self, directory: Path) -> Iterator[ImageFile]:
        """Yield readable regular image files in `directory` (non-recursive).

        Raises:
            DirectoryUnavailableError: If the directory is missing or unreadable.
        """
        root = directory.expanduser().resolve()
        try:
            entries = sorted(root.iterdir())
        except OSError as exc:
            raise DirectoryUnavailableError(f"Image directory not available: {root}") from exc

        for path in entries:
            if not self.accepts(path.name):
                continue
            try:
                info = path.stat()
            except OSError:
                continue
            if not stat.S_ISREG(info.st_mode) or not os.access(path, os.R_OK):
                continue
            yield ImageFile(path=path, modified_at=modified_at(info))


def file_state(path: Path) -> datetime | None:
    """Return the live modification time of `path`, or None if it is gone."""
    try:
        return modified_at(path.stat())
    except OSError:
        return None


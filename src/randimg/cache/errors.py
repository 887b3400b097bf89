"""Snapshot cache errors."""


class CacheError(Exception):
    """Base exception for snapshot repository operations."""


class MissingSnapshotError(CacheError):
    """Raised when no snapshot has been persisted yet."""


class SnapshotCorruptError(CacheError):
    """Raised when a persisted snapshot cannot be parsed."""

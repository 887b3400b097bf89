"""Image discovery and dimension extraction."""

from .discovery import DirectoryScanner, ImageFile, file_state
from .errors import DirectoryUnavailableError, ImageReadError, ScanError
from .extractors import DimensionReader

__all__ = [
    "DirectoryScanner",
    "DimensionReader",
    "ImageFile",
    "file_state",
    "ScanError",
    "DirectoryUnavailableError",
    "ImageReadError",
]

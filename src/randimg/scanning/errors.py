"""Directory scanning errors."""


class ScanError(Exception):
    """Base exception for image discovery."""


class DirectoryUnavailableError(ScanError):
    """Raised when the image directory is missing or cannot be listed."""


class ImageReadError(ScanError):
    """Raised when an image's pixel dimensions cannot be read."""

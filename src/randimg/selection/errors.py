"""Selection errors."""


class ImageNotFoundError(Exception):
    """Raised when there is no image to serve for a request."""


class NoImagesAvailableError(ImageNotFoundError):
    """Raised when the snapshot holds no images at all."""


class NoMatchingImagesError(ImageNotFoundError):
    """Raised in strict mode when no image has the preferred orientation."""

"""Device-aware image selection."""

from .errors import ImageNotFoundError, NoImagesAvailableError, NoMatchingImagesError
from .policy import DeviceType, OrientationPolicy
from .selector import Selector

__all__ = [
    "DeviceType",
    "OrientationPolicy",
    "Selector",
    "ImageNotFoundError",
    "NoImagesAvailableError",
    "NoMatchingImagesError",
]

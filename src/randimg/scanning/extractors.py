"""Image dimension extraction."""

from __future__ import annotations

from pathlib import Path
from typing import Tuple

from PIL import Image, UnidentifiedImageError

from .errors import ImageReadError


class DimensionReader:
    """Read pixel dimensions from image headers using Pillow."""

    def read(self, path: Path) -> Tuple[int, int]:
        """Return the `(width, height)` of the image at `path`.

        Only the header is parsed; pixel data is never decoded.

        Raises:
            ImageReadError: If the file is not a readable image or reports an
                empty size.
        """
        try:
            with Image.open(path) as img:
                width, height = img.size
        except (OSError, UnidentifiedImageError, Image.DecompressionBombError) as exc:
            raise ImageReadError(f"{path}: {exc}") from exc

        if width <= 0 or height <= 0:
            raise ImageReadError(f"{path}: invalid dimensions {width}x{height}")
        return width, height

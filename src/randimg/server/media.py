"""Response helpers for served images."""

from __future__ import annotations

import json
from pathlib import Path

from randimg.service import Selection

DEFAULT_MEDIA_TYPE = "image/jpeg"
MEDIA_TYPES = {
    "jpg": "image/jpeg",
    "jpeg": "image/jpeg",
    "png": "image/png",
    "gif": "image/gif",
    "webp": "image/webp",
    "avif": "image/avif",
}
INFO_HEADER = "X-Image-Info"


def media_type_for(path: Path) -> str:
    """Return the content type for an image path based on its extension."""
    return MEDIA_TYPES.get(path.suffix.lower().lstrip("."), DEFAULT_MEDIA_TYPE)


def info_headers(selection: Selection) -> dict[str, str]:
    return {INFO_HEADER: json.dumps(selection.info)}


__all__ = ["MEDIA_TYPES", "DEFAULT_MEDIA_TYPE", "INFO_HEADER", "media_type_for", "info_headers"]

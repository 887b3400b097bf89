"""Tests for the image service facade and logging setup."""

from __future__ import annotations

import logging
import random
from pathlib import Path

import pytest
from PIL import Image

from randimg.config import build_config
from randimg.config.models import LoggingSettings
from randimg.logging_config import configure_logging
from randimg.selection import DeviceType, NoMatchingImagesError
from randimg.server.media import media_type_for
from randimg.service import ImageService


def _service(tmp_path: Path, **overrides: object) -> ImageService:
    config = build_config(
        cli={
            "images.directory": str(tmp_path / "images"),
            "cache.directory": str(tmp_path / "cache"),
            **overrides,
        },
    )
    return ImageService.from_config(config, rng=random.Random(1))


def test_pick_returns_selection_with_record(tmp_path: Path) -> None:
    images = tmp_path / "images"
    images.mkdir()
    Image.new("RGB", (30, 60)).save(images / "tall.gif")

    selection = _service(tmp_path).pick(DeviceType.MOBILE)

    assert selection.path == (images / "tall.gif").resolve()
    assert selection.device_type == "mobile"
    assert selection.info["aspect_ratio"] == pytest.approx(2.0)


def test_configured_preferences_and_strict_mode(tmp_path: Path) -> None:
    images = tmp_path / "images"
    images.mkdir()
    Image.new("RGB", (60, 30)).save(images / "wide.png")
    service = _service(
        tmp_path,
        **{"selection.strict_mode": True, "selection.preferences": {"desktop": "portrait"}},
    )

    with pytest.raises(NoMatchingImagesError):
        service.pick("desktop")
    assert service.pick("tablet").record.width == 60


def test_invalidate_then_rebuild(tmp_path: Path) -> None:
    (tmp_path / "images").mkdir()
    service = _service(tmp_path)
    service.snapshot()

    assert service.invalidate() is True
    assert service.rebuild().records == {}


@pytest.mark.parametrize(
    ("name", "expected"),
    [
        ("a.jpg", "image/jpeg"),
        ("a.JPEG", "image/jpeg"),
        ("a.png", "image/png"),
        ("a.gif", "image/gif"),
        ("a.webp", "image/webp"),
        ("a.avif", "image/avif"),
        ("a.bmp", "image/jpeg"),
    ],
)
def test_media_type_for(name: str, expected: str) -> None:
    assert media_type_for(Path(name)) == expected


def test_configure_logging_writes_file(tmp_path: Path) -> None:
    log_file = tmp_path / "logs" / "randimg.log"

    logger = configure_logging(LoggingSettings(level="INFO", file=str(log_file)))
    logging.getLogger("randimg.test").info("served image")
    configure_logging(LoggingSettings())

    assert logger.level == logging.WARNING
    assert "[INFO] randimg.test: served image" in log_file.read_text(encoding="utf-8")
    assert sum(isinstance(h, logging.FileHandler) for h in logger.handlers) == 0

"""Tests covering image discovery and dimension reading."""

from __future__ import annotations

from pathlib import Path

import pytest
from PIL import Image

from randimg.config.models import DEFAULT_EXTENSIONS
from randimg.scanning import (
    DimensionReader,
    DirectoryScanner,
    DirectoryUnavailableError,
    ImageReadError,
    file_state,
)


def test_directory_scanner_filters_by_extension(tmp_path: Path) -> None:
    Image.new("RGB", (4, 2)).save(tmp_path / "wide.png")
    Image.new("RGB", (2, 4)).save(tmp_path / "TALL.JPG", format="JPEG")
    (tmp_path / "notes.txt").write_text("not an image", encoding="utf-8")
    (tmp_path / "README").write_text("no suffix", encoding="utf-8")
    nested = tmp_path / "nested.png"
    nested.mkdir()
    (nested / "inner.png").write_bytes(b"")

    scanner = DirectoryScanner(DEFAULT_EXTENSIONS)
    names = sorted(item.path.name for item in scanner.scan(tmp_path))

    assert names == ["TALL.JPG", "wide.png"]


def test_directory_scanner_records_modification_time(tmp_path: Path) -> None:
    image = tmp_path / "photo.gif"
    Image.new("RGB", (3, 3)).save(image)

    (found,) = list(DirectoryScanner(["gif"]).scan(tmp_path))

    assert found.path == image.resolve()
    assert found.modified_at == file_state(image)
    assert found.modified_at.tzinfo is not None


def test_directory_scanner_respects_configured_extensions(tmp_path: Path) -> None:
    Image.new("RGB", (4, 2)).save(tmp_path / "a.png")
    Image.new("RGB", (4, 2)).save(tmp_path / "b.gif")

    scanner = DirectoryScanner([".PNG"])

    assert [item.path.name for item in scanner.scan(tmp_path)] == ["a.png"]


def test_directory_scanner_missing_directory_raises(tmp_path: Path) -> None:
    scanner = DirectoryScanner(DEFAULT_EXTENSIONS)

    with pytest.raises(DirectoryUnavailableError):
        list(scanner.scan(tmp_path / "missing"))


def test_dimension_reader_returns_width_and_height(tmp_path: Path) -> None:
    image = tmp_path / "image.png"
    Image.new("RGB", (32, 16), color="red").save(image)

    assert DimensionReader().read(image) == (32, 16)


def test_dimension_reader_rejects_non_images(tmp_path: Path) -> None:
    fake = tmp_path / "broken.jpg"
    fake.write_text("definitely not a jpeg", encoding="utf-8")

    with pytest.raises(ImageReadError):
        DimensionReader().read(fake)


def test_file_state_for_missing_file_is_none(tmp_path: Path) -> None:
    assert file_state(tmp_path / "gone.png") is None

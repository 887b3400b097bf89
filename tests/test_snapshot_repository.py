"""Snapshot repository and cache model tests."""

from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path

import pytest
from pydantic import ValidationError

from randimg.cache import (
    MissingSnapshotError,
    SnapshotCorruptError,
    SnapshotRepository,
)
from randimg.cache.models import ImageRecord, MetadataSnapshot, Orientation

NOW = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


def _snapshot(tmp_path: Path) -> MetadataSnapshot:
    """Return a sample snapshot with one portrait and one landscape record.

    Args:
        tmp_path: Temporary directory provided by pytest.

    Returns:
        MetadataSnapshot: Snapshot expiring one hour after `NOW`.
    """
    tall = ImageRecord(path=str(tmp_path / "tall.png"), width=10, height=20, modified_at=NOW)
    wide = ImageRecord(path=str(tmp_path / "wide.png"), width=30, height=20, modified_at=NOW)
    return MetadataSnapshot.build(
        str(tmp_path),
        {tall.path: tall, wide.path: wide},
        now=NOW,
        ttl_seconds=3600,
    )


@pytest.mark.parametrize(
    ("width", "height", "expected"),
    [
        (10, 20, Orientation.PORTRAIT),
        (20, 10, Orientation.LANDSCAPE),
        (15, 15, Orientation.LANDSCAPE),
    ],
)
def test_orientation_follows_dimensions(width: int, height: int, expected: Orientation) -> None:
    record = ImageRecord(path="x.png", width=width, height=height, modified_at=NOW)

    assert record.orientation is expected


def test_aspect_ratio_is_rounded_height_over_width() -> None:
    record = ImageRecord(path="x.png", width=3, height=4, modified_at=NOW)

    assert record.aspect_ratio == pytest.approx(1.33)


def test_stored_orientation_is_recomputed_on_load() -> None:
    record = ImageRecord.model_validate(
        {
            "path": "x.png",
            "width": 40,
            "height": 10,
            "modified_at": NOW.isoformat(),
            "orientation": "portrait",
            "aspect_ratio": 9.0,
        }
    )

    assert record.orientation is Orientation.LANDSCAPE
    assert record.aspect_ratio == pytest.approx(0.25)


def test_snapshot_expiry_boundary() -> None:
    snapshot = MetadataSnapshot.build("/images", {}, now=NOW, ttl_seconds=60)

    assert snapshot.expires_at == datetime(2024, 5, 1, 12, 1, tzinfo=timezone.utc)
    assert not snapshot.is_expired(NOW)
    assert snapshot.is_expired(snapshot.expires_at)


def test_save_and_load_round_trip(tmp_path: Path) -> None:
    """Ensure save followed by load returns an equal snapshot.

    Args:
        tmp_path: Temporary directory provided by pytest.
    """
    repo = SnapshotRepository(tmp_path / "cache")
    snapshot = _snapshot(tmp_path)

    path = repo.save(snapshot)
    loaded = repo.load()

    assert path == tmp_path / "cache" / "image_info.json"
    assert loaded == snapshot
    stored = json.loads(path.read_text(encoding="utf-8"))
    assert stored["records"][str(tmp_path / "tall.png")]["orientation"] == "portrait"


def test_save_replaces_previous_snapshot_without_leftovers(tmp_path: Path) -> None:
    repo = SnapshotRepository(tmp_path / "cache")
    repo.save(_snapshot(tmp_path))

    empty = MetadataSnapshot.build(str(tmp_path), {}, now=NOW, ttl_seconds=10)
    repo.save(empty)

    assert repo.load().records == {}
    assert [p.name for p in (tmp_path / "cache").iterdir()] == ["image_info.json"]


def test_keys_are_stored_independently(tmp_path: Path) -> None:
    repo = SnapshotRepository(tmp_path)
    repo.save(_snapshot(tmp_path), key="gallery")

    assert repo.path_for("gallery").exists()
    with pytest.raises(MissingSnapshotError):
        repo.load()


def test_load_missing_snapshot_raises(tmp_path: Path) -> None:
    repo = SnapshotRepository(tmp_path)

    with pytest.raises(MissingSnapshotError):
        repo.load()


@pytest.mark.parametrize("payload", ["not json", '{"records": {}}', "[]"])
def test_load_invalid_snapshot_raises(tmp_path: Path, payload: str) -> None:
    """Ensure unparsable or incomplete payloads raise SnapshotCorruptError.

    Args:
        tmp_path: Temporary directory provided by pytest.
        payload: Raw document written to the cache file.
    """
    repo = SnapshotRepository(tmp_path)
    repo.path_for().write_text(payload, encoding="utf-8")

    with pytest.raises(SnapshotCorruptError):
        repo.load()


def test_delete_reports_whether_snapshot_existed(tmp_path: Path) -> None:
    repo = SnapshotRepository(tmp_path)
    repo.save(_snapshot(tmp_path))

    assert repo.delete() is True
    assert repo.delete() is False
    assert not repo.path_for().exists()


def test_naive_timestamps_are_rejected() -> None:
    with pytest.raises(ValidationError):
        MetadataSnapshot(
            directory="/images",
            created_at=datetime(2024, 5, 1),
            expires_at=datetime(2999, 1, 1),
        )
    with pytest.raises(ValidationError):
        ImageRecord(path="x.png", width=1, height=1, modified_at=datetime(2024, 5, 1))


def test_record_key_must_match_record_path(tmp_path: Path) -> None:
    record = ImageRecord(path=str(tmp_path / "tall.png"), width=10, height=20, modified_at=NOW)

    with pytest.raises(ValidationError, match="describes"):
        MetadataSnapshot.build(
            str(tmp_path), {str(tmp_path / "other.png"): record}, now=NOW, ttl_seconds=60
        )

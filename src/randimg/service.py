"""High-level image service combining the metadata store and selector."""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from randimg.cache import SnapshotRepository
from randimg.cache.models import ImageRecord, MetadataSnapshot
from randimg.cache.store import Clock, MetadataStore
from randimg.config import RandimgConfig
from randimg.scanning import DimensionReader, DirectoryScanner
from randimg.selection import DeviceType, OrientationPolicy, Selector

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Selection:
    """An image chosen for a request.

    Attributes:
        path: Filesystem path of the chosen image.
        record: Cached metadata for the image.
        device_type: Device type the image was chosen for.
    """

    path: Path
    record: ImageRecord
    device_type: str

    @property
    def info(self) -> dict[str, object]:
        """Return the metadata advertised alongside a served image."""
        return {
            "width": self.record.width,
            "height": self.record.height,
            "orientation": self.record.orientation.value,
            "aspect_ratio": self.record.aspect_ratio,
            "selected_for": self.device_type,
        }


class ImageService:
    """Validate the cache and pick an image for a device in one call."""

    def __init__(self, store: MetadataStore, selector: Selector) -> None:
        self.store = store
        self.selector = selector

    @classmethod
    def from_config(
        cls,
        config: RandimgConfig,
        *,
        rng: Optional[random.Random] = None,
        clock: Optional[Clock] = None,
        reader: Optional[DimensionReader] = None,
    ) -> "ImageService":
        """Build the store and selector described by `config`.

        Args:
            config: Effective randimg configuration.
            rng: Optional random source, seeded for reproducible picks.
            clock: Optional clock returning aware UTC datetimes.
            reader: Optional dimension reader override.

        Returns:
            ImageService: Service wired with its collaborators.
        """
        repository = SnapshotRepository(Path(config.cache.directory), config.cache.key)
        store = MetadataStore(
            Path(config.images.directory),
            repository,
            ttl_seconds=config.cache.ttl_seconds,
            scanner=DirectoryScanner(config.images.extensions),
            reader=reader,
            clock=clock,
        )
        selector = Selector(
            OrientationPolicy(config.selection.preferences),
            strict_mode=config.selection.strict_mode,
            rng=rng,
        )
        return cls(store, selector)

    def snapshot(self) -> MetadataSnapshot:
        return self.store.get_snapshot()

    def pick(self, device_type: str | DeviceType, strict_mode: Optional[bool] = None) -> Selection:
        """Return an image for `device_type`.

        Raises:
            ImageNotFoundError: If nothing can be served.
        """
        device = device_type.value if isinstance(device_type, DeviceType) else str(device_type)
        snapshot = self.store.get_snapshot()
        path = self.selector.select(snapshot, device, strict_mode)
        record = snapshot.records[path]
        LOGGER.info("Selected %s (%s) for %s", path, record.orientation.value, device)
        return Selection(path=Path(path), record=record, device_type=device)

    def knows(self, device_type: str | DeviceType) -> bool:
        """Return True when the orientation policy has an entry for `device_type`."""
        return device_type in self.selector.policy

    @property
    def device_types(self) -> list[str]:
        return sorted(self.selector.policy.table)

    def rebuild(self) -> MetadataSnapshot:
        return self.store.rebuild()

    def invalidate(self) -> bool:
        return self.store.invalidate()


__all__ = ["ImageService", "Selection"]

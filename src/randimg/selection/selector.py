"""Orientation-aware random image selection."""

from __future__ import annotations

import logging
import random
from typing import Dict, List, Optional

from randimg.cache.models import ImageRecord, MetadataSnapshot, Orientation

from .errors import NoImagesAvailableError, NoMatchingImagesError
from .policy import DeviceType, OrientationPolicy

LOGGER = logging.getLogger(__name__)


class Selector:
    """Pick one image from a snapshot according to a device's preference.

    In permissive mode (the default) an empty preferred bucket falls back to
    every image; in strict mode it yields no result.
    """

    def __init__(
        self,
        policy: Optional[OrientationPolicy] = None,
        *,
        strict_mode: bool = False,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.policy = policy or OrientationPolicy.default()
        self.strict_mode = strict_mode
        self._rng = rng or random.Random()

    @staticmethod
    def partition(snapshot: MetadataSnapshot) -> Dict[Orientation, List[ImageRecord]]:
        """Split records into orientation buckets, each ordered by path."""
        buckets: Dict[Orientation, List[ImageRecord]] = {
            Orientation.PORTRAIT: [],
            Orientation.LANDSCAPE: [],
        }
        for path in sorted(snapshot.records):
            record = snapshot.records[path]
            buckets[record.orientation].append(record)
        return buckets

    def candidates(
        self,
        snapshot: MetadataSnapshot,
        device_type: str | DeviceType,
        strict_mode: Optional[bool] = None,
    ) -> List[ImageRecord]:
        """Return the records eligible for `device_type`, possibly empty."""
        strict = self.strict_mode if strict_mode is None else strict_mode
        buckets = self.partition(snapshot)
        orientation = self.policy.preferred(device_type)
        preferred = buckets[orientation] if orientation is not None else []

        LOGGER.debug(
            "Device: %s, Portraits: %d, Landscapes: %d",
            device_type,
            len(buckets[Orientation.PORTRAIT]),
            len(buckets[Orientation.LANDSCAPE]),
        )

        if strict or preferred:
            return preferred
        return [snapshot.records[path] for path in sorted(snapshot.records)]

    def select(
        self,
        snapshot: MetadataSnapshot,
        device_type: str | DeviceType,
        strict_mode: Optional[bool] = None,
    ) -> str:
        """Return the path of a uniformly chosen eligible image.

        Raises:
            NoImagesAvailableError: If the snapshot is empty.
            NoMatchingImagesError: If strict mode leaves no candidates.
        """
        if not snapshot.records:
            raise NoImagesAvailableError("No valid images found")

        pool = self.candidates(snapshot, device_type, strict_mode)
        if not pool:
            raise NoMatchingImagesError("No matching images found for current device")

        return self._rng.choice(pool).path


__all__ = ["Selector"]

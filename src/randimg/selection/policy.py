"""Device type to orientation preference table."""

from __future__ import annotations

from enum import Enum
from types import MappingProxyType
from typing import Mapping, Optional

from randimg.cache.models import Orientation
from randimg.config.models import DEFAULT_PREFERENCES


class DeviceType(str, Enum):
    """Coarse client classification used to choose an orientation."""

    MOBILE = "mobile"
    TABLET = "tablet"
    DESKTOP = "desktop"


class OrientationPolicy:
    """Immutable mapping of device types to their preferred orientation.

    Device types missing from the table have no preference, which yields an
    empty preferred set during selection.
    """

    def __init__(self, preferences: Mapping[str, str | Orientation]) -> None:
        self._table: Mapping[str, Orientation] = MappingProxyType(
            {_key(device): Orientation(orientation) for device, orientation in preferences.items()}
        )

    @classmethod
    def default(cls) -> "OrientationPolicy":
        return cls(DEFAULT_PREFERENCES)

    @property
    def table(self) -> Mapping[str, Orientation]:
        return self._table

    def preferred(self, device_type: str | DeviceType) -> Optional[Orientation]:
        """Return the preferred orientation for `device_type`, or None if unknown."""
        return self._table.get(_key(device_type))

    def __contains__(self, device_type: object) -> bool:
        return isinstance(device_type, (str, Enum)) and _key(device_type) in self._table

    def __repr__(self) -> str:
        pairs = ", ".join(f"{device}={orientation.value}" for device, orientation in self._table.items())
        return f"OrientationPolicy({pairs})"


def _key(item: str | Enum) -> str:
    value = item.value if isinstance(item, Enum) else item
    return str(value).strip().lower()


__all__ = ["DeviceType", "OrientationPolicy"]

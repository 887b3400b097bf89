"""User-agent based device classification."""

from __future__ import annotations

from typing import Optional

from randimg.selection.policy import DeviceType

HANDHELD_KEYWORDS = (
    "mobile",
    "android",
    "iphone",
    "ipod",
    "ipad",
    "blackberry",
    "webos",
    "opera mini",
    "windows phone",
    "iemobile",
    "tablet",
)
TABLET_KEYWORDS = ("tablet", "ipad")


def classify_user_agent(user_agent: Optional[str]) -> DeviceType:
    """Classify a client from its user-agent string.

    Args:
        user_agent: Raw `User-Agent` header value; may be empty or None.

    Returns:
        DeviceType: `tablet` or `mobile` for handhelds, `desktop` otherwise.
    """
    agent = (user_agent or "").lower()
    if not any(keyword in agent for keyword in HANDHELD_KEYWORDS):
        return DeviceType.DESKTOP
    if any(keyword in agent for keyword in TABLET_KEYWORDS):
        return DeviceType.TABLET
    return DeviceType.MOBILE


__all__ = ["classify_user_agent", "HANDHELD_KEYWORDS", "TABLET_KEYWORDS"]

"""Tests for user-agent device classification."""

import pytest

from randimg.devices import classify_user_agent
from randimg.selection import DeviceType


@pytest.mark.parametrize(
    ("user_agent", "expected"),
    [
        (
            "Mozilla/5.0 (iPhone; CPU iPhone OS 17_0 like Mac OS X) Mobile/15E148",
            DeviceType.MOBILE,
        ),
        ("Mozilla/5.0 (Linux; Android 14; Pixel 8) Mobile Safari/537.36", DeviceType.MOBILE),
        ("Mozilla/5.0 (iPad; CPU OS 17_0 like Mac OS X)", DeviceType.TABLET),
        ("Mozilla/5.0 (Android 13; Tablet; rv:120.0) Gecko/120.0 Firefox/120.0", DeviceType.TABLET),
        ("Mozilla/5.0 (Windows NT 10.0; Win64; x64) Chrome/120.0", DeviceType.DESKTOP),
        ("", DeviceType.DESKTOP),
        (None, DeviceType.DESKTOP),
    ],
)
def test_classify_user_agent(user_agent: str | None, expected: DeviceType) -> None:
    assert classify_user_agent(user_agent) is expected

"""Utility functions for the hailraiser blueprint."""

from __future__ import annotations

import re
from dataclasses import dataclass

from hailraisers.constants import CHANNEL_TABLET, CHANNEL_WEBFORM

TABLET_USER_AGENT = re.compile(
    r"ipad|tablet|playbook|silk|kindle|android(?!.*mobile)", re.IGNORECASE
)


def classify_channel(user_agent: str | None, max_touch_points: int = 0) -> str:
    """Decide whether a signup came from the venue tablet or the public webform.

    iPadOS reports a desktop Macintosh agent, so a Macintosh with more than
    one touch point counts as a tablet too.
    """
    if user_agent:
        if TABLET_USER_AGENT.search(user_agent):
            return CHANNEL_TABLET
        if "macintosh" in user_agent.lower() and max_touch_points > 1:
            return CHANNEL_TABLET
    return CHANNEL_WEBFORM


@dataclass(frozen=True)
class DeviceProbe:
    """Environment signals reported by the device running the signup flow."""

    user_agent: str | None = None
    max_touch_points: int = 0

    def channel(self) -> str:
        return classify_channel(self.user_agent, self.max_touch_points)

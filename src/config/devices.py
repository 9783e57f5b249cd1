"""Default device definitions used when a planner is not given its own list.

Each entry is a viewport rectangle in CSS pixels, the pixel densities commonly
seen at that size, and whether the device can be rotated.
"""

from __future__ import annotations

from typing import Final, List

from domain.models import DeviceDefinition

DEFAULT_DEVICES: Final[List[DeviceDefinition]] = [
    DeviceDefinition(w=2560, h=1600, dppx=[1], flip=False),
    DeviceDefinition(w=1920, h=1200, dppx=[1], flip=False),
    DeviceDefinition(w=1680, h=1050, dppx=[1], flip=False),
    DeviceDefinition(w=1440, h=900, dppx=[2, 1], flip=False),
    DeviceDefinition(w=1366, h=1024, dppx=[2, 1], flip=True),
    DeviceDefinition(w=1280, h=800, dppx=[2, 1.5, 1], flip=True),
    DeviceDefinition(w=1024, h=768, dppx=[2, 1], flip=True),
    DeviceDefinition(w=960, h=600, dppx=[3, 2, 1], flip=True),
    DeviceDefinition(w=768, h=432, dppx=[4, 3, 2.5], flip=True),
    DeviceDefinition(w=690, h=412, dppx=[3.5, 2], flip=True),
    DeviceDefinition(w=640, h=360, dppx=[4, 3, 2, 1.5], flip=True),
    DeviceDefinition(w=480, h=320, dppx=[4, 3, 2, 1.5, 1], flip=True),
]

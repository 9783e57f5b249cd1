"""Explicit planner configuration passed to planners and image builders."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Optional, Tuple

from config import settings
from config.devices import DEFAULT_DEVICES
from domain.device import Device, DeviceInput


@dataclass(frozen=True)
class PlannerConfig:
    """Devices and tolerances used when planning image breakpoints.

    Attributes:
        devices: Concrete devices in canonical order (definitions are expanded).
        scaling_factor: Maximum squared size ratio between two generated widths.
            Higher values create more images with smaller gaps; falsy disables
            filtering.
        disable: If True only the source width is ever requested, useful for
            skipping resizes in development builds.
    """

    devices: Tuple[Device, ...] = field(
        default_factory=lambda: tuple(Device.sort(Device.from_definitions(DEFAULT_DEVICES)))
    )
    scaling_factor: float = settings.DEFAULT_SCALING_FACTOR
    disable: bool = False

    @classmethod
    def build(
        cls,
        devices: Optional[Iterable[DeviceInput]] = None,
        scaling_factor: Optional[float] = None,
        disable: bool = False,
    ) -> "PlannerConfig":
        expanded = Device.from_definitions(DEFAULT_DEVICES if devices is None else devices)
        return cls(
            devices=tuple(Device.sort(expanded)),
            scaling_factor=settings.DEFAULT_SCALING_FACTOR if scaling_factor is None else scaling_factor,
            disable=disable,
        )

"""Concrete devices: a viewport size at one pixel density.

A ``Device`` evaluates media conditions against itself and resolves sizes
clauses into the number of device pixels an image needs.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Iterable, List, Mapping, Optional, Tuple, Union

from pydantic import ValidationError

from domain.models import DeviceDefinition, ResizeInstructions
from domain.units import UnitValue, parse_resolution
from parsing.errors import ConfigurationError, ParseError, UnhandledFeatureError
from parsing.media_condition import All, Condition, Dimension, Feature, MediaNode, Ratio

if TYPE_CHECKING:  # pragma: no cover
    from parsing.sizes_parser import Sizes

_FEATURE_PATTERN = re.compile(r"^(?:(?P<prefix>min|max)-)?(?P<feature>.+)$")

DeviceInput = Union["Device", DeviceDefinition, Mapping[str, Any]]


@dataclass(frozen=True, slots=True)
class Device:
    w: int
    h: int
    dppx: float = 1

    @property
    def orientation(self) -> str:
        return "landscape" if self.w >= self.h else "portrait"

    @property
    def aspect_ratio(self) -> float:
        return self.w / self.h

    # --- Media conditions -----------------------------------------------------------
    def matches(self, node: MediaNode) -> bool:
        """Return True if a media condition applies to this device."""
        if isinstance(node, Feature):
            return self._matches_feature(node)
        if isinstance(node, Condition):
            return self._matches_condition(node)
        if isinstance(node, All):
            return not node.negated
        raise UnhandledFeatureError(f"Unhandled media condition: {node!r}")

    def _matches_feature(self, node: Feature) -> bool:
        feature, prefix = parse_feature(node.feature)
        value = node.value
        if feature in ("width", "height") and isinstance(value, Dimension) and value.unit == "px":
            return compare(self.w if feature == "width" else self.h, value.value, prefix)
        if feature == "resolution" and isinstance(value, Dimension):
            try:
                res = parse_resolution(str(value))
            except ParseError as exc:
                raise UnhandledFeatureError(
                    f"Unhandled resolution value: {node}", context={"feature": node.feature, "device": self}
                ) from exc
            return compare(self.dppx, res.to_dppx().value, prefix)
        if feature == "aspect-ratio" and isinstance(value, (Ratio, float)):
            ratio = value.left / value.right if isinstance(value, Ratio) else value
            return compare(self.aspect_ratio, ratio, prefix)
        if feature == "orientation" and prefix is None and isinstance(value, str):
            return self.orientation == value
        raise UnhandledFeatureError(
            f"Unhandled media feature: {node}", context={"feature": node.feature, "device": self}
        )

    def _matches_condition(self, node: Condition) -> bool:
        if node.operator == "or":
            return any(self.matches(n) for n in node.nodes)
        # anything but "or" is evaluated as "and"; "not" negates the result
        result = all(self.matches(n) for n in node.nodes)
        return not result if node.operator == "not" else result

    # --- Sizes ----------------------------------------------------------------------
    def get_image(self, sizes: "Sizes") -> ResizeInstructions[int]:
        """Return the resize instructions a sizes attribute implies for this device."""
        for query in sizes.queries:
            if query.conditions is None or self.matches(query.conditions):
                return self.resolve(query.size)
        # browsers fall back to 100vw when nothing applies
        return ResizeInstructions(width=self.w)

    def resolve(self, size: ResizeInstructions[UnitValue]) -> ResizeInstructions[int]:
        """Resolve every length in ``size`` to device pixels."""
        return ResizeInstructions(
            width=self.to_device_pixels(size.width) if size.width is not None else None,
            height=self.to_device_pixels(size.height) if size.height is not None else None,
            fit=size.fit,
        )

    def to_device_pixels(self, length: UnitValue) -> int:
        pixels = length.value
        if length.unit == "vw":
            pixels = self.w * length.value / 100
        elif length.unit == "vh":
            pixels = self.h * length.value / 100
        return math.ceil(pixels * self.dppx)

    # --- Construction ---------------------------------------------------------------
    @staticmethod
    def from_definitions(definitions: Iterable[DeviceInput]) -> List["Device"]:
        """Expand device definitions into concrete devices.

        Every definition also gets a 1dppx device, so the 1x case is never
        upscaled. Rotatable definitions are expanded in both orientations.
        Devices passed in are kept as they are.
        """
        devices: List[Device] = []
        for entry in definitions:
            if isinstance(entry, Device):
                devices.append(entry)
                continue
            definition = _as_definition(entry)
            dppx = list(definition.dppx) if definition.dppx else [1]
            if 1 not in dppx:
                dppx.append(1)
            devices.extend(Device(definition.w, definition.h, d) for d in dppx)
            if definition.flip and definition.w != definition.h:
                devices.extend(Device(definition.h, definition.w, d) for d in dppx)
        return devices

    @staticmethod
    def sort_key(device: "Device") -> Tuple[float, float, float]:
        return (-device.w, -device.h, -device.dppx)

    @staticmethod
    def sort(devices: Iterable["Device"]) -> List["Device"]:
        """Canonical order: widest first, then tallest, then densest."""
        return sorted(devices, key=Device.sort_key)


def _as_definition(entry: DeviceDefinition | Mapping[str, Any]) -> DeviceDefinition:
    if isinstance(entry, DeviceDefinition):
        return entry
    try:
        return DeviceDefinition.model_validate(entry)
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid device definition: {entry!r}", context={"errors": exc.errors()}) from exc


def compare(device: float, feature: float, prefix: Optional[str] = None) -> bool:
    """Compare a device value with a feature value based on a min/max prefix."""
    if prefix == "min":
        return device >= feature
    if prefix == "max":
        return device <= feature
    return device == feature


def parse_feature(feature: str) -> Tuple[str, Optional[str]]:
    """Split ``min-width`` into (``width``, ``min``)."""
    m = _FEATURE_PATTERN.match(feature)
    if not m:
        return feature, None
    return m.group("feature"), m.group("prefix")

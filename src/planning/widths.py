"""Width planning: which image widths a set of device targets needs."""

from __future__ import annotations

import logging
import math
from typing import Callable, Iterable, List, Optional, Sequence, TypeVar

from config import settings
from config.devices import DEFAULT_DEVICES
from domain.device import Device, DeviceInput
from domain.models import ResizeInstructions
from parsing.errors import ConfigurationError
from parsing.sizes_parser import Sizes

log = logging.getLogger(__name__)

T = TypeVar("T")


def _square(n: float) -> float:
    return n * n


def filter_sizes(
    items: Iterable[T],
    factor: Optional[float] = None,
    calculate: Callable[[T], float] = _square,  # type: ignore[assignment]
) -> List[T]:
    """Drop sizes that are too close to a larger size that is kept.

    Items are sorted largest first. The largest is kept; each following item is
    kept only if ``calculate(item) / calculate(kept) < factor``, where ``kept``
    is the most recently kept item. With the default squared calculation a
    factor of 0.8 drops any size that would save less than 20% of the pixels.
    A falsy factor returns the full sorted list.
    """
    ordered = sorted(items, key=calculate, reverse=True)
    if not factor:
        return ordered
    if not ordered:
        return []
    kept = [ordered[0]]
    for candidate in ordered[1:]:
        base = calculate(kept[-1])
        scale = calculate(candidate) / base if base else math.nan
        if math.isnan(scale) or scale < factor:
            kept.append(candidate)
    return kept


def instructions_to_width(resize: ResizeInstructions[float], aspect: float) -> float:
    """Reduce resize instructions to a single width for an image aspect ratio.

    ``cover`` uses the instruction width when the instructions are wider than
    the image and the instruction height otherwise; ``contain`` the reverse.
    """
    if resize.fit is not None and resize.width is not None and resize.height is not None:
        resize_aspect = resize.width / resize.height
        if resize.fit == "cover":
            return resize.width if resize_aspect > aspect else resize.height * aspect
        return resize.width if resize_aspect < aspect else resize.height * aspect
    if resize.height is not None:
        return resize.height * aspect
    if resize.width is None:
        raise ConfigurationError("Resize instructions have neither width nor height")
    return resize.width


def get_widths_from_instructions(
    instructions: Sequence[ResizeInstructions[int]],
    scaling_factor: Optional[float] = None,
    width: Optional[int] = None,
    height: Optional[int] = None,
) -> List[int]:
    """Return the widths to generate for a list of per-device targets.

    ``width`` keeps every generated image at or below the source width (the
    source width itself is always a candidate). ``width`` and ``height``
    together give the aspect ratio needed for height-relative targets.
    """
    aspect_ratio = width / height if width and height else None
    targets: List[int] = []
    for target in instructions:
        if aspect_ratio:
            targets.append(math.ceil(instructions_to_width(target, aspect_ratio)))
        elif not target.is_width_only:
            raise ConfigurationError(
                "You must specify an image aspect ratio when getting widths from a non-standard sizes string.",
                context={"target": target},
            )
        else:
            targets.append(int(target.width))  # type: ignore[arg-type]
    if not targets:
        return []
    if width:
        max_width = min(width, max(targets))
        targets = [w for w in [*targets, width] if w <= max_width]
    widths = filter_sizes(set(targets), scaling_factor)
    log.debug("planned %d widths from %d targets: %s", len(widths), len(instructions), widths)
    return widths


def get_widths_from_sizes(
    sizes: str,
    *,
    devices: Optional[Iterable[DeviceInput]] = None,
    scaling_factor: Optional[float] = None,
    width: Optional[int] = None,
    height: Optional[int] = None,
) -> List[int]:
    """Return the image widths needed to meet a sizes string on common devices.

    Useful for wiring the sizes parser into another image pipeline.
    """
    parsed = Sizes(sizes)
    expanded = Device.sort(Device.from_definitions(DEFAULT_DEVICES if devices is None else devices))
    factor = settings.DEFAULT_SCALING_FACTOR if scaling_factor is None else scaling_factor
    targets = [d.get_image(parsed) for d in expanded]
    return get_widths_from_instructions(targets, factor, width, height)

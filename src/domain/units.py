"""Numeric values with CSS units (``600px``, ``40vw``, ``2x``).

Size units (px, vw, vh) describe how wide an image is rendered; resolution
units (dpi, dpcm, dppx, x) describe screen density. ``dppx`` and ``x`` are
synonyms.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Final

from config import settings
from parsing.errors import ParseError

SIZE_UNITS: Final = frozenset({"px", "vw", "vh"})
RESOLUTION_UNITS: Final = frozenset({"dpi", "dpcm", "dppx", "x"})
UNITS: Final = SIZE_UNITS | RESOLUTION_UNITS

_VALUE_PATTERN = re.compile(r"^(\d*\.?\d+)([a-z]*)$", re.IGNORECASE)


@dataclass(frozen=True, slots=True)
class UnitValue:
    value: float
    unit: str

    def __str__(self) -> str:
        return f"{format_number(self.value)}{self.unit}"

    def uses(self, *units: str) -> bool:
        return self.unit in units

    @property
    def is_size(self) -> bool:
        return self.unit in SIZE_UNITS

    @property
    def is_resolution(self) -> bool:
        return self.unit in RESOLUTION_UNITS

    def to_dppx(self) -> "UnitValue":
        """Convert a resolution to ``dppx`` (dpi / 96, dpcm * 2.54 / 96)."""
        if not self.is_resolution:
            raise ParseError(
                f"Not a resolution: {self}", context={"unit": self.unit}
            )
        if self.unit == "dpi":
            return UnitValue(self.value / settings.DPI_PER_DPPX, "dppx")
        if self.unit == "dpcm":
            return UnitValue(self.value * settings.CM_PER_INCH / settings.DPI_PER_DPPX, "dppx")
        return UnitValue(self.value, "dppx")

    @classmethod
    def parse(cls, text: str) -> "UnitValue":
        m = _VALUE_PATTERN.match(text.strip())
        if not m:
            raise ParseError(f"Invalid unit value, couldn't parse: {text!r}", context={"text": text})
        number, unit = m.group(1), m.group(2).lower()
        if unit not in UNITS:
            raise ParseError(
                f"Invalid unit: {unit or '(none)'} in {text!r}. "
                f"Only the following are supported: {' '.join(sorted(UNITS))}",
                context={"text": text, "unit": unit},
            )
        return cls(float(number), unit)


def parse_size(text: str) -> UnitValue:
    """Parse an image size; only px, vw and vh are accepted."""
    parsed = UnitValue.parse(text)
    if not parsed.is_size:
        raise ParseError(f"Invalid image size: {parsed}; sizes can only use px vw vh", context={"text": text})
    return parsed


def parse_resolution(text: str) -> UnitValue:
    parsed = UnitValue.parse(text)
    if not parsed.is_resolution:
        raise ParseError(
            f"Invalid resolution: {parsed}; resolutions can only use dpi dpcm dppx x",
            context={"text": text},
        )
    return parsed


def format_number(value: float) -> str:
    """Render ``2.0`` as ``2`` and ``1.5`` as ``1.5`` for CSS output."""
    if float(value).is_integer():
        return str(int(value))
    return repr(float(value))

"""Global configuration and constants for breakpoint planning."""

from __future__ import annotations

import os
from typing import Final

DEFAULT_SCALING_FACTOR: Final = float(os.environ.get("SIZES_PLANNER_SCALING_FACTOR", "0.8"))
DEFAULT_ORIENTATIONS: Final = ("landscape", "portrait")
DEFAULT_SIZES: Final = "100vw"
LOG_LEVEL: Final = os.environ.get("SIZES_PLANNER_LOG_LEVEL", "WARNING")

# CSS reference pixel density: 1dppx == 96dpi
DPI_PER_DPPX: Final = 96
CM_PER_INCH: Final = 2.54

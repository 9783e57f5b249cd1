"""Breakpoint planning for one sizes attribute across a device list.

``DeviceSizes`` resolves the ideal image for every device, plans which widths
to generate and, once the resize collaborator has produced assets, assigns each
device to the smallest asset that still covers it and synthesises
non-overlapping media queries selecting those assets.
"""

from __future__ import annotations

import logging
import math
from typing import Iterable, List, Optional, Sequence, Tuple, Union

from config import settings
from domain.device import Device, DeviceInput
from domain.mapping import group_by_width
from domain.models import ORIENTATIONS, ImageAsset, MediaQuery, Metadata, ResizeInstructions
from parsing.sizes_parser import Sizes
from planning.widths import get_widths_from_instructions, instructions_to_width
from services.media_queries import MediaQueries
from utils.grouping import group_by

log = logging.getLogger(__name__)


class DeviceSizes:
    def __init__(self, sizes: Union[str, Sizes], devices: Iterable[DeviceInput]) -> None:
        self.sizes = Sizes(sizes) if isinstance(sizes, str) else sizes
        self.devices: Tuple[Device, ...] = tuple(Device.sort(Device.from_definitions(devices)))
        self.targets: Tuple[ResizeInstructions[int], ...] = tuple(
            d.get_image(self.sizes) for d in self.devices
        )
        by_orientation = group_by(range(len(self.devices)), lambda i: self.devices[i].orientation)
        self.landscape: Tuple[int, ...] = tuple(by_orientation.get("landscape", ()))
        self.portrait: Tuple[int, ...] = tuple(by_orientation.get("portrait", ()))

    def __repr__(self) -> str:
        return f"DeviceSizes({str(self.sizes)!r}, devices={len(self.devices)})"

    def indices(self, orientation: str) -> Tuple[int, ...]:
        return self.landscape if orientation == "landscape" else self.portrait

    def group_by_size(self, indices: Sequence[int]) -> List[List[int]]:
        """Split device indices into runs sharing the same (w, h)."""
        groups = group_by(indices, lambda i: (self.devices[i].w, self.devices[i].h))
        return list(groups.values())

    def widths(
        self,
        scaling_factor: Optional[float] = settings.DEFAULT_SCALING_FACTOR,
        width: Optional[int] = None,
        height: Optional[int] = None,
    ) -> List[int]:
        """Widths to request from the resize collaborator for this plan."""
        return get_widths_from_instructions(self.targets, scaling_factor, width, height)

    def map_metadata(self, metadata: Metadata) -> List[List[ImageAsset]]:
        """Pick the generated assets each device should load.

        Returns one list per device (same index as ``self.devices``) holding
        every format of the smallest width that still covers the device's
        target. When no smaller width suffices the widest assets are used.
        """
        by_width = group_by_width(metadata)
        if not by_width:
            return [[] for _ in self.targets]

        def select(target: ResizeInstructions[int]) -> List[ImageAsset]:
            for i in range(1, len(by_width)):
                asset = by_width[i][0]
                following = by_width[i + 1][0] if i + 1 < len(by_width) else None
                target_width = math.ceil(instructions_to_width(target, asset.width / asset.height))
                if asset.width >= target_width and (following is None or following.width < target_width):
                    return by_width[i]
            return by_width[0]

        return [select(t) for t in self.targets]

    def to_media_queries(
        self,
        metadata: Metadata,
        orientations: Sequence[str] = settings.DEFAULT_ORIENTATIONS,
    ) -> MediaQueries:
        """Build non-overlapping width/resolution bands paired with assets.

        Within an orientation every same-size group forms a width band bounded
        by its own width (``max_width``, open for the widest) and the next
        group's width (``min_width``, open for the narrowest). Inside a band
        each density forms a resolution band the same way.
        """
        if isinstance(orientations, str):
            orientations = (orientations,)
        valid: List[str] = []
        for o in orientations:
            if o not in ORIENTATIONS:
                log.warning("Ignoring invalid orientation %r; expected one of %s", o, ", ".join(ORIENTATIONS))
                continue
            valid.append(o)
        assets = self.map_metadata(metadata)
        queries: List[MediaQuery] = []
        for o in valid:
            orientation = o if len(valid) > 1 else None
            bands = self.group_by_size(self.indices(o))
            for i, band in enumerate(bands):
                max_width = self.devices[band[0]].w if i > 0 else None
                min_width = self.devices[bands[i + 1][0]].w if i + 1 < len(bands) else None
                for j, d in enumerate(band):
                    device = self.devices[d]
                    max_resolution = device.dppx if j > 0 else None
                    min_resolution = self.devices[band[j + 1]].dppx if j + 1 < len(band) else None
                    queries.extend(
                        MediaQuery(
                            orientation=orientation,
                            max_width=max_width,
                            min_width=min_width,
                            max_resolution=max_resolution,
                            min_resolution=min_resolution,
                            url=asset.url,
                            source_type=asset.source_type,
                            format=asset.format,
                            dppx=device.dppx,
                        )
                        for asset in assets[d]
                    )
        log.debug("synthesised %d media queries for %r", len(queries), self)
        return MediaQueries(queries)

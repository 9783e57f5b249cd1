"""High-level orchestration: sizes string + devices + resize collaborator.

The flow is stat the source image, plan widths, ask the collaborator for those
widths once, then map the produced assets back onto devices::

    image = ResponsiveImage(resizer, PlannerConfig.build())
    css = await image.from_sizes("(min-width: 680px) 400px, 100vw").to_css(".hero")

``from_sizes`` returns a ``PendingSizes`` builder. Its operations are
coroutines that share a single resize run, so chaining several of them never
resizes twice.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Dict, Generator, List, Optional, Protocol, Sequence, Tuple

from config import settings
from config.options import PlannerConfig
from domain.models import ImageAsset, ImageSource, Metadata, SourceImage
from planning.device_sizes import DeviceSizes
from planning.widths import get_widths_from_sizes
from services.media_queries import MediaQueries

log = logging.getLogger(__name__)


class ImageResizer(Protocol):
    """External collaborator that owns the actual image files."""

    async def stat(self) -> SourceImage: ...  # pragma: no cover - structural

    async def resize(
        self, widths: Sequence[int], formats: Optional[Sequence[str]] = None
    ) -> Metadata: ...  # pragma: no cover - structural


@dataclass(frozen=True)
class SizesResult:
    """A resolved plan: the device plan, the widths requested and the assets."""

    plan: DeviceSizes
    widths: List[int]
    metadata: Metadata

    def device_assets(self) -> List[List[ImageAsset]]:
        return self.plan.map_metadata(self.metadata)

    def media_queries(self, orientations: Sequence[str] = settings.DEFAULT_ORIENTATIONS) -> MediaQueries:
        return self.plan.to_media_queries(self.metadata, orientations)

    def to_css(
        self,
        selector: str,
        orientations: Sequence[str] = settings.DEFAULT_ORIENTATIONS,
        *,
        resolution: bool = True,
    ) -> str:
        return self.media_queries(orientations).to_css(selector, resolution=resolution)

    def to_sources(
        self,
        orientations: Sequence[str] = settings.DEFAULT_ORIENTATIONS,
        *,
        resolution: bool = False,
    ) -> List[ImageSource]:
        return self.media_queries(orientations).to_sources(resolution=resolution)


class PendingSizes:
    """Awaitable builder for a ``SizesResult``.

    ``await pending`` gives the result; the async methods mirror the result's
    methods so calls can be chained before anything has been resized.
    """

    def __init__(self, image: "ResponsiveImage", plan: DeviceSizes, formats: Optional[Sequence[str]] = None):
        self.image = image
        self.plan = plan
        self.formats = list(formats) if formats else None
        self._task: Optional[asyncio.Future[SizesResult]] = None

    def __await__(self) -> Generator[Any, None, SizesResult]:
        return self.resolve().__await__()

    async def resolve(self) -> SizesResult:
        if self._task is None:
            self._task = asyncio.ensure_future(self._run())
        return await self._task

    async def _run(self) -> SizesResult:
        source = await self.image.stat()
        config = self.image.config
        if config.disable:
            widths = [source.width]
        else:
            widths = self.plan.widths(config.scaling_factor, source.width, source.height)
        if not widths:
            log.debug("no widths planned for %r; skipping resize", self.plan)
            return SizesResult(self.plan, [], {})
        metadata = await self.image.resize(widths, self.formats)
        return SizesResult(self.plan, widths, metadata)

    # --- Chained operations -----------------------------------------------------------
    async def widths(self) -> List[int]:
        return (await self.resolve()).widths

    async def metadata(self) -> Metadata:
        return (await self.resolve()).metadata

    async def device_assets(self) -> List[List[ImageAsset]]:
        return (await self.resolve()).device_assets()

    async def media_queries(self, orientations: Sequence[str] = settings.DEFAULT_ORIENTATIONS) -> MediaQueries:
        return (await self.resolve()).media_queries(orientations)

    async def to_css(
        self,
        selector: str,
        orientations: Sequence[str] = settings.DEFAULT_ORIENTATIONS,
        *,
        resolution: bool = True,
    ) -> str:
        return (await self.resolve()).to_css(selector, orientations, resolution=resolution)

    async def to_sources(
        self,
        orientations: Sequence[str] = settings.DEFAULT_ORIENTATIONS,
        *,
        resolution: bool = False,
    ) -> List[ImageSource]:
        return (await self.resolve()).to_sources(orientations, resolution=resolution)


class ResponsiveImage:
    """One source image bound to a resize collaborator and planner config."""

    def __init__(self, resizer: ImageResizer, config: Optional[PlannerConfig] = None) -> None:
        self.resizer = resizer
        self.config = config or PlannerConfig()
        self._stat: Optional[asyncio.Future[SourceImage]] = None
        # (widths, formats) -> resize task
        self._resized: Dict[Tuple[Tuple[int, ...], Tuple[str, ...]], asyncio.Future[Metadata]] = {}

    async def stat(self) -> SourceImage:
        """Dimensions of the source image; the collaborator is asked once."""
        if self._stat is None:
            self._stat = asyncio.ensure_future(self.resizer.stat())
        return await self._stat

    async def resize(self, widths: Sequence[int], formats: Optional[Sequence[str]] = None) -> Metadata:
        """Resize to explicit widths (the source width only when disabled).

        Each distinct list of widths and formats is resized once per image;
        later calls share the first result.
        """
        if self.config.disable:
            widths = [(await self.stat()).width]
        key = (tuple(widths), tuple(formats or ()))
        task = self._resized.get(key)
        if task is None:
            log.info("resizing source to widths %s", list(widths))
            task = asyncio.ensure_future(self.resizer.resize(list(widths), formats))
            self._resized[key] = task
        return await task

    def from_sizes(self, sizes: str, formats: Optional[Sequence[str]] = None) -> PendingSizes:
        """Plan this image for a sizes attribute; nothing runs until awaited."""
        return PendingSizes(self, DeviceSizes(sizes, self.config.devices), formats)

    def widths_from_sizes(self, sizes: str, width: Optional[int] = None, height: Optional[int] = None) -> List[int]:
        return get_widths_from_sizes(
            sizes,
            devices=self.config.devices,
            scaling_factor=self.config.scaling_factor,
            width=width,
            height=height,
        )


def plan_summary(
    sizes: str,
    config: Optional[PlannerConfig] = None,
    width: Optional[int] = None,
    height: Optional[int] = None,
) -> Dict[str, Any]:
    """Plan a sizes string without resizing anything and summarise the result."""
    config = config or PlannerConfig()
    plan = DeviceSizes(sizes, config.devices)
    return {
        "sizes": plan.sizes.original,
        "valid": plan.sizes.is_valid,
        "devices": len(plan.devices),
        "landscape_devices": len(plan.landscape),
        "portrait_devices": len(plan.portrait),
        "widths": plan.widths(config.scaling_factor, width, height),
        "targets": [
            {
                "w": d.w,
                "h": d.h,
                "dppx": d.dppx,
                "width": t.width,
                "height": t.height,
                "fit": t.fit,
            }
            for d, t in zip(plan.devices, plan.targets)
        ],
    }

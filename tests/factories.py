from __future__ import annotations

import math
from typing import Dict, List, Sequence

from domain.models import ImageAsset, Metadata, SourceImage

MIME_TYPES = {"jpeg": "image/jpeg", "webp": "image/webp", "png": "image/png", "avif": "image/avif"}


def make_asset(width: int, fmt: str = "jpeg", aspect: float = 1.5) -> ImageAsset:
    return ImageAsset(
        width=width,
        height=math.ceil(width / aspect),
        url=f"/img/output-{width}.{fmt}",
        sourceType=MIME_TYPES[fmt],
        format=fmt,
    )


def make_metadata(widths: Sequence[int], formats: Sequence[str] = ("jpeg",), aspect: float = 1.5) -> Metadata:
    return {fmt: [make_asset(w, fmt, aspect) for w in sorted(widths)] for fmt in formats}


class FakeResizer:
    """In-memory resize collaborator recording every call it receives."""

    def __init__(self, width: int = 3000, height: int = 2000) -> None:
        self.source = SourceImage(width=width, height=height)
        self.stat_calls = 0
        self.resize_calls: List[List[int]] = []

    async def stat(self) -> SourceImage:
        self.stat_calls += 1
        return self.source

    async def resize(self, widths, formats=None) -> Dict[str, List[ImageAsset]]:
        self.resize_calls.append(list(widths))
        return make_metadata(widths, formats or ("jpeg",), self.source.width / self.source.height)


__all__ = [
    "make_asset",
    "make_metadata",
    "FakeResizer",
]

"""Utilities for regrouping generated image metadata."""

from __future__ import annotations

from typing import List

from domain.models import ImageAsset, Metadata
from utils.grouping import group_by


def flatten_metadata(metadata: Metadata) -> List[ImageAsset]:
    return [asset for assets in metadata.values() for asset in assets]


def group_by_width(metadata: Metadata) -> List[List[ImageAsset]]:
    """Group assets of every format by pixel width, widest group first.

    Assumes all assets share roughly the same aspect ratio (nothing cropped).
    """
    groups = group_by(flatten_metadata(metadata), lambda a: a.width)
    return [groups[w] for w in sorted(groups, reverse=True)]

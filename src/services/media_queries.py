"""Consolidation of media query records into selectors, CSS and sources.

``DeviceSizes.to_media_queries`` produces one record per band cell and asset.
``MediaQueries`` groups them by the selector they imply and renders either
``background-image`` rules or ``<source>`` attributes.

Selector conventions: ``min-width`` is emitted one pixel above the raw band
bound (``(min-width: 769px)`` for a bound of 768) and ``min-resolution`` one
dpi above (``(min-resolution: 97dpi)`` for 1dppx), so adjacent bands never
overlap.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Dict, Iterable, List, Mapping, Sequence, Tuple

from config import settings
from domain.models import ImageSetEntry, ImageSource, MediaQuery
from domain.units import format_number
from utils.grouping import group_by, permute

__all__ = ["MediaQueries", "selector_for"]


def selector_for(query: MediaQuery, *, resolution: bool = True) -> str:
    """Build the comma separated media query list selecting one record."""
    and_queries: List[str] = []
    or_queries: List[List[str]] = []
    if query.orientation:
        and_queries.append(f"(orientation: {query.orientation})")
    if query.max_width is not None:
        and_queries.append(f"(max-width: {query.max_width}px)")
    if query.min_width is not None:
        or_queries.append([f"(min-width: {query.min_width + 1}px)"])
    if resolution and (query.max_resolution is not None or query.min_resolution is not None):
        resolutions: List[str] = []
        if query.max_resolution is not None:
            dpi = format_number(query.max_resolution * settings.DPI_PER_DPPX)
            resolutions.append(f"(max-resolution: {dpi}dpi)")
        if query.min_resolution is not None:
            dpi = format_number(query.min_resolution * settings.DPI_PER_DPPX + 1)
            resolutions.append(f"(min-resolution: {dpi}dpi)")
        or_queries.append([" and ".join(resolutions)])
    selectors = ", ".join(" and ".join([*and_queries, *branch]) for branch in permute(or_queries))
    return selectors or "all"


def _fallback(images: Sequence[ImageSetEntry]) -> ImageSetEntry:
    """Lowest density image; first listed wins ties."""
    return min(images, key=lambda i: i.dppx if i.dppx is not None else 1)


def _image_set(images: Sequence[ImageSetEntry]) -> str:
    options = []
    for image in images:
        parts = [f"url('{image.image}')"]
        if image.dppx:
            parts.append(f"{format_number(image.dppx)}x")
        if image.type:
            parts.append(f"type('{image.type}')")
        options.append(" ".join(parts))
    return f"image-set({', '.join(options)})"


class MediaQueries:
    def __init__(self, queries: Iterable[MediaQuery]) -> None:
        self.queries: Tuple[MediaQuery, ...] = tuple(queries)
        self._image_sets: Dict[bool, Mapping[str, Tuple[ImageSetEntry, ...]]] = {}

    def __len__(self) -> int:
        return len(self.queries)

    def __iter__(self):
        return iter(self.queries)

    def image_sets(self, resolution: bool = True) -> Mapping[str, Tuple[ImageSetEntry, ...]]:
        """Map each selector to the images an ``image-set()`` would list.

        With ``resolution=False`` resolution bands are merged, so a width band
        lists one image per density (and format) instead. The returned
        mapping is read-only and shared between calls.
        """
        cached = self._image_sets.get(resolution)
        if cached is not None:
            return cached
        grouped = group_by(self.queries, lambda q: selector_for(q, resolution=resolution))
        result: Dict[str, Tuple[ImageSetEntry, ...]] = {}
        for selector, queries in grouped.items():
            images: List[ImageSetEntry] = []
            seen: set[str] = set()
            for q in queries:
                entry = ImageSetEntry(image=q.url, type=q.source_type, dppx=q.dppx)
                if entry.image in seen:
                    continue
                seen.add(entry.image)
                images.append(entry)
            result[selector] = tuple(images)
        self._image_sets[resolution] = MappingProxyType(result)
        return self._image_sets[resolution]

    def to_css(self, selector: str, *, resolution: bool = True) -> str:
        """Render ``background-image`` rules for a CSS selector.

        Selectors with several images use ``image-set()``; browsers without
        ``image-set()`` support get the lowest density image through an
        ``@supports not`` rule.
        """
        rules: List[str] = []
        for media, images in self.image_sets(resolution).items():
            if not images:
                continue
            if len(images) == 1:
                rules.append(
                    f"@media {media} {{ {selector} {{ background-image: url('{images[0].image}'); }} }}"
                )
                continue
            image_set = _image_set(images)
            fallback = _fallback(images)
            rules.append(f"@media {media} {{ {selector} {{ background-image: {image_set}; }} }}")
            rules.append(
                f"@supports not (background-image: {image_set}) {{ "
                f"@media {media} {{ {selector} {{ background-image: url('{fallback.image}'); }} }} }}"
            )
        return "\n".join(rules)

    def to_sources(self, *, resolution: bool = False) -> List[ImageSource]:
        """Attributes for ``<source>`` elements, one per selector and MIME type."""
        sources: List[ImageSource] = []
        for media, images in self.image_sets(resolution).items():
            for source_type, entries in group_by(images, lambda i: i.type).items():
                if len(entries) > 1:
                    srcset = ", ".join(f"{e.image} {format_number(e.dppx or 1)}x" for e in entries)
                else:
                    srcset = entries[0].image
                sources.append(ImageSource(media=media, srcset=srcset, type=source_type))
        return sources

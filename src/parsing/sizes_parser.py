"""Parsing of ``sizes`` attribute strings into ordered sizing clauses."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple, Union

from domain.models import DIMENSIONS, SIZE_KEYWORDS, ResizeInstructions
from domain.units import UnitValue, parse_size
from parsing.errors import ParseError
from parsing.media_condition import MediaNode, parse_media_condition, stringify

SizeToken = Union[str, UnitValue]


@dataclass(frozen=True, slots=True)
class SizesQuery:
    """One clause of a sizes attribute, e.g. ``(min-width: 600px) 400px``.

    ``conditions`` of ``None`` always applies. ``is_valid`` is False for
    size expressions a browser cannot understand (anything but a single width).
    """

    conditions: Optional[MediaNode]
    size: ResizeInstructions[UnitValue]
    is_valid: bool

    def __str__(self) -> str:
        if self.size.width is None or self.size.height is not None:
            return ""
        if self.conditions is None:
            return str(self.size.width)
        return f"{stringify(self.conditions)} {self.size.width}"


class Sizes:
    def __init__(self, sizes: str) -> None:
        self.original = sizes
        self.queries: Tuple[SizesQuery, ...] = tuple(self.parse(sizes))
        self.is_valid = all(q.is_valid for q in self.queries)

    def __str__(self) -> str:
        """Serialise back to a sizes attribute, dropping height-relative clauses."""
        return ", ".join(s for s in (str(q) for q in self.queries if q.size.height is None) if s)

    def __repr__(self) -> str:
        return f"Sizes({self.original!r})"

    def __iter__(self):
        return iter(self.queries)

    def __len__(self) -> int:
        return len(self.queries)

    @staticmethod
    def parse(sizes: str) -> List[SizesQuery]:
        """Parse the value of an img element's sizes attribute.

        Each comma separated clause is read from the right: trailing size
        keywords, dimension keywords and lengths form the image size, the rest
        is the media condition.
        """
        queries: List[SizesQuery] = []
        for clause in split_clauses(sizes):
            tokens = clause.split()
            image_size: List[SizeToken] = []
            while tokens:
                t = tokens.pop()
                if t in SIZE_KEYWORDS or t in DIMENSIONS:
                    image_size.insert(0, t)
                    continue
                try:
                    image_size.insert(0, parse_size(t))
                except ParseError:
                    tokens.append(t)
                    break
            condition_text = " ".join(tokens).strip()
            queries.append(
                SizesQuery(
                    conditions=parse_media_condition(condition_text) if condition_text else None,
                    size=parse_image_size(image_size, clause),
                    is_valid=len(image_size) == 1,
                )
            )
        return queries


def split_clauses(sizes: str) -> List[str]:
    """Split on commas that are not nested inside parentheses."""
    clauses: List[str] = []
    depth = 0
    current: List[str] = []
    for ch in sizes:
        if ch == "(":
            depth += 1
        elif ch == ")":
            depth = max(depth - 1, 0)
        if ch == "," and depth == 0:
            clauses.append("".join(current).strip())
            current = []
            continue
        current.append(ch)
    clauses.append("".join(current).strip())
    return clauses


def parse_image_size(tokens: Sequence[SizeToken], clause: str = "") -> ResizeInstructions[UnitValue]:
    if len(tokens) == 1 and isinstance(tokens[0], UnitValue):
        return ResizeInstructions(width=tokens[0])
    if len(tokens) == 2:
        dimension, length = tokens
        if dimension == "width" and isinstance(length, UnitValue):
            return ResizeInstructions(width=length)
        if dimension == "height" and isinstance(length, UnitValue):
            return ResizeInstructions(height=length)
    if len(tokens) == 3:
        fit, width, height = tokens
        if fit in SIZE_KEYWORDS and isinstance(width, UnitValue) and isinstance(height, UnitValue):
            return ResizeInstructions(width=width, height=height, fit=str(fit))
    raise ParseError(
        f"Unable to parse image size: {' '.join(str(t) for t in tokens) or '(empty)'}",
        context={"clause": clause},
    )

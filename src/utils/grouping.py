"""Small collection helpers shared by the planner and query rendering."""

from __future__ import annotations

import itertools
from typing import Callable, Dict, Hashable, Iterable, List, Sequence, TypeVar

T = TypeVar("T")
K = TypeVar("K", bound=Hashable)


def group_by(items: Iterable[T], key: Callable[[T], K]) -> Dict[K, List[T]]:
    """Group items by key, keeping groups in order of first occurrence."""
    groups: Dict[K, List[T]] = {}
    for item in items:
        groups.setdefault(key(item), []).append(item)
    return groups


def permute(matrix: Sequence[Sequence[T]]) -> List[List[T]]:
    """Every combination picking one item from each row.

    ``permute([["a", "b"], ["c"]])`` -> ``[["a", "c"], ["b", "c"]]``; an empty
    matrix yields a single empty combination.
    """
    return [list(combo) for combo in itertools.product(*matrix)]

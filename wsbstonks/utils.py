from __future__ import annotations

import math
from typing import Callable, Dict, Iterable, List, TypeVar

T = TypeVar("T")


def round_to(value: float, places: int = 0) -> float:
    """Round to `places` decimals with halves going up (built-in round() goes to even)."""
    factor = 10 ** places
    return math.floor(value * factor + 0.5) / factor


def group_by(items: Iterable[T], key: Callable[[T], str]) -> Dict[str, List[T]]:
    """
    Collect items sharing a key, in input order.

    Items with the same key land in the same group even when they are not
    adjacent (unlike itertools.groupby).
    """
    groups: Dict[str, List[T]] = {}
    for item in items:
        groups.setdefault(key(item), []).append(item)
    return groups

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional, Tuple

import numpy as np
import numba


@dataclass(frozen=True)
class Rect:
    left: int
    bottom: int
    width: int
    height: int

    @property
    def right(self) -> int:
        return self.left + self.width

    @property
    def top(self) -> int:
        return self.bottom + self.height


def overlaps(a: Rect, b: Rect) -> bool:
    """
    True when the open interiors of two axis-aligned rectangles intersect.

    Edges that only touch (``a.right == b.left``) are not a collision, so
    footprints can sit flush against each other.
    """
    return (
        a.left < b.right
        and b.left < a.right
        and a.bottom < b.top
        and b.bottom < a.top
    )


def rects_to_array(rects: Iterable[Rect]) -> np.ndarray:
    """Pack rectangles into an (n, 4) int64 array of left, bottom, width, height."""
    data = [(r.left, r.bottom, r.width, r.height) for r in rects]
    return np.array(data, dtype=np.int64).reshape(-1, 4)


@numba.njit(cache=True)
def overlaps_any_numba(occupied: np.ndarray,
                       x: int, y: int, width: int, height: int) -> bool:
    """Check a candidate footprint against every occupied footprint."""
    for i in range(occupied.shape[0]):
        ox, oy, ow, oh = occupied[i, 0], occupied[i, 1], occupied[i, 2], occupied[i, 3]
        if x < ox + ow and ox < x + width and y < oy + oh and oy < y + height:
            return True
    return False


@numba.njit(cache=True)
def scan_free_spot_numba(occupied: np.ndarray,
                         max_x: int, max_y: int,
                         width: int, height: int) -> Tuple[int, int]:
    """Row-major scan for the first free origin; (-1, -1) when none exists."""
    for y in range(max_y + 1):
        for x in range(max_x + 1):
            if not overlaps_any_numba(occupied, x, y, width, height):
                return x, y
    return -1, -1


def first_free_origin(
    occupied: Iterable[Rect], max_x: int, max_y: int, width: int, height: int
) -> Optional[Tuple[int, int]]:
    if max_x < 0 or max_y < 0:
        return None

    x, y = scan_free_spot_numba(
        rects_to_array(occupied), max_x, max_y, width, height
    )
    if x < 0:
        return None
    return int(x), int(y)

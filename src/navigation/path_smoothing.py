"""
Path Smoothing - Chaikin corner cutting

Turns the staircase of A* cell centers into a smoother polyline.

Each iteration replaces every edge (P, Q) by the two points
0.75*P + 0.25*Q and 0.25*P + 0.75*Q, keeping the first and last points.
The result stays inside the convex hull of consecutive segment pairs,
so it only cuts corners of the raw path. Interpolated points are NOT
checked against the grid: with tight obstacle margins a cut corner may
graze a blocked cell.

References:
- G. Chaikin, "An algorithm for high speed curve generation" (1974)
"""

import math
import numpy as np
from typing import List, Sequence, Tuple


Point = Tuple[float, float]


def to_cell_centers(cells: Sequence[Tuple[int, int]]) -> List[Point]:
    """Convert grid cells to the continuous coordinates of their centers."""
    return [(x + 0.5, y + 0.5) for x, y in cells]


def chaikin(polyline: Sequence[Point], iterations: int = 1) -> List[Point]:
    """
    Smooth a polyline by iterative corner cutting.

    Args:
        polyline: Sequence of (x, y) points
        iterations: Number of subdivision passes (0 = unchanged)

    Returns:
        New list of (x, y) points; the input is never modified
    """
    if len(polyline) < 2 or iterations <= 0:
        return [tuple(p) for p in polyline]

    cur = np.asarray(polyline, dtype=np.float64)

    for _ in range(iterations):
        p = cur[:-1]
        q = cur[1:]

        cut = np.empty((2 * len(p), 2))
        cut[0::2] = 0.75 * p + 0.25 * q
        cut[1::2] = 0.25 * p + 0.75 * q

        cur = np.vstack([cur[:1], cut, cur[-1:]])

    return [(float(x), float(y)) for x, y in cur]


def smooth_path(cells: Sequence[Tuple[int, int]], iterations: int) -> List[Point]:
    """A* cell path -> smoothed polyline through cell centers."""
    if not cells:
        return []
    return chaikin(to_cell_centers(cells), iterations)


def path_length(path: Sequence[Point]) -> float:
    """Calculate total arc length of a polyline."""
    if not path or len(path) < 2:
        return 0.0
    total = 0.0
    for i in range(1, len(path)):
        dx = path[i][0] - path[i-1][0]
        dy = path[i][1] - path[i-1][1]
        total += math.sqrt(dx*dx + dy*dy)
    return total

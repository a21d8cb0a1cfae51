"""
Static plot of a planned path: grid, raw A* path, smoothed path and
(optionally) the vehicle trail.
"""

from typing import List, Optional, Sequence, Tuple

import matplotlib.pyplot as plt

from mapping.occupancy_grid import GridMap
from navigation.path_smoothing import to_cell_centers


def plot_plan(
    grid: GridMap,
    raw_path: Sequence[Tuple[int, int]],
    smooth_path: Sequence[Tuple[float, float]],
    trail: Optional[List[Tuple[float, float]]] = None,
    title: str = "",
    ax=None
):
    """
    Draw a plan on a matplotlib axis (a new figure if ax is None).

    Returns:
        The matplotlib Figure
    """
    if ax is None:
        fig, ax = plt.subplots(1, 1, figsize=(8, 8 * grid.height / max(1, grid.width)))
    else:
        fig = ax.figure

    ax.imshow(grid.get_map_image(), origin='upper', interpolation='nearest',
              extent=(0, grid.width, grid.height, 0))

    if len(raw_path) >= 2:
        centers = to_cell_centers(raw_path)
        ax.plot([p[0] for p in centers], [p[1] for p in centers],
                'b.-', linewidth=1, alpha=0.6, label='A*')

    if len(smooth_path) >= 2:
        ax.plot([p[0] for p in smooth_path], [p[1] for p in smooth_path],
                '-', color='orange', linewidth=2, label='Smoothed')

    if trail:
        ax.plot([p[0] for p in trail], [p[1] for p in trail],
                'g-', linewidth=1, alpha=0.7, label='Vehicle')

    if raw_path:
        sx, sy = raw_path[0]
        gx, gy = raw_path[-1]
        ax.plot([sx + 0.5], [sy + 0.5], 'gs', markersize=8)
        ax.plot([gx + 0.5], [gy + 0.5], 'rs', markersize=8)

    ax.set_xlim(0, grid.width)
    ax.set_ylim(grid.height, 0)
    ax.set_aspect('equal')
    ax.set_title(title or f"{len(raw_path)} cells")
    if raw_path:
        ax.legend(loc='lower right', fontsize=8)

    return fig

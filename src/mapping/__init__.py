"""
Mapping module.

Components:
- GridMap: Binary occupancy grid with presets and PNG I/O
"""

from .occupancy_grid import GridMap

__all__ = [
    'GridMap',
]

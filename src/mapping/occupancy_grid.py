"""
Occupancy Grid Map

Binary 2D occupancy grid used by the A* planner.

Values:
- 0 = free
- 1 = blocked

Features:
- Bounds-checked queries
- Interactive edits (toggle, set, border enforcement)
- Map presets (open, demo, random rectangles)
- Map I/O (PNG via OpenCV)
"""

import os
import numpy as np
from typing import Optional

import cv2

from core.errors import MapLoadError


class GridMap:
    """
    2D occupancy grid, indexed as occ[y, x].

    Usage:
        grid = GridMap.open(120, 80)

        # Query
        grid.is_free(10, 5)

        # Edit
        grid.toggle(10, 5)
        grid.enforce_border()

        # Save / load
        grid.save("assets/maps/saved.png")
        grid = GridMap.load("assets/maps/saved.png")
    """

    FREE = 0
    BLOCKED = 1

    def __init__(self, width: int, height: int, occ: Optional[np.ndarray] = None):
        """
        Initialize grid.

        Args:
            width: Number of columns
            height: Number of rows
            occ: Optional (height, width) occupancy array (non-zero = blocked)
        """
        if width <= 0 or height <= 0:
            raise ValueError(f"Grid size must be positive, got {width}x{height}")

        self.width = width
        self.height = height

        if occ is None:
            self.occ = np.zeros((height, width), dtype=np.uint8)
        else:
            occ = np.asarray(occ)
            if occ.shape != (height, width):
                raise ValueError(f"Occupancy shape {occ.shape} does not match {height}x{width}")
            self.occ = (occ != 0).astype(np.uint8)

    @property
    def cells(self) -> np.ndarray:
        """Flat row-major view, linear index = y * width + x."""
        return self.occ.reshape(-1)

    def index(self, x: int, y: int) -> int:
        return y * self.width + x

    def in_bounds(self, x: int, y: int) -> bool:
        """Check if cell coordinates are in bounds."""
        return 0 <= x < self.width and 0 <= y < self.height

    def is_free(self, x: int, y: int) -> bool:
        """True if the cell is inside the map and not blocked."""
        return self.in_bounds(x, y) and self.occ[y, x] == self.FREE

    def set_occupied(self, x: int, y: int, value: bool = True):
        if self.in_bounds(x, y):
            self.occ[y, x] = self.BLOCKED if value else self.FREE

    def toggle(self, x: int, y: int):
        if self.in_bounds(x, y):
            self.occ[y, x] = self.FREE if self.occ[y, x] else self.BLOCKED

    def enforce_border(self):
        """Mark the outer ring of cells as blocked."""
        self.occ[0, :] = self.BLOCKED
        self.occ[-1, :] = self.BLOCKED
        self.occ[:, 0] = self.BLOCKED
        self.occ[:, -1] = self.BLOCKED

    def copy(self) -> 'GridMap':
        return GridMap(self.width, self.height, self.occ.copy())

    # ------------------------------------------------------------------
    # Presets
    # ------------------------------------------------------------------

    @classmethod
    def open(cls, width: int, height: int) -> 'GridMap':
        """Empty map surrounded by walls."""
        grid = cls(width, height)
        grid.enforce_border()
        return grid

    @classmethod
    def demo(cls, width: int, height: int) -> 'GridMap':
        """Bordered map with two blocks and a corridor."""
        w, h = width, height
        grid = cls.open(w, h)

        # Blocks
        grid.occ[h // 4:h // 4 + h // 6, w // 5:w // 5 + w // 6] = cls.BLOCKED
        grid.occ[h // 2:h // 2 + h // 8, w // 2:w // 2 + w // 8] = cls.BLOCKED

        # Corridor
        grid.occ[h // 3:h // 3 + 2, w // 5 + w // 6:w - w // 5] = cls.FREE
        return grid

    @classmethod
    def random(
        cls,
        width: int,
        height: int,
        n_rects: int = 18,
        min_size: int = 3,
        max_size: int = 12,
        seed: int = 12345
    ) -> 'GridMap':
        """
        Bordered map with random rectangular obstacles.

        Same seed -> same map. Any integer is accepted: the seed is
        reduced to 32 bits, so -1 and 0xFFFFFFFF give the same map.
        """
        max_size = max(min_size, max_size)
        grid = cls.open(width, height)
        rng = np.random.default_rng(int(seed) & 0xFFFFFFFF)

        x_hi = max(1, width - max_size - 2)
        y_hi = max(1, height - max_size - 2)

        for _ in range(n_rects):
            rw = int(rng.integers(min_size, max_size + 1))
            rh = int(rng.integers(min_size, max_size + 1))
            rx = int(rng.integers(1, x_hi + 1))
            ry = int(rng.integers(1, y_hi + 1))
            # Clip so the border ring stays intact
            grid.occ[ry:min(ry + rh, height - 1), rx:min(rx + rw, width - 1)] = cls.BLOCKED

        return grid

    # ------------------------------------------------------------------
    # Map I/O
    # ------------------------------------------------------------------

    def get_map_image(self) -> np.ndarray:
        """RGB image: free = white, blocked = black."""
        rgb = np.full((self.height, self.width, 3), 255, dtype=np.uint8)
        rgb[self.occ != 0] = [0, 0, 0]
        return rgb

    def save(self, image_path: str) -> bool:
        """
        Save map as an image (black = blocked, white = free).

        Args:
            image_path: Output path (PNG recommended)

        Returns:
            True if the image was written
        """
        directory = os.path.dirname(image_path)
        if directory:
            os.makedirs(directory, exist_ok=True)

        image = np.where(self.occ != 0, 0, 255).astype(np.uint8)
        ok = bool(cv2.imwrite(image_path, image))
        if not ok:
            print(f"[Map] Failed to write {image_path}")
        return ok

    @classmethod
    def load(cls, image_path: str) -> 'GridMap':
        """
        Load map from an image file.

        Pixels with luminance < 0.5 are blocked.

        Raises:
            MapLoadError: file missing or not decodable
        """
        image = cv2.imread(image_path, cv2.IMREAD_COLOR)
        if image is None:
            raise MapLoadError(f"Cannot read map image '{image_path}'")

        # OpenCV loads BGR
        b = image[:, :, 0].astype(np.float32) / 255.0
        g = image[:, :, 1].astype(np.float32) / 255.0
        r = image[:, :, 2].astype(np.float32) / 255.0
        lum = 0.2126 * r + 0.7152 * g + 0.0722 * b

        height, width = lum.shape
        return cls(width, height, (lum < 0.5).astype(np.uint8))

    def __repr__(self) -> str:
        blocked = int(self.occ.sum())
        return f"GridMap({self.width}x{self.height}, blocked={blocked})"

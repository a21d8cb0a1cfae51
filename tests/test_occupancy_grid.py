#!/usr/bin/env python3
"""
Unit tests for the occupancy grid and map I/O.
"""

import os
import sys
import tempfile
import unittest
from pathlib import Path

import numpy as np

sys.path.insert(0, str(Path(__file__).parent.parent / 'src'))

from core.errors import MapLoadError, SandboxError
from mapping import GridMap


class TestGridMap(unittest.TestCase):

    def test_empty(self):
        grid = GridMap(5, 4)
        self.assertEqual(grid.occ.shape, (4, 5))
        self.assertEqual(len(grid.cells), 20)
        self.assertTrue(grid.is_free(0, 0))
        self.assertEqual(grid.index(2, 3), 17)

    def test_invalid_size(self):
        with self.assertRaises(ValueError):
            GridMap(0, 5)
        with self.assertRaises(ValueError):
            GridMap(3, 3, np.zeros((4, 3)))

    def test_bounds(self):
        grid = GridMap(5, 4)
        self.assertTrue(grid.in_bounds(4, 3))
        self.assertFalse(grid.in_bounds(5, 0))
        self.assertFalse(grid.in_bounds(0, -1))
        self.assertFalse(grid.is_free(-1, 0))

    def test_edits(self):
        grid = GridMap(5, 4)
        grid.set_occupied(2, 1)
        self.assertFalse(grid.is_free(2, 1))
        self.assertEqual(grid.cells[grid.index(2, 1)], GridMap.BLOCKED)

        grid.toggle(2, 1)
        self.assertTrue(grid.is_free(2, 1))
        grid.toggle(2, 1)
        self.assertFalse(grid.is_free(2, 1))

        # Out of bounds edits are ignored
        grid.toggle(10, 10)
        grid.set_occupied(-1, 2)
        self.assertEqual(int(grid.occ.sum()), 1)

    def test_open_has_border(self):
        grid = GridMap.open(6, 5)
        for x in range(6):
            self.assertFalse(grid.is_free(x, 0))
            self.assertFalse(grid.is_free(x, 4))
        for y in range(5):
            self.assertFalse(grid.is_free(0, y))
            self.assertFalse(grid.is_free(5, y))
        self.assertEqual(int(grid.occ[1:-1, 1:-1].sum()), 0)

    def test_enforce_border_after_toggle(self):
        grid = GridMap.open(6, 5)
        grid.toggle(0, 2)
        self.assertTrue(grid.is_free(0, 2))
        grid.enforce_border()
        self.assertFalse(grid.is_free(0, 2))

    def test_demo_layout(self):
        grid = GridMap.demo(120, 80)
        self.assertFalse(grid.is_free(24, 20))
        self.assertFalse(grid.is_free(60, 40))
        self.assertEqual(int(grid.occ[26:28, 44:96].sum()), 0)
        self.assertTrue(grid.is_free(1, 1))
        self.assertTrue(grid.is_free(118, 78))

    def test_random_deterministic(self):
        a = GridMap.random(60, 40, seed=7)
        b = GridMap.random(60, 40, seed=7)
        c = GridMap.random(60, 40, seed=8)
        self.assertTrue(np.array_equal(a.occ, b.occ))
        self.assertFalse(np.array_equal(a.occ, c.occ))

    def test_random_negative_seed(self):
        """Seeds wrap to 32 bits like an unsigned value."""
        grid = GridMap.random(20, 20, 3, 2, 4, -5)
        same = GridMap.random(20, 20, 3, 2, 4, 2 ** 32 - 5)
        self.assertTrue(np.array_equal(grid.occ, same.occ))
        self.assertTrue(np.all(grid.occ[0, :] == 1))

    def test_random_keeps_border(self):
        grid = GridMap.random(40, 30, n_rects=50, min_size=3, max_size=12, seed=1)
        self.assertTrue(np.all(grid.occ[0, :] == 1))
        self.assertTrue(np.all(grid.occ[-1, :] == 1))
        self.assertTrue(np.all(grid.occ[:, 0] == 1))
        self.assertTrue(np.all(grid.occ[:, -1] == 1))
        self.assertGreater(int(grid.occ[1:-1, 1:-1].sum()), 0)

    def test_copy(self):
        grid = GridMap.open(6, 5)
        other = grid.copy()
        other.toggle(2, 2)
        self.assertTrue(grid.is_free(2, 2))

    def test_map_image(self):
        grid = GridMap(3, 2)
        grid.set_occupied(1, 0)
        image = grid.get_map_image()
        self.assertEqual(image.shape, (2, 3, 3))
        self.assertEqual(list(image[0, 1]), [0, 0, 0])
        self.assertEqual(list(image[1, 1]), [255, 255, 255])


class TestMapIO(unittest.TestCase):

    def setUp(self):
        self.tmpdir = tempfile.TemporaryDirectory()

    def tearDown(self):
        self.tmpdir.cleanup()

    def test_save_load_roundtrip(self):
        grid = GridMap.random(30, 20, n_rects=6, seed=3)
        path = os.path.join(self.tmpdir.name, 'maps', 'test.png')

        self.assertTrue(grid.save(path))
        loaded = GridMap.load(path)

        self.assertEqual((loaded.width, loaded.height), (30, 20))
        self.assertTrue(np.array_equal(loaded.occ, grid.occ))

    def test_load_missing(self):
        with self.assertRaises(MapLoadError):
            GridMap.load(os.path.join(self.tmpdir.name, 'nope.png'))

    def test_load_error_is_sandbox_error(self):
        self.assertTrue(issubclass(MapLoadError, SandboxError))


if __name__ == '__main__':
    unittest.main(verbosity=2)

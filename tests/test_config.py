#!/usr/bin/env python3
"""
Unit tests for YAML configuration and CLI helpers.
"""

import os
import sys
import tempfile
import unittest
from pathlib import Path
from unittest import mock

ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(ROOT / 'src'))
sys.path.insert(0, str(ROOT))

from core import ConfigError, SandboxConfig, config_from_dict, load_config
from core.config import validate_config
import main
from main import parse_size


class TestConfigFromDict(unittest.TestCase):

    def test_defaults(self):
        config = config_from_dict(None)
        self.assertAlmostEqual(config.physics_dt, 1.0 / 120.0)
        self.assertEqual(config.follower.lookahead_distance, 2.0)
        self.assertEqual(config.follower.target_speed, 2.0)
        self.assertEqual((config.follower.kp, config.follower.ki, config.follower.kd), (1.5, 0.0, 0.3))
        self.assertEqual(config.safety.goal_stop_radius, 0.5)
        self.assertEqual(config.smoothing_iterations, 2)
        self.assertEqual(config.controller, 'pure_pursuit')
        self.assertTrue(config.planner.allow_diagonal)

    def test_sections(self):
        config = config_from_dict({
            'follower': {'kp': 2.0, 'target_speed': 3.5},
            'safety': {'goal_stop_radius': 1.0},
            'simulation': {'controller': 'pid', 'smoothing_iterations': 4},
            'map': {'width': 50, 'height': 30, 'seed': 9},
        })
        self.assertEqual(config.follower.kp, 2.0)
        self.assertEqual(config.follower.target_speed, 3.5)
        self.assertEqual(config.safety.goal_stop_radius, 1.0)
        self.assertEqual(config.controller, 'pid')
        self.assertEqual(config.smoothing_iterations, 4)
        self.assertEqual((config.map_width, config.map_height, config.seed), (50, 30, 9))

    def test_empty_section(self):
        config = config_from_dict({'planner': None})
        self.assertTrue(config.planner.allow_diagonal)

    def test_unknown_section(self):
        with self.assertRaises(ConfigError):
            config_from_dict({'lidar': {'port': '/dev/ttyUSB0'}})

    def test_unknown_key(self):
        with self.assertRaises(ConfigError):
            config_from_dict({'follower': {'gain': 1.0}})
        with self.assertRaises(ConfigError):
            config_from_dict({'map': {'depth': 3}})

    def test_section_not_mapping(self):
        with self.assertRaises(ConfigError):
            config_from_dict({'planner': 3})
        with self.assertRaises(ConfigError):
            config_from_dict([1, 2])

    def test_clamps(self):
        config = config_from_dict({
            'follower': {'lookahead_distance': 0.01},
            'simulation': {'smoothing_iterations': 10},
        })
        self.assertEqual(config.follower.lookahead_distance, 0.1)
        self.assertEqual(config.smoothing_iterations, 6)

    def test_rejects_impossible_values(self):
        for data in (
            {'simulation': {'physics_dt': 0.0}},
            {'simulation': {'max_steps_per_frame': 0}},
            {'simulation': {'controller': 'stanley'}},
            {'map': {'width': 2}},
        ):
            with self.assertRaises(ConfigError, msg=str(data)):
                config_from_dict(data)

    def test_rejects_wrong_types(self):
        for data in (
            {'follower': {'lookahead_distance': 'far'}},
            {'simulation': {'physics_dt': 'fast'}},
            {'simulation': {'smoothing_iterations': 'many'}},
            {'simulation': {'smoothing_iterations': 2.5}},
            {'planner': {'allow_diagonal': 'yes please'}},
            {'map': {'width': [120]}},
            {'safety': {'goal_stop_radius': None}},
        ):
            with self.assertRaises(ConfigError, msg=str(data)):
                config_from_dict(data)

    def test_numeric_coercion(self):
        config = config_from_dict({
            'follower': {'target_speed': 3, 'kp': '0.5'},
            'map': {'width': 50.0, 'seed': -1},
        })
        self.assertEqual(config.follower.target_speed, 3.0)
        self.assertIsInstance(config.follower.target_speed, float)
        self.assertEqual(config.follower.kp, 0.5)
        self.assertEqual(config.map_width, 50)
        self.assertIsInstance(config.map_width, int)
        self.assertEqual(config.seed, -1)

    def test_nan_physics_dt(self):
        with self.assertRaises(ConfigError):
            config_from_dict({'simulation': {'physics_dt': float('nan')}})

    def test_validate_in_place(self):
        config = SandboxConfig(smoothing_iterations=-2)
        validate_config(config)
        self.assertEqual(config.smoothing_iterations, 0)


class TestLoadConfig(unittest.TestCase):

    def setUp(self):
        self.tmpdir = tempfile.TemporaryDirectory()

    def tearDown(self):
        self.tmpdir.cleanup()

    def _write(self, text):
        path = os.path.join(self.tmpdir.name, 'config.yaml')
        with open(path, 'w') as f:
            f.write(text)
        return path

    def test_shipped_config(self):
        config = load_config(str(ROOT / 'config' / 'sandbox.yaml'))
        self.assertAlmostEqual(config.physics_dt, 1.0 / 120.0, places=6)
        self.assertEqual((config.map_width, config.map_height), (120, 80))
        self.assertEqual(config.controller, 'pure_pursuit')

    def test_load_file(self):
        path = self._write("follower:\n  lookahead_distance: 3.0\nsimulation:\n  controller: pid\n")
        config = load_config(path)
        self.assertEqual(config.follower.lookahead_distance, 3.0)
        self.assertEqual(config.controller, 'pid')

    def test_empty_file(self):
        config = load_config(self._write(""))
        self.assertEqual(config.controller, 'pure_pursuit')

    def test_missing_file(self):
        with self.assertRaises(ConfigError):
            load_config(os.path.join(self.tmpdir.name, 'missing.yaml'))

    def test_invalid_yaml(self):
        with self.assertRaises(ConfigError):
            load_config(self._write("planner: [unclosed\n"))


class TestParseSize(unittest.TestCase):

    def test_valid(self):
        self.assertEqual(parse_size('120x80'), (120, 80))
        self.assertEqual(parse_size('3x3'), (3, 3))

    def test_invalid(self):
        self.assertIsNone(parse_size('2x80'))
        self.assertIsNone(parse_size('120'))
        self.assertIsNone(parse_size('axb'))
        self.assertIsNone(parse_size('-5x10'))


class TestMainCLI(unittest.TestCase):
    """Command line runs that must end with a message, not a traceback."""

    def _run(self, *argv):
        with mock.patch.object(sys, 'argv', ['main.py', *argv]):
            return main.main()

    def test_negative_seed(self):
        code = self._run('--random', '--size', '30x20', '--seed', '-1',
                         '--no-gui', '--steps', '1', '--no-log')
        self.assertIn(code, (0, 1))

    def test_bad_config_value(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = os.path.join(tmpdir, 'bad.yaml')
            with open(path, 'w') as f:
                f.write("simulation:\n  physics_dt: fast\n")
            code = self._run('--config', path, '--no-gui', '--steps', '1', '--no-log')
        self.assertEqual(code, 1)


if __name__ == '__main__':
    unittest.main(verbosity=2)

#!/usr/bin/env python3
"""
Tests unitaires du modele unicycle et de l'arret au but.
"""

import math
import sys
import unittest
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / 'src'))

from simulation.vehicle import VehiclePose, integrate, pose_at_cell
from core.safety import GoalStopPolicy, SafetyConfig
from navigation.path_follower import ControlCommand


class TestIntegrate(unittest.TestCase):
    """Tests pour l'integration de la pose."""

    def test_straight_line(self):
        pose = integrate(VehiclePose(0.0, 0.0, 0.0), 1.0, 0.0, 1.0)
        self.assertEqual((pose.x, pose.y, pose.theta), (1.0, 0.0, 0.0))

    def test_half_turn_is_pi(self):
        pose = integrate(VehiclePose(0.0, 0.0, 0.0), 0.0, math.pi, 1.0)
        self.assertEqual(pose.theta, math.pi)

    def test_minus_pi_wraps_to_pi(self):
        pose = integrate(VehiclePose(0.0, 0.0, 0.0), 0.0, -math.pi, 1.0)
        self.assertEqual(pose.theta, math.pi)

    def test_wraps_past_pi(self):
        pose = integrate(VehiclePose(0.0, 0.0, 3.0), 0.0, 1.0, 0.5)
        self.assertAlmostEqual(pose.theta, 3.5 - 2 * math.pi)
        self.assertGreater(pose.theta, -math.pi)

    def test_position_uses_previous_heading(self):
        pose = integrate(VehiclePose(0.0, 0.0, math.pi / 2), 2.0, 1.0, 0.5)
        self.assertAlmostEqual(pose.x, 0.0)
        self.assertAlmostEqual(pose.y, 1.0)
        self.assertAlmostEqual(pose.theta, math.pi / 2 + 0.5)

    def test_in_place(self):
        pose = VehiclePose(0.0, 0.0, 0.0)
        self.assertIs(integrate(pose, 1.0, 0.0, 0.1), pose)

    def test_zero_command(self):
        pose = integrate(VehiclePose(2.5, 3.5, 1.0), 0.0, 0.0, 0.1)
        self.assertEqual((pose.x, pose.y, pose.theta), (2.5, 3.5, 1.0))


class TestPose(unittest.TestCase):

    def test_pose_at_cell(self):
        pose = pose_at_cell((3, 4))
        self.assertEqual((pose.x, pose.y, pose.theta), (3.5, 4.5, 0.0))

    def test_copy_is_independent(self):
        pose = VehiclePose(1.0, 2.0, 0.5)
        other = pose.copy()
        other.x = 9.0
        self.assertEqual(pose.x, 1.0)

    def test_distance(self):
        self.assertAlmostEqual(VehiclePose(0.0, 0.0).distance_to((3.0, 4.0)), 5.0)


class TestGoalStop(unittest.TestCase):
    """Tests pour la politique d'arret au but."""

    PATH = [(0.0, 0.0), (5.0, 0.0)]

    def setUp(self):
        self.policy = GoalStopPolicy(SafetyConfig(goal_stop_radius=0.5))

    def test_inside_radius(self):
        cmd = self.policy.apply(ControlCommand(2.0, 1.0), VehiclePose(4.8, 0.1, 0.0), self.PATH)
        self.assertEqual(cmd.as_tuple(), (0.0, 0.0))
        self.assertTrue(cmd.reached_goal)

    def test_outside_radius(self):
        incoming = ControlCommand(2.0, 1.0)
        cmd = self.policy.apply(incoming, VehiclePose(4.0, 0.0, 0.0), self.PATH)
        self.assertEqual(cmd.as_tuple(), (2.0, 1.0))
        self.assertFalse(cmd.reached_goal)
        self.assertIsNot(cmd, incoming)

    def test_empty_path(self):
        self.assertEqual(self.policy.distance_to_goal(VehiclePose(), []), math.inf)
        cmd = self.policy.apply(ControlCommand(1.0, 0.0), VehiclePose(), [])
        self.assertEqual(cmd.as_tuple(), (1.0, 0.0))


if __name__ == '__main__':
    unittest.main(verbosity=2)

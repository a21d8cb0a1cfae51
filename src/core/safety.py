"""
Safety Module

Stop policies applied by the simulation loop on top of whatever the
active tracker computed.

Features:
- Goal proximity stop: zero command inside a radius around the final
  path point
"""

import math
from typing import List, Optional, Tuple
from dataclasses import dataclass, replace

from navigation.path_follower import ControlCommand


@dataclass
class SafetyConfig:
    """Safety parameters."""
    goal_stop_radius: float = 0.5       # cells - HARD STOP near goal


class GoalStopPolicy:
    """
    Forces (v, omega) to zero once the vehicle is close to the goal.

    Must be called every physics step, after the tracker and before
    integration.

    Usage:
        policy = GoalStopPolicy()

        cmd = tracker.compute(pose, path, dt)
        cmd = policy.apply(cmd, pose, path)
    """

    def __init__(self, config: Optional[SafetyConfig] = None):
        self.config = config or SafetyConfig()

    def distance_to_goal(self, pose, path: List[Tuple[float, float]]) -> float:
        if not path:
            return math.inf
        gx, gy = path[-1]
        return math.hypot(gx - pose.x, gy - pose.y)

    def apply(self, command: ControlCommand, pose,
              path: List[Tuple[float, float]]) -> ControlCommand:
        """Return the command, zeroed if the goal radius is reached."""
        if self.distance_to_goal(pose, path) < self.config.goal_stop_radius:
            return ControlCommand(0.0, 0.0, reached_goal=True)
        return replace(command)

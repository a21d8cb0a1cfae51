"""
Path Following Controllers

Converts a smoothed path into (linear velocity, angular velocity)
commands for a unicycle vehicle.

Implements:
- Pure Pursuit: geometric tracking of a lookahead point
- PID on lateral error: feedback on the signed distance to the path

Both share the closest-point-then-lookahead primitive from geometry and
the same interface, so the simulation can switch between them at runtime.

References:
- Pure Pursuit: "Implementation of the Pure Pursuit Path Tracking Algorithm"
  (R. Craig Coulter, CMU, 1992)
"""

import math
from abc import ABC, abstractmethod
from typing import List, Tuple, Optional
from dataclasses import dataclass

from .geometry import (
    MIN_LOOKAHEAD, lateral_error, lookahead_point, world_to_body
)


@dataclass
class FollowerConfig:
    """Path follower configuration."""
    # Pure Pursuit parameters
    lookahead_distance: float = 2.0     # cells
    min_lookahead: float = 0.5          # editor lower bound
    max_lookahead: float = 10.0         # editor upper bound

    # Speed control
    target_speed: float = 2.0           # cells/s
    max_speed: float = 10.0

    # PID gains (lateral error)
    kp: float = 1.5
    ki: float = 0.0
    kd: float = 0.3


@dataclass
class ControlCommand:
    """Output control command for the vehicle."""
    velocity: float         # linear, cells/s
    omega: float            # angular, rad/s (positive = left)
    reached_goal: bool = False

    def as_tuple(self) -> Tuple[float, float]:
        return self.velocity, self.omega


@dataclass
class PIDState:
    """PID accumulators, owned by the simulation state."""
    integral: float = 0.0
    prev_error: float = 0.0

    def reset(self):
        self.integral = 0.0
        self.prev_error = 0.0


class PathTracker(ABC):
    """Common interface of the path following strategies."""

    name = "tracker"

    def __init__(self, config: Optional[FollowerConfig] = None):
        self.config = config or FollowerConfig()

    @abstractmethod
    def compute(self, pose, path: List[Tuple[float, float]], dt: float) -> ControlCommand:
        """
        Compute a control command.

        Args:
            pose: Vehicle pose (x, y, theta attributes)
            path: Smoothed path as list of (x, y)
            dt: Physics time step in seconds
        """

    def reset(self):
        """Reset internal state (nothing by default)."""


class PurePursuitFollower(PathTracker):
    """
    Pure Pursuit path following controller (unicycle form).

    How it works:
    1. Find the closest point on the path
    2. Walk `lookahead_distance` along the path to get the target
    3. Steer along the arc through the target:
       curvature = 2 * sin(alpha) / L, omega = v * curvature

    Usage:
        follower = PurePursuitFollower()

        # In control loop:
        cmd = follower.compute(pose, smooth_path, dt)
        integrate(pose, cmd.velocity, cmd.omega, dt)
    """

    name = "pure_pursuit"

    def target_point(self, pose, path: List[Tuple[float, float]]) -> Tuple[float, float]:
        """Lookahead target on the path (vehicle position if path too short)."""
        return lookahead_point((pose.x, pose.y), path, self.config.lookahead_distance)

    def compute(self, pose, path: List[Tuple[float, float]], dt: float = 0.0) -> ControlCommand:
        if not path or len(path) < 2:
            return ControlCommand(0.0, 0.0)

        tx, ty = self.target_point(pose, path)

        # Transform target into robot frame
        xr, yr = world_to_body(tx - pose.x, ty - pose.y, pose.theta)

        v = self.config.target_speed
        alpha = math.atan2(yr, xr)
        lookahead = max(MIN_LOOKAHEAD, self.config.lookahead_distance)
        omega = (2.0 * v * math.sin(alpha) / lookahead) if lookahead > 1e-4 else 0.0

        return ControlCommand(v, omega)


class PIDLateralFollower(PathTracker):
    """
    PID controller on the signed lateral error.

    omega = kp * e + ki * integral(e) + kd * de/dt

    The accumulators live in a PIDState handed in at construction, so
    whoever owns the simulation state can reset them when the path is
    replaced and the pose is reset.
    """

    name = "pid"

    def __init__(self, config: Optional[FollowerConfig] = None,
                 state: Optional[PIDState] = None):
        super().__init__(config)
        self.state = state if state is not None else PIDState()

    def compute(self, pose, path: List[Tuple[float, float]], dt: float) -> ControlCommand:
        if not path or len(path) < 2:
            return ControlCommand(0.0, 0.0)

        error = lateral_error((pose.x, pose.y), path)

        self.state.integral += error * dt
        derivative = (error - self.state.prev_error) / dt if dt > 1e-6 else 0.0
        self.state.prev_error = error

        cfg = self.config
        omega = cfg.kp * error + cfg.ki * self.state.integral + cfg.kd * derivative
        return ControlCommand(cfg.target_speed, omega)

    def reset(self):
        self.state.reset()


TRACKERS = {
    PurePursuitFollower.name: PurePursuitFollower,
    PIDLateralFollower.name: PIDLateralFollower,
}


def make_tracker(name: str, config: Optional[FollowerConfig] = None,
                 pid_state: Optional[PIDState] = None) -> PathTracker:
    """Build a tracker by name ('pure_pursuit' or 'pid')."""
    if name == PIDLateralFollower.name:
        return PIDLateralFollower(config, pid_state)
    if name == PurePursuitFollower.name:
        return PurePursuitFollower(config)
    raise ValueError(f"Unknown controller '{name}', expected one of {sorted(TRACKERS)}")

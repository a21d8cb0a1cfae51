"""
Navigation module for grid path planning and path following.

Components:
- GlobalPlanner: A* shortest path on occupancy grid
- chaikin / smooth_path: Corner-cutting path smoothing
- PurePursuitFollower: Geometric path tracking
- PIDLateralFollower: PID on signed lateral error
"""

from .global_planner import GlobalPlanner, PlannerConfig, plan, path_cost
from .path_smoothing import chaikin, smooth_path, to_cell_centers, path_length
from .geometry import normalize_angle, lateral_error, lookahead_point, closest_point_on_path
from .path_follower import (
    PurePursuitFollower, PIDLateralFollower, PathTracker, FollowerConfig,
    ControlCommand, PIDState, make_tracker
)

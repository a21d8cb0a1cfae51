"""
Planning & control sandbox.

Owns the whole simulation state and exposes the two entry points used by
the GUI, the CLI and the tests:

- replan(): grid + start/goal -> A* cell path -> smoothed path
- step():   pose + smoothed path -> tracker command -> goal stop -> integrate

Replanning only happens on edit events. Physics runs at a fixed time step
fed by advance(), which converts wall-clock frame time into a bounded
number of steps.
"""

import math
import time
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from core.config import SandboxConfig
from core.safety import GoalStopPolicy
from mapping.occupancy_grid import GridMap
from navigation.geometry import lateral_error
from navigation.global_planner import GlobalPlanner
from navigation.path_follower import (
    ControlCommand, PIDLateralFollower, PIDState, PathTracker, PurePursuitFollower, make_tracker
)
from navigation.path_smoothing import path_length, smooth_path
from simulation.telemetry import TelemetryLogger
from simulation.vehicle import VehiclePose, integrate, pose_at_cell


Cell = Tuple[int, int]
Point = Tuple[float, float]

PRESETS = ('open', 'demo', 'random')


@dataclass
class PlanResult:
    """Output of a replan."""
    raw_path: List[Cell]
    smooth_path: List[Point]
    elapsed_ms: float

    @property
    def found(self) -> bool:
        return bool(self.raw_path)


@dataclass
class StepResult:
    """Output of one physics step (telemetry)."""
    pose: VehiclePose
    command: ControlCommand
    lateral_error: float


@dataclass
class SimulationState:
    """
    Everything that changes while the sandbox runs.

    Grouped here so that a pose-resetting replan is a single call
    (reset_tracking) instead of scattered assignments.
    """
    grid: GridMap
    start: Cell
    goal: Cell
    pose: VehiclePose = field(default_factory=VehiclePose)
    raw_path: List[Cell] = field(default_factory=list)
    smooth_path: List[Point] = field(default_factory=list)
    path_length: float = 0.0
    pid: PIDState = field(default_factory=PIDState)
    command: ControlCommand = field(default_factory=lambda: ControlCommand(0.0, 0.0))
    last_error: float = 0.0
    smoothing_iterations: int = 2
    controller: str = "pure_pursuit"
    paused: bool = False
    sim_time: float = 0.0
    last_plan_ms: float = 0.0

    # Error statistics
    err_sum_sq: float = 0.0
    err_count: int = 0

    # Random map generation
    deterministic: bool = True
    rand_seed: int = 12345

    @property
    def rms_error(self) -> float:
        if self.err_count == 0:
            return 0.0
        return math.sqrt(self.err_sum_sq / self.err_count)

    @property
    def has_path(self) -> bool:
        return len(self.smooth_path) > 0

    def reset_statistics(self):
        self.err_sum_sq = 0.0
        self.err_count = 0

    def reset_tracking(self):
        """
        Pose back to start cell center, PID accumulators cleared.

        Error statistics survive: they cover the whole run on one map and
        are only cleared when the map changes (reset_statistics).
        """
        self.pose = pose_at_cell(self.start)
        self.pid.reset()
        self.command = ControlCommand(0.0, 0.0)
        self.last_error = 0.0


class Sandbox:
    """
    Interactive planning & control simulation.

    Usage:
        sandbox = Sandbox(SandboxConfig(), GridMap.open(10, 10))
        sandbox.set_goal((8, 8))

        # Every rendered frame:
        sandbox.advance(frame_seconds)
        print(sandbox.state.pose)
    """

    def __init__(
        self,
        config: Optional[SandboxConfig] = None,
        grid: Optional[GridMap] = None,
        telemetry: Optional[TelemetryLogger] = None,
        start: Optional[Cell] = None,
        goal: Optional[Cell] = None
    ):
        self.config = config or SandboxConfig()
        cfg = self.config

        if grid is None:
            grid = GridMap.demo(cfg.map_width, cfg.map_height)

        self.state = SimulationState(
            grid=grid,
            start=start if start is not None else (1, 1),
            goal=goal if goal is not None else (grid.width - 2, grid.height - 2),
            smoothing_iterations=cfg.smoothing_iterations,
            controller=cfg.controller,
            rand_seed=cfg.seed,
        )

        self.planner = GlobalPlanner(cfg.planner)
        self.pure_pursuit = make_tracker(PurePursuitFollower.name, cfg.follower)
        self.pid = make_tracker(PIDLateralFollower.name, cfg.follower, self.state.pid)
        self.goal_stop = GoalStopPolicy(cfg.safety)
        self.telemetry = telemetry

        self._accumulator = 0.0

        self.replan(reset_pose=True)

    # ------------------------------------------------------------------
    # Replan trigger
    # ------------------------------------------------------------------

    @property
    def tracker(self) -> PathTracker:
        if self.state.controller == self.pid.name:
            return self.pid
        return self.pure_pursuit

    def replan(self, reset_pose: bool = False) -> PlanResult:
        """
        Run A* + smoothing on the current grid/start/goal.

        Args:
            reset_pose: Also put the vehicle back on the start cell and
                clear the tracking state

        Returns:
            PlanResult with raw path, smoothed path and planning time (ms)
        """
        s = self.state
        t0 = time.perf_counter()

        s.raw_path = self.planner.plan(s.grid, s.start, s.goal)
        s.smooth_path = smooth_path(s.raw_path, s.smoothing_iterations)

        elapsed_ms = (time.perf_counter() - t0) * 1000.0
        s.path_length = path_length(s.smooth_path)
        s.last_plan_ms = elapsed_ms

        if reset_pose:
            s.reset_tracking()

        return PlanResult(list(s.raw_path), list(s.smooth_path), elapsed_ms)

    def resmooth(self):
        """Recompute the smoothed path from the current raw path."""
        s = self.state
        s.smooth_path = smooth_path(s.raw_path, s.smoothing_iterations)
        s.path_length = path_length(s.smooth_path)

    # ------------------------------------------------------------------
    # Step trigger
    # ------------------------------------------------------------------

    def step(self, dt: Optional[float] = None) -> Optional[StepResult]:
        """
        Advance the physics by one time step.

        Returns:
            StepResult, or None when paused or without a path (no motion)
        """
        s = self.state
        if dt is None:
            dt = self.config.physics_dt
        if s.paused or not s.has_path:
            return None

        command = self.tracker.compute(s.pose, s.smooth_path, dt)
        command = self.goal_stop.apply(command, s.pose, s.smooth_path)
        s.command = command

        integrate(s.pose, command.velocity, command.omega, dt)

        err = lateral_error(s.pose.position, s.smooth_path)
        s.last_error = err
        s.err_sum_sq += err * err
        s.err_count += 1
        s.sim_time += dt

        if self.telemetry is not None:
            self.telemetry.record(
                s.sim_time, s.pose.x, s.pose.y, s.pose.theta,
                command.velocity, command.omega, err,
                s.path_length, s.last_plan_ms
            )

        return StepResult(s.pose.copy(), command, err)

    def advance(self, frame_seconds: float) -> int:
        """
        Feed elapsed wall-clock time and run the due physics steps.

        At most max_steps_per_frame steps are run; if budget is still
        left after that, it is dropped.

        Returns:
            Number of physics steps executed
        """
        dt = self.config.physics_dt
        self._accumulator += max(0.0, frame_seconds)

        steps = 0
        while self._accumulator >= dt and steps < self.config.max_steps_per_frame:
            self.step(dt)
            self._accumulator -= dt
            steps += 1

        if self._accumulator >= dt:
            self._accumulator = 0.0

        return steps

    # ------------------------------------------------------------------
    # Editing
    # ------------------------------------------------------------------

    def set_start(self, cell: Cell) -> Optional[PlanResult]:
        """Move start to a free cell, replan and reset the vehicle."""
        if not self.state.grid.is_free(*cell):
            return None
        self.state.start = (int(cell[0]), int(cell[1]))
        return self.replan(reset_pose=True)

    def set_goal(self, cell: Cell) -> Optional[PlanResult]:
        """Move goal to a free cell and replan from the current pose."""
        if not self.state.grid.is_free(*cell):
            return None
        self.state.goal = (int(cell[0]), int(cell[1]))
        return self.replan(reset_pose=False)

    def toggle_obstacle(self, cell: Cell) -> Optional[PlanResult]:
        """Flip a cell, keep the border walls, replan without reset."""
        grid = self.state.grid
        if not grid.in_bounds(*cell):
            return None
        grid.toggle(*cell)
        grid.enforce_border()
        return self.replan(reset_pose=False)

    def set_smoothing(self, iterations: int):
        self.state.smoothing_iterations = max(
            0, min(self.config.max_smoothing_iterations, int(iterations))
        )
        self.resmooth()

    def adjust_lookahead(self, delta: float) -> float:
        cfg = self.config.follower
        cfg.lookahead_distance = max(cfg.min_lookahead,
                                     min(cfg.max_lookahead, cfg.lookahead_distance + delta))
        return cfg.lookahead_distance

    def adjust_speed(self, delta: float) -> float:
        """Change target speed (shared by both trackers)."""
        cfg = self.config.follower
        cfg.target_speed = max(0.0, min(cfg.max_speed, cfg.target_speed + delta))
        return cfg.target_speed

    def toggle_controller(self) -> str:
        s = self.state
        s.controller = self.pid.name if s.controller != self.pid.name else self.pure_pursuit.name
        return s.controller

    def toggle_pause(self) -> bool:
        self.state.paused = not self.state.paused
        return self.state.paused

    def set_grid(self, grid: GridMap) -> PlanResult:
        """Replace the map, replan with pose reset and clear the error statistics."""
        self.state.grid = grid
        self.state.reset_statistics()
        return self.replan(reset_pose=True)

    def load_preset(self, name: str) -> PlanResult:
        """Switch to a preset map: 'open', 'demo' or 'random'."""
        cfg = self.config
        w, h = self.state.grid.width, self.state.grid.height

        if name == 'open':
            grid = GridMap.open(w, h)
        elif name == 'demo':
            grid = GridMap.demo(w, h)
        elif name == 'random':
            grid = GridMap.random(w, h, cfg.random_rects * 2, 2, cfg.rect_max, 42)
        else:
            raise ValueError(f"Unknown preset '{name}', expected one of {PRESETS}")

        return self.set_grid(grid)

    def new_random_map(self) -> PlanResult:
        """
        Generate a new random map and move start/goal to the corners.

        Deterministic mode walks the seed sequence; otherwise the seed
        comes from the clock.
        """
        cfg = self.config
        s = self.state
        w, h = s.grid.width, s.grid.height

        seed = s.rand_seed if s.deterministic else time.time_ns() & 0xFFFFFFFF
        grid = GridMap.random(w, h, cfg.random_rects, cfg.rect_min, cfg.rect_max, seed)

        s.start = (1, 1) if grid.is_free(1, 1) else (2, 2)
        s.goal = (w - 2, h - 2) if grid.is_free(w - 2, h - 2) else (w - 3, h - 3)
        s.grid = grid

        s.reset_statistics()
        result = self.replan(reset_pose=True)
        if s.deterministic:
            s.rand_seed += 1
        return result

    def toggle_deterministic(self) -> bool:
        self.state.deterministic = not self.state.deterministic
        return self.state.deterministic

    # ------------------------------------------------------------------

    def lookahead_target(self) -> Optional[Point]:
        """Pure pursuit target for display (None without path)."""
        s = self.state
        if not s.has_path:
            return None
        return self.pure_pursuit.target_point(s.pose, s.smooth_path)

    def close(self):
        if self.telemetry is not None:
            self.telemetry.close()

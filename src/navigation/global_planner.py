"""
Global Path Planner - A* Algorithm

Finds the shortest path between two cells of the occupancy grid.

Algorithm: A* (pronounced "A star")
- 8-connected grid, cost 1 for straight moves and sqrt(2) for diagonals
- Euclidean heuristic (admissible and consistent for these costs)
- Guaranteed to find the shortest path if one exists

Equal-cost alternatives are not disambiguated: the node order in the
heap decides which one comes out.

References:
- Red Blob Games A* tutorial: https://www.redblobgames.com/pathfinding/a-star/
- Nav2 NavFn Planner (ROS2 uses this same approach)
"""

import math
import heapq
import numpy as np
from typing import List, Tuple, Optional
from dataclasses import dataclass, field


Cell = Tuple[int, int]

SQRT2 = math.sqrt(2.0)


@dataclass
class PlannerConfig:
    """Global planner configuration."""
    allow_diagonal: bool = True         # Allow 8-directional movement


@dataclass(order=True)
class Node:
    """A* search node (heap entry)."""
    f_cost: float                       # g + h (for priority queue)
    g_cost: float = field(compare=False)
    x: int = field(compare=False)
    y: int = field(compare=False)


class GlobalPlanner:
    """
    A* global path planner on occupancy grid.

    Usage:
        planner = GlobalPlanner()

        path = planner.plan(grid, start=(1, 1), goal=(8, 8))
        # path = [(1, 1), (2, 2), ..., (8, 8)]   or [] if unreachable
    """

    # 8-directional movement costs
    DIRECTIONS_8 = [
        (1, 0, 1.0), (1, 1, SQRT2), (0, 1, 1.0), (-1, 1, SQRT2),
        (-1, 0, 1.0), (-1, -1, SQRT2), (0, -1, 1.0), (1, -1, SQRT2)
    ]

    # 4-directional movement costs
    DIRECTIONS_4 = [
        (1, 0, 1.0), (0, 1, 1.0), (-1, 0, 1.0), (0, -1, 1.0)
    ]

    def __init__(self, config: Optional[PlannerConfig] = None):
        self.config = config or PlannerConfig()
        self.last_expanded = 0

    def plan(self, grid, start: Cell, goal: Cell) -> List[Cell]:
        """
        Plan path from start to goal.

        Args:
            grid: GridMap instance
            start: (x, y) start cell
            goal: (x, y) goal cell

        Returns:
            List of (x, y) cells from start to goal inclusive,
            or an empty list if no path exists
        """
        sx, sy = int(start[0]), int(start[1])
        gx, gy = int(goal[0]), int(goal[1])

        if not grid.in_bounds(sx, sy):
            print(f"[Planner] Start {start} is outside map")
            return []
        if not grid.in_bounds(gx, gy):
            print(f"[Planner] Goal {goal} is outside map")
            return []
        if not grid.is_free(sx, sy):
            print(f"[Planner] Start {start} is inside an obstacle")
            return []
        if not grid.is_free(gx, gy):
            print(f"[Planner] Goal {goal} is inside an obstacle")
            return []

        path = self._astar(grid, sx, sy, gx, gy)
        if not path:
            print(f"[Planner] No path found from {start} to {goal}")
        return path

    def _astar(self, grid, sx: int, sy: int, gx: int, gy: int) -> List[Cell]:
        """
        A* search with lazy deletion.

        Stale heap entries (cell already closed) are skipped on pop
        instead of being removed when a cheaper cost is found.
        """
        directions = self.DIRECTIONS_8 if self.config.allow_diagonal else self.DIRECTIONS_4
        w, h = grid.width, grid.height
        blocked = grid.occ

        g_costs = np.full(w * h, np.inf)
        came_from = np.full(w * h, -1, dtype=np.int64)
        closed = np.zeros(w * h, dtype=bool)

        start_id = sy * w + sx
        goal_id = gy * w + gx
        g_costs[start_id] = 0.0

        open_set = [Node(self._heuristic(sx, sy, gx, gy), 0.0, sx, sy)]
        self.last_expanded = 0
        found = False

        while open_set:
            current = heapq.heappop(open_set)
            cur_id = current.y * w + current.x
            if closed[cur_id]:
                continue
            closed[cur_id] = True
            self.last_expanded += 1

            if cur_id == goal_id:
                found = True
                break

            cur_g = g_costs[cur_id]
            for dx, dy, cost in directions:
                nx, ny = current.x + dx, current.y + dy

                if not (0 <= nx < w and 0 <= ny < h):
                    continue
                if blocked[ny, nx]:
                    continue

                n_id = ny * w + nx
                if closed[n_id]:
                    continue

                new_g = cur_g + cost
                if new_g < g_costs[n_id]:
                    g_costs[n_id] = new_g
                    came_from[n_id] = cur_id
                    f = new_g + self._heuristic(nx, ny, gx, gy)
                    heapq.heappush(open_set, Node(f, new_g, nx, ny))

        if not found:
            return []

        return self._reconstruct_path(came_from, start_id, goal_id, w)

    @staticmethod
    def _heuristic(x1: int, y1: int, x2: int, y2: int) -> float:
        """Straight-line distance to the goal."""
        return math.hypot(x1 - x2, y1 - y2)

    @staticmethod
    def _reconstruct_path(came_from: np.ndarray, start_id: int,
                          goal_id: int, width: int) -> List[Cell]:
        """Walk back-pointers from goal to start."""
        path = []
        cur = goal_id
        while cur != -1:
            path.append((int(cur % width), int(cur // width)))
            if cur == start_id:
                break
            cur = int(came_from[cur])
        path.reverse()
        return path


def plan(grid, start: Cell, goal: Cell) -> List[Cell]:
    """Plan with the default 8-connected planner."""
    return GlobalPlanner().plan(grid, start, goal)


def path_cost(path: List[Cell]) -> float:
    """Total move cost of a raw cell path (1 straight, sqrt(2) diagonal)."""
    total = 0.0
    for (x0, y0), (x1, y1) in zip(path, path[1:]):
        total += SQRT2 if (x0 != x1 and y0 != y1) else 1.0
    return total

#!/usr/bin/env python3
"""
Planning Demo

Plans on a preset map, tracks the path with both controllers and
compares them:
- A* path planning
- Chaikin smoothing
- Pure Pursuit vs PID on lateral error

Usage:
    python scripts/demo_planning.py
    python scripts/demo_planning.py --map random --seed 7 --save plan.png
    python scripts/demo_planning.py --no-viz
"""

import sys
import os
import argparse

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from core import SandboxConfig
from mapping import GridMap
from simulation import Sandbox


def make_grid(name: str, width: int, height: int, seed: int) -> GridMap:
    if name == 'open':
        return GridMap.open(width, height)
    if name == 'random':
        return GridMap.random(width, height, seed=seed)
    return GridMap.demo(width, height)


def track(grid: GridMap, controller: str, smoothing: int, max_steps: int):
    """Run one controller until the goal stop triggers."""
    config = SandboxConfig(controller=controller, smoothing_iterations=smoothing)
    sandbox = Sandbox(config, grid.copy())
    s = sandbox.state

    trail = [s.pose.position]
    for _ in range(max_steps):
        sandbox.step()
        trail.append(s.pose.position)
        if s.command.reached_goal:
            break

    return sandbox, trail


def main():
    parser = argparse.ArgumentParser(description='Planning Demo')
    parser.add_argument('--map', choices=['open', 'demo', 'random'], default='demo')
    parser.add_argument('--size', default='60x40')
    parser.add_argument('--seed', type=int, default=12345)
    parser.add_argument('--smoothing', type=int, default=2)
    parser.add_argument('--steps', type=int, default=6000)
    parser.add_argument('--save', help='Save figure instead of showing it')
    parser.add_argument('--no-viz', action='store_true')
    args = parser.parse_args()

    width, height = (int(v) for v in args.size.split('x'))
    grid = make_grid(args.map, width, height, args.seed)

    print("=" * 60)
    print("PLANNING DEMO")
    print("=" * 60)

    results = {}
    for controller in ('pure_pursuit', 'pid'):
        sandbox, trail = track(grid, controller, args.smoothing, args.steps)
        s = sandbox.state
        if not s.has_path:
            print("No path found!")
            return 1
        results[controller] = (sandbox, trail)
        print(f"{controller:>12}: t={s.sim_time:6.2f}s  rms_err={s.rms_error:.4f}  "
              f"goal={'yes' if s.command.reached_goal else 'no'}")

    sandbox = results['pure_pursuit'][0]
    print(f"\nPath: {len(sandbox.state.raw_path)} cells, "
          f"length={sandbox.state.path_length:.2f}, plan={sandbox.state.last_plan_ms:.2f}ms")

    if args.no_viz:
        return 0

    import matplotlib
    if args.save:
        matplotlib.use('Agg')
    import matplotlib.pyplot as plt
    from visualization import plot_plan

    fig, axes = plt.subplots(1, 2, figsize=(14, 6))
    for ax, (controller, (sb, trail)) in zip(axes, results.items()):
        plot_plan(sb.state.grid, sb.state.raw_path, sb.state.smooth_path, trail,
                  title=f"{controller} (rms={sb.state.rms_error:.3f})", ax=ax)
    plt.tight_layout()

    if args.save:
        fig.savefig(args.save, dpi=120)
        print(f"Saved {args.save}")
    else:
        plt.show()
    return 0


if __name__ == '__main__':
    sys.exit(main())

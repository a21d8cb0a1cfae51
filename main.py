#!/usr/bin/env python3
"""
GRIDNAV SANDBOX - Planification et suivi de trajectoire
=======================================================

Point d'entree principal avec deux modes de fonctionnement:

1. MODE GRAPHIQUE (par defaut):
   python main.py
   - Fenetre matplotlib interactive
   - Edition de la carte, du depart et de l'arrivee a la souris
   - Replanification A* + lissage a chaque modification

2. MODE CONSOLE:
   python main.py --no-gui --steps 2000
   - Simulation a pas fixe sans affichage
   - Resume (distance au but, erreur laterale RMS) en fin de run

Cartes:
    python main.py assets/maps/saved.png       # image noir = obstacle
    python main.py --random --size 120x80 --rects 18 --min 3 --max 12 --seed 12345
    (sans option: carte de demonstration)

Usage:
    python main.py --controller pid --smoothing 3
    python main.py --config config/sandbox.yaml --no-gui --steps 5000
"""

import sys
import argparse
from pathlib import Path
from typing import Optional, Tuple

# Ajouter src au path
sys.path.insert(0, str(Path(__file__).parent / 'src'))


def parse_size(text: str) -> Optional[Tuple[int, int]]:
    """'120x80' -> (120, 80); None if invalid or not larger than 2x2."""
    if 'x' not in text:
        return None
    w_text, _, h_text = text.partition('x')
    try:
        w, h = int(w_text), int(h_text)
    except ValueError:
        return None
    if w > 2 and h > 2:
        return w, h
    return None


def build_grid(args, config):
    """Cree la carte selon les options (aleatoire, image, ou demo)."""
    from core import MapLoadError
    from mapping import GridMap

    if args.random:
        rect_max = max(config.rect_min, config.rect_max)
        grid = GridMap.random(config.map_width, config.map_height,
                              config.random_rects, config.rect_min, rect_max, config.seed)
        print(f"Generated random map: {config.map_width}x{config.map_height}, "
              f"rects={config.random_rects}, size=[{config.rect_min},{rect_max}], "
              f"seed={config.seed}")
        return grid

    if args.map:
        try:
            grid = GridMap.load(args.map)
            print(f"Loaded map {args.map}: {grid.width}x{grid.height}")
            return grid
        except MapLoadError as e:
            print(f"[ERREUR] {e}, using demo.")

    return GridMap.demo(config.map_width, config.map_height)


def build_config(args):
    """Configuration: fichier YAML puis surcharges CLI."""
    from core import SandboxConfig, load_config
    from core.config import validate_config

    config = load_config(args.config) if args.config else SandboxConfig()

    if args.size:
        size = parse_size(args.size)
        if size is None:
            print(f"[ATTENTION] Taille invalide '{args.size}', "
                  f"on garde {config.map_width}x{config.map_height}")
        else:
            config.map_width, config.map_height = size
    if args.rects is not None:
        config.random_rects = max(0, args.rects)
    if args.min is not None:
        config.rect_min = max(1, args.min)
    if args.max is not None:
        config.rect_max = max(config.rect_min, args.max)
    if args.seed is not None:
        config.seed = args.seed
    if args.controller:
        config.controller = args.controller
    if args.smoothing is not None:
        config.smoothing_iterations = args.smoothing

    validate_config(config)
    return config


def run_headless(sandbox, steps: int):
    """Execute la simulation sans affichage."""
    s = sandbox.state
    dt = sandbox.config.physics_dt

    if not s.has_path:
        print("[Sandbox] Aucun chemin entre depart et arrivee")
        return 1

    print(f"Path: {len(s.raw_path)} cells, {len(s.smooth_path)} points, "
          f"length={s.path_length:.2f}, plan={s.last_plan_ms:.2f}ms")

    for i in range(steps):
        sandbox.step(dt)
        if s.command.reached_goal:
            print(f"\n[OK] Goal reached at step {i} (t={s.sim_time:.2f}s)")
            break
        if i % 240 == 0:
            print(f"  Step {i}: pos=({s.pose.x:.2f}, {s.pose.y:.2f}) "
                  f"th={s.pose.theta:+.2f} err={s.last_error:+.3f}")

    goal = s.smooth_path[-1]
    print(f"\nFinal distance to goal: {s.pose.distance_to(goal):.3f}")
    print(f"Lateral error RMS: {s.rms_error:.4f}")
    return 0


def main():
    parser = argparse.ArgumentParser(
        description='GRIDNAV SANDBOX - A* + pure pursuit / PID',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Exemples:
    python main.py
    python main.py --random --seed 7 --controller pid
    python main.py maps/office.png --smoothing 4
    python main.py --no-gui --steps 3000
"""
    )

    parser.add_argument('map', nargs='?', help='Image de carte (noir = obstacle)')
    parser.add_argument('--config', help='Fichier de configuration YAML')

    map_group = parser.add_argument_group('Carte aleatoire')
    map_group.add_argument('--random', '-r', action='store_true',
                           help='Generer une carte aleatoire')
    map_group.add_argument('--size', help='Taille WxH (defaut: 120x80)')
    map_group.add_argument('--rects', type=int, help='Nombre de rectangles')
    map_group.add_argument('--min', type=int, help='Taille min des rectangles')
    map_group.add_argument('--max', type=int, help='Taille max des rectangles')
    map_group.add_argument('--seed', type=int, help='Graine aleatoire')

    sim_group = parser.add_argument_group('Simulation')
    sim_group.add_argument('--controller', choices=['pure_pursuit', 'pid'],
                           help='Controleur de suivi')
    sim_group.add_argument('--smoothing', type=int,
                           help='Iterations de lissage (0-6)')
    sim_group.add_argument('--no-gui', action='store_true',
                           help='Mode console sans visualisation graphique')
    sim_group.add_argument('--steps', type=int, default=2400,
                           help='Pas physiques en mode console (defaut: 2400)')
    sim_group.add_argument('--no-log', action='store_true',
                           help='Desactiver la telemetrie CSV')

    args = parser.parse_args()

    from core import SandboxError
    from simulation import Sandbox, TelemetryLogger, default_log_path

    try:
        config = build_config(args)
    except SandboxError as e:
        print(f"[ERREUR] {e}")
        return 1

    grid = build_grid(args, config)
    telemetry = None if args.no_log else TelemetryLogger(default_log_path(config.log_dir))
    sandbox = Sandbox(config, grid, telemetry=telemetry)

    try:
        if args.no_gui:
            return run_headless(sandbox, args.steps)

        from visualization import SandboxView
        SandboxView(sandbox).run()
        return 0
    finally:
        sandbox.close()


if __name__ == '__main__':
    sys.exit(main())

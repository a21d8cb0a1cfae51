"""
Sandbox configuration.

Component configs (PlannerConfig, FollowerConfig, SafetyConfig) live next
to their components; SandboxConfig groups them with the simulation and
map settings. A YAML file can override any of them:

    planner:
      allow_diagonal: true
    follower:
      lookahead_distance: 2.0
      target_speed: 2.0
      kp: 1.5
    safety:
      goal_stop_radius: 0.5
    simulation:
      physics_dt: 0.008333
      smoothing_iterations: 2
      controller: pure_pursuit
    map:
      width: 120
      height: 80
"""

import os
from dataclasses import dataclass, field, fields
from typing import Any, Dict, Optional

import yaml

from core.errors import ConfigError
from navigation.global_planner import PlannerConfig
from navigation.geometry import MIN_LOOKAHEAD
from navigation.path_follower import TRACKERS, FollowerConfig
from core.safety import SafetyConfig


@dataclass
class SandboxConfig:
    """Top-level configuration."""
    planner: PlannerConfig = field(default_factory=PlannerConfig)
    follower: FollowerConfig = field(default_factory=FollowerConfig)
    safety: SafetyConfig = field(default_factory=SafetyConfig)

    # Simulation
    physics_dt: float = 1.0 / 120.0     # seconds per physics step
    max_steps_per_frame: int = 5        # catch-up cap
    smoothing_iterations: int = 2
    max_smoothing_iterations: int = 6
    controller: str = "pure_pursuit"    # or "pid"

    # Map
    map_width: int = 120
    map_height: int = 80
    random_rects: int = 18
    rect_min: int = 3
    rect_max: int = 12
    seed: int = 12345

    # Output
    log_dir: str = "logs"
    cell_scale: float = 8.0             # pixels per cell (display)


# YAML key -> SandboxConfig attribute, for the flat sections
_SIMULATION_KEYS = {
    'physics_dt': 'physics_dt',
    'max_steps_per_frame': 'max_steps_per_frame',
    'smoothing_iterations': 'smoothing_iterations',
    'max_smoothing_iterations': 'max_smoothing_iterations',
    'controller': 'controller',
    'log_dir': 'log_dir',
    'cell_scale': 'cell_scale',
}

_MAP_KEYS = {
    'width': 'map_width',
    'height': 'map_height',
    'random_rects': 'random_rects',
    'rect_min': 'rect_min',
    'rect_max': 'rect_max',
    'seed': 'seed',
}


def _coerce(value: Any, kind: type, key: str, section: str) -> Any:
    """Convert a YAML value to the type of the field it sets."""
    try:
        if kind is bool:
            if not isinstance(value, bool):
                raise TypeError(f"expected true/false, got {value!r}")
            return value
        if kind is int and isinstance(value, float) and not value.is_integer():
            raise ValueError(f"expected an integer, got {value!r}")
        return kind(value)
    except (TypeError, ValueError) as e:
        raise ConfigError(f"Invalid value for '{key}' in section '{section}': {value!r}") from e


def _apply_dataclass(target, values: Dict[str, Any], section: str):
    types = {f.name: f.type for f in fields(target)}
    for key, value in values.items():
        if key not in types:
            raise ConfigError(f"Unknown key '{key}' in section '{section}'")
        setattr(target, key, _coerce(value, types[key], key, section))


def _apply_flat(config: SandboxConfig, values: Dict[str, Any],
                mapping: Dict[str, str], section: str):
    types = {f.name: f.type for f in fields(config)}
    for key, value in values.items():
        if key not in mapping:
            raise ConfigError(f"Unknown key '{key}' in section '{section}'")
        attr = mapping[key]
        setattr(config, attr, _coerce(value, types[attr], key, section))


def config_from_dict(data: Optional[Dict[str, Any]]) -> SandboxConfig:
    """Build a SandboxConfig from a nested dict (YAML layout)."""
    config = SandboxConfig()
    data = data or {}
    if not isinstance(data, dict):
        raise ConfigError("Configuration root must be a mapping")

    for section, values in data.items():
        if values is None:
            continue
        if not isinstance(values, dict):
            raise ConfigError(f"Section '{section}' must be a mapping")

        if section == 'planner':
            _apply_dataclass(config.planner, values, section)
        elif section == 'follower':
            _apply_dataclass(config.follower, values, section)
        elif section == 'safety':
            _apply_dataclass(config.safety, values, section)
        elif section == 'simulation':
            _apply_flat(config, values, _SIMULATION_KEYS, section)
        elif section == 'map':
            _apply_flat(config, values, _MAP_KEYS, section)
        else:
            raise ConfigError(f"Unknown section '{section}'")

    validate_config(config)
    return config


def validate_config(config: SandboxConfig):
    """Clamp soft limits and reject impossible values."""
    try:
        lookahead = float(config.follower.lookahead_distance)
        smoothing = int(config.smoothing_iterations)
    except (TypeError, ValueError) as e:
        raise ConfigError(f"Invalid lookahead or smoothing value: {e}") from e

    config.follower.lookahead_distance = max(MIN_LOOKAHEAD, lookahead)
    config.smoothing_iterations = max(0, min(config.max_smoothing_iterations, smoothing))

    if not config.physics_dt > 0:
        raise ConfigError(f"physics_dt must be positive, got {config.physics_dt}")
    if config.max_steps_per_frame < 1:
        raise ConfigError("max_steps_per_frame must be >= 1")
    if config.map_width <= 2 or config.map_height <= 2:
        raise ConfigError(f"Map size must be > 2x2, got {config.map_width}x{config.map_height}")
    if config.controller not in TRACKERS:
        raise ConfigError(f"Unknown controller '{config.controller}'")


def load_config(path: str) -> SandboxConfig:
    """
    Load configuration from a YAML file.

    Raises:
        ConfigError: missing file, invalid YAML or unknown keys
    """
    if not os.path.exists(path):
        raise ConfigError(f"Config file not found: {path}")

    try:
        with open(path, 'r') as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    return config_from_dict(data)

"""
Core infrastructure module.
- Configuration management
- Error types
- Safety systems (goal stop)
"""

from .errors import SandboxError, MapLoadError, ConfigError
from .safety import GoalStopPolicy, SafetyConfig
from .config import SandboxConfig, load_config, config_from_dict

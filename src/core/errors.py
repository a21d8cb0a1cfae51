"""
Sandbox exceptions.

Planning and control never raise for data conditions (no path, short path,
degenerate geometry all map to sentinel results). Exceptions are only used
at the I/O edges: map files and configuration files.
"""


class SandboxError(Exception):
    """Base class for sandbox errors."""


class MapLoadError(SandboxError):
    """Map image could not be read or decoded."""


class ConfigError(SandboxError):
    """Configuration file missing or invalid."""

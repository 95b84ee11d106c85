"""Ownerguard Infrastructure Layer.

This layer provides services used by the CLI around the coverage core:
- ConfigManager: Layered configuration (defaults, YAML file, environment, CLI)
- Logger: Structured logging system

The rules package does not depend on this layer.
"""

from .config_manager import ConfigManager, ConfigSource
from .logger import Logger, LogLevel

__all__ = [
    # Logger exports
    "Logger",
    "LogLevel",
    # ConfigManager exports
    "ConfigSource",
    "ConfigManager",
]

#!/usr/bin/env python3
"""Layered configuration manager for Ownerguard.

This module provides configuration management with:
- 4-level precedence hierarchy
- YAML configuration files
- Environment variable overrides (from an explicit mapping)
- Dot-path access to nested keys
- Thread-safe operations

Example:
    >>> config = ConfigManager(environ={"OWNERGUARD_IGNORE_CASE": "true"})
    >>> config.load_file("ownerguard.yaml")
    >>> config.get("ownerguard.codeowners_path")
    '.github/CODEOWNERS'
"""

import copy
import threading
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

from ownerguard.core.constants import DEFAULT_CODEOWNERS_PATH, EnvVar, ErrorCode
from ownerguard.core.errors import ConfigurationError

# Nesting separator in environment variable names: OWNERGUARD_LOGGING__LEVEL
ENV_NESTING = "__"


class ConfigSource(Enum):
    """Configuration source precedence levels."""

    COMPILED_DEFAULTS = 1  # Lowest precedence
    CONFIG_FILE = 2
    ENVIRONMENT = 3
    CLI_ARGS = 4  # Highest precedence


class ConfigManager:
    """Thread-safe layered configuration manager.

    Manages configuration from multiple sources with precedence:
    1. Compiled defaults (lowest)
    2. Config file (YAML)
    3. Environment variables (OWNERGUARD_*)
    4. CLI arguments (highest)
    """

    DEFAULT_CONFIG = {
        "ownerguard": {
            "codeowners_path": DEFAULT_CODEOWNERS_PATH,
            "ignore_case": False,
            "logging": {
                "level": "INFO",
                "file": None,
            },
        }
    }

    def __init__(
        self, config_file: Optional[str] = None, environ: Optional[Mapping[str, str]] = None
    ):
        """Initialize configuration manager.

        Args:
            config_file: Optional YAML config file to load
            environ: Environment mapping to read OWNERGUARD_* overrides from
        """
        self._config: Dict[ConfigSource, Dict[str, Any]] = {}
        self._lock = threading.RLock()

        self._config[ConfigSource.COMPILED_DEFAULTS] = copy.deepcopy(self.DEFAULT_CONFIG)

        if config_file:
            self.load_file(config_file)

        if environ:
            self.load_environment(environ)

    def load_file(self, file_path: str, source: ConfigSource = ConfigSource.CONFIG_FILE) -> None:
        """Load configuration from YAML file.

        Args:
            file_path: Path to YAML config file
            source: Configuration source level

        Raises:
            ConfigurationError: If file cannot be loaded or parsed
        """
        path = Path(file_path).expanduser()

        if not path.is_file():
            raise ConfigurationError(f"Config file not found: {file_path}", ErrorCode.NOT_FOUND)

        try:
            with open(path, "r", encoding="utf-8") as f:
                config_data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigurationError(f"YAML parse error in {file_path}: {e}") from e
        except OSError as e:
            raise ConfigurationError(f"Error loading config {file_path}: {e}") from e

        # An empty file is an empty layer
        if config_data is None:
            config_data = {}
        if not isinstance(config_data, dict):
            raise ConfigurationError(f"Invalid config format in {file_path}")

        with self._lock:
            self._config[source] = config_data

    def load_dict(
        self, config_data: Dict[str, Any], source: ConfigSource = ConfigSource.CLI_ARGS
    ) -> None:
        """Load configuration from dictionary.

        Args:
            config_data: Configuration dictionary
            source: Configuration source level
        """
        with self._lock:
            self._config[source] = copy.deepcopy(config_data)

    def load_environment(self, environ: Mapping[str, str]) -> None:
        """Load configuration from environment variables.

        Variables in format OWNERGUARD_<KEY> or OWNERGUARD_<SECTION>__<KEY>.
        Example: OWNERGUARD_LOGGING__LEVEL=DEBUG
        """
        env_config: Dict[str, Any] = {}
        prefix = EnvVar.CONFIG_PREFIX

        for key, value in environ.items():
            if not key.startswith(prefix) or len(key) == len(prefix):
                continue

            parts = key[len(prefix) :].lower().split(ENV_NESTING)

            current = env_config
            for part in parts[:-1]:
                current = current.setdefault(part, {})
                if not isinstance(current, dict):
                    raise ConfigurationError(f"Conflicting environment override: {key}")

            current[parts[-1]] = self._parse_env_value(value)

        if env_config:
            with self._lock:
                self._config[ConfigSource.ENVIRONMENT] = {"ownerguard": env_config}

    def _parse_env_value(self, value: str) -> Any:
        """Parse environment variable value.

        Args:
            value: String value from environment

        Returns:
            Parsed value (bool, int, or str)
        """
        if value.lower() in ("true", "yes", "on"):
            return True
        if value.lower() in ("false", "no", "off"):
            return False

        try:
            return int(value)
        except ValueError:
            pass

        return value

    def get(self, key: str, default: Any = None) -> Any:
        """Get configuration value by key.

        Args:
            key: Dot-separated key path (e.g., "ownerguard.logging.level")
            default: Default value if key not found

        Returns:
            Configuration value or default
        """
        with self._lock:
            # Search from highest to lowest precedence
            for source in sorted(self._config.keys(), key=lambda s: s.value, reverse=True):
                value = self._get_nested(self._config[source], key)
                if value is not None:
                    return value

            return default

    def _get_nested(self, config: Dict[str, Any], key: str) -> Optional[Any]:
        current: Any = config
        for part in key.split("."):
            if not isinstance(current, dict) or part not in current:
                return None
            current = current[part]
        return current

#!/usr/bin/env python3
"""Layered configuration manager for ksfilter.

This module provides configuration management with:
- Precedence layers (defaults, config file, environment, CLI arguments)
- YAML configuration files
- Environment variable overrides
- Thread-safe operations

The keyspace filter reads its raw spec list from
``metadata.schema.refreshed-keyspaces``.

Example:
    >>> config = ConfigManager()
    >>> config.load_file("ksfilter.yaml")
    >>> config.get("logging.level", default="WARNING")
    >>> config.get_refreshed_keyspaces()
    ['ks1', '!/.*2/']
"""

import copy
import os
import threading
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from ksfilter.core.constants import DEFAULT_CONFIG, ConfigKey, ErrorCode

ENV_PREFIX = "KSFILTER_"


class ConfigSource(Enum):
    """Configuration source precedence levels."""

    COMPILED_DEFAULTS = 1  # Lowest precedence
    USER_CONFIG = 2
    ENVIRONMENT = 3
    CLI_ARGS = 4  # Highest precedence


class ConfigError(Exception):
    """Configuration error."""

    def __init__(self, message: str, error_code: ErrorCode = ErrorCode.INVALID_INPUT):
        self.message = message
        self.error_code = error_code
        super().__init__(message)


def split_specs(value: str) -> List[str]:
    """Split a comma-separated spec list.

    A comma inside an unterminated ``/.../`` regex belongs to the regex, so
    ``/^ks[0-9]{1,2}$/,ks1`` yields two specs.

    Args:
        value: Raw list, e.g. from an environment variable

    Returns:
        Non-blank specs in order
    """
    specs: List[str] = []
    current = ""

    for part in value.split(","):
        current = f"{current},{part}" if current else part
        token = current.strip().lstrip("!")
        if token.startswith("/") and (len(token) < 2 or not token.endswith("/")):
            continue
        specs.append(current)
        current = ""

    # Trailing unterminated regex is kept as-is and reported by the compiler
    if current:
        specs.append(current)

    return [spec for spec in specs if spec.strip()]


class ConfigManager:
    """Thread-safe layered configuration manager.

    Manages configuration from multiple sources with precedence:
    1. Compiled defaults (lowest)
    2. User config file (YAML)
    3. Environment variables (KSFILTER_*)
    4. CLI arguments (highest)
    """

    def __init__(self, config_file: Optional[str] = None, load_environment: bool = True):
        """Initialize configuration manager.

        Args:
            config_file: Optional config file to load
            load_environment: Whether to read KSFILTER_* variables
        """
        self._config: Dict[ConfigSource, Dict[str, Any]] = {}
        self._lock = threading.RLock()

        self._config[ConfigSource.COMPILED_DEFAULTS] = copy.deepcopy(DEFAULT_CONFIG)

        if config_file:
            self.load_file(config_file)

        if load_environment:
            self._load_environment()

    def load_file(self, file_path: str, source: ConfigSource = ConfigSource.USER_CONFIG) -> None:
        """Load configuration from YAML file.

        Args:
            file_path: Path to YAML config file
            source: Configuration source level

        Raises:
            ConfigError: If file cannot be loaded or parsed
        """
        path = Path(file_path).expanduser().resolve()

        if not path.exists():
            raise ConfigError(f"Config file not found: {file_path}", ErrorCode.NOT_FOUND)

        try:
            with open(path, "r") as f:
                config_data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigError(f"YAML parse error in {file_path}: {e}", ErrorCode.INVALID_INPUT)
        except OSError as e:
            raise ConfigError(f"Error loading config {file_path}: {e}", ErrorCode.INTERNAL_ERROR)

        # An empty file is an empty layer
        if config_data is None:
            config_data = {}

        if not isinstance(config_data, dict):
            raise ConfigError(f"Invalid config format in {file_path}", ErrorCode.INVALID_INPUT)

        with self._lock:
            self._config[source] = config_data

    def _load_environment(self) -> None:
        """Load configuration from environment variables.

        Environment variables in format: KSFILTER_SECTION__KEY=value.
        Double underscores separate levels, single underscores become dashes.
        Example: KSFILTER_METADATA__SCHEMA__REFRESHED_KEYSPACES="ks1,!/.*2/"
        """
        env_config: Dict[str, Any] = {}

        for key, value in os.environ.items():
            if not key.startswith(ENV_PREFIX):
                continue

            parts = [part.replace("_", "-") for part in key[len(ENV_PREFIX):].lower().split("__")]

            # Build nested dictionary
            current = env_config
            for part in parts[:-1]:
                if part not in current:
                    current[part] = {}
                current = current[part]

            # Spec lists stay raw: "2024" and "yes" are keyspace names
            if ".".join(parts) == ConfigKey.REFRESHED_KEYSPACES:
                current[parts[-1]] = value
            else:
                current[parts[-1]] = self._parse_env_value(value)

        if env_config:
            with self._lock:
                self._config[ConfigSource.ENVIRONMENT] = env_config

    def _parse_env_value(self, value: str) -> Any:
        """Parse environment variable value.

        Args:
            value: String value from environment

        Returns:
            Parsed value (int, float, bool, or str)
        """
        if value.lower() in ("true", "yes"):
            return True
        if value.lower() in ("false", "no"):
            return False

        try:
            return int(value)
        except ValueError:
            pass

        try:
            return float(value)
        except ValueError:
            pass

        return value

    def get(self, key: str, default: Any = None) -> Any:
        """Get configuration value by key.

        Args:
            key: Dot-separated key path (e.g., "logging.level")
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
        """Get value from nested dictionary using dot notation."""
        current = config

        for part in key.split("."):
            if not isinstance(current, dict):
                return None
            if part not in current:
                return None
            current = current[part]

        return current

    def set(self, key: str, value: Any, source: ConfigSource = ConfigSource.CLI_ARGS) -> None:
        """Set configuration value.

        Args:
            key: Dot-separated key path
            value: Value to set
            source: Configuration source level
        """
        with self._lock:
            if source not in self._config:
                self._config[source] = {}

            parts = key.split(".")
            current = self._config[source]

            for part in parts[:-1]:
                if part not in current:
                    current[part] = {}
                current = current[part]

            current[parts[-1]] = value

    def get_refreshed_keyspaces(self) -> List[str]:
        """Get the raw keyspace filter specs.

        A single string is split with split_specs(), which is how lists
        arrive from environment variables. Scalars (YAML turns ``2024`` into
        an int) are converted back to strings.

        Returns:
            Spec strings in configured order

        Raises:
            ConfigError: If the value or one of its elements is a mapping,
                a nested list or null
        """
        value = self.get(ConfigKey.REFRESHED_KEYSPACES, default=[])

        if isinstance(value, (str, int, float)):
            return split_specs(str(value))

        if isinstance(value, list) and all(
            isinstance(spec, (str, int, float)) for spec in value
        ):
            return [str(spec) for spec in value]

        raise ConfigError(
            f"Expected a list of strings for {ConfigKey.REFRESHED_KEYSPACES}, got {value!r}"
        )

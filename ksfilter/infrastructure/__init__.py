"""ksfilter Infrastructure Layer.

Services used by the rule compiler and the CLI:
- ConfigManager: Layered YAML/environment configuration
- Logger: Structured logging system
"""

from .config_manager import ConfigError
from .config_manager import ConfigManager as Config
from .config_manager import ConfigSource, split_specs
from .logger import Logger, LogLevel, create_console_handler, get_logger, set_global_logger

__all__ = [
    # Logger exports
    "Logger",
    "LogLevel",
    "create_console_handler",
    "get_logger",
    "set_global_logger",
    # ConfigManager exports
    "ConfigSource",
    "ConfigError",
    "Config",
    "split_specs",
]

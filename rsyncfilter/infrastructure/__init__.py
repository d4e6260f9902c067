"""rsyncfilter Infrastructure Layer.

Services shared by the rule engine and the command line:
- ConfigManager: Layered YAML/environment configuration
- Logger: Structured logging
"""

from .config_manager import ConfigError, ConfigManager, ConfigSource
from .logger import Logger, LogLevel, get_logger, set_global_logger

__all__ = [
    # Logger exports
    "Logger",
    "LogLevel",
    "get_logger",
    "set_global_logger",
    # ConfigManager exports
    "ConfigSource",
    "ConfigError",
    "ConfigManager",
]

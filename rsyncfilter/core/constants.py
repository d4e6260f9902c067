"""
rsyncfilter Foundation: Constants and Type Definitions

This module provides package-wide constants, error codes, limits and
configuration keys.
"""
from enum import IntEnum

# Version information
RSYNCFILTER_VERSION = "1.0.0"


# Error codes (0-9 range)
class ErrorCode(IntEnum):
    """Standardized error codes for rsyncfilter operations."""

    INVALID_INPUT = 1  # Bad path, invalid argument
    NOT_FOUND = 2  # File or resource doesn't exist
    PATTERN_SYNTAX = 3  # Rule text cannot be compiled
    INTERNAL_ERROR = 6  # Bug in rsyncfilter


class Limits:
    """Limits applied while compiling filter rules."""

    # Rule limits
    MAX_RULE_LENGTH = 4096
    MAX_RULE_WILDCARDS = 256


# Characters that open a wildcard rule; rules without any of them treat
# backslashes literally.
WILDCARD_CHARS = "*?["

# Characters a backslash may escape in a wildcard rule.
ESCAPABLE_CHARS = "*?[-]#;\\/"

# Characters with a regex meaning but no wildcard meaning.
REGEX_SPECIAL_CHARS = ".^$+{}|()"

# Line prefixes that mark a comment in a rule file.
COMMENT_PREFIXES = ("#", ";")

EXCLUDE_PREFIX = "- "
INCLUDE_PREFIX = "+ "


# Configuration keys
class ConfigKey:
    """Configuration key constants."""

    # Top-level keys
    LOGGING = "logging"
    RULES = "rules"

    # Logging configuration
    LOG_LEVEL = "level"
    LOG_FILE = "file"

    # Rules configuration
    RULES_FILES = "files"
    RULES_ROOT = "root"


# Default configuration values
DEFAULT_CONFIG = {
    ConfigKey.LOGGING: {
        ConfigKey.LOG_LEVEL: "WARNING",
        ConfigKey.LOG_FILE: None,
    },
    ConfigKey.RULES: {
        ConfigKey.RULES_FILES: [],
        ConfigKey.RULES_ROOT: None,
    },
}

"""
ksfilter Core: Constants and Type Definitions

This module provides package-wide constants, error codes, configuration keys
and rule enums shared by the rule compiler, configuration and CLI layers.
"""
from enum import Enum, IntEnum

# Version information
KSFILTER_VERSION = "1.0.0"


# Error codes
class ErrorCode(IntEnum):
    """Standardized error codes for ksfilter operations."""

    SUCCESS = 0  # Operation completed successfully
    INVALID_INPUT = 1  # Bad spec list, invalid configuration
    NOT_FOUND = 2  # Config file doesn't exist
    INTERNAL_ERROR = 6  # Bug in ksfilter


# Rule types for filtering
class RuleAction(Enum):
    """Which rule set a compiled rule belongs to."""

    INCLUDE = "include"
    EXCLUDE = "exclude"


class RuleKind(Enum):
    """How a compiled rule tests a name."""

    EXACT = "exact"  # Literal equality
    PATTERN = "pattern"  # Regular expression search


class DiagnosticKind(Enum):
    """Problems reported while compiling a spec list.

    None of these abort compilation.
    """

    UNRECOGNIZED_SPEC_SHAPE = "unrecognized_spec_shape"
    INVALID_REGEX_SYNTAX = "invalid_regex_syntax"
    EXCLUSIONS_WITH_EXACT_INCLUSIONS = "exclusions_with_exact_inclusions"


# Configuration keys
class ConfigKey:
    """Configuration key constants (dot-separated paths)."""

    REFRESHED_KEYSPACES = "metadata.schema.refreshed-keyspaces"
    LOG_LEVEL = "logging.level"


# Schema table column used by the server-side clause
KEYSPACE_NAME_COLUMN = "keyspace_name"

# Label used when a filter is built without an owning session
DEFAULT_LABEL = "ksfilter"
TEST_LABEL = "test"

# Default configuration values
DEFAULT_CONFIG = {
    "metadata": {
        "schema": {
            "refreshed-keyspaces": [],
        },
    },
    "logging": {
        "level": "WARNING",
    },
}

"""
Ownerguard Core: Constants

This module provides system-wide constants, error codes and exit codes
shared by the rule compiler, the coverage matcher and the CLI.
"""
from enum import IntEnum

# Version information
OWNERGUARD_VERSION = "1.0.0"


# Error codes carried by OwnerguardError subclasses
class ErrorCode(IntEnum):
    """Standardized error codes for Ownerguard operations."""

    SUCCESS = 0  # Operation completed successfully
    INVALID_INPUT = 1  # Bad pattern, invalid configuration
    NOT_FOUND = 2  # Rule file or config file doesn't exist
    PERMISSION_DENIED = 3  # File exists but cannot be read


# Process exit codes reported to the CI host
class ExitCode(IntEnum):
    """Exit codes returned by the ``ownerguard`` command."""

    SUCCESS = 0  # Every changed file is covered
    UNCOVERED_FILES = 1  # The check ran and found violations
    CONFIGURATION_ERROR = 2  # The check could not run (rule file, config, context)
    PATTERN_ERROR = 3  # The rule file contains a malformed pattern
    INTERNAL_ERROR = 4  # Unexpected failure; the check did not complete
    INTERRUPTED = 130


# Rule file syntax
COMMENT_PREFIX = "#"
NEGATION_PREFIX = "!"
PATH_SEPARATOR = "/"
CURRENT_DIR_PREFIX = "./"

# Conventional rule file location, relative to the repository root
DEFAULT_CODEOWNERS_PATH = ".github/CODEOWNERS"


# Configuration keys
class ConfigKey:
    """Configuration key constants."""

    CODEOWNERS_PATH = "ownerguard.codeowners_path"
    IGNORE_CASE = "ownerguard.ignore_case"
    LOG_LEVEL = "ownerguard.logging.level"
    LOG_FILE = "ownerguard.logging.file"


# Environment variables read by the context layer
class EnvVar:
    """Environment variable names consumed from the CI host."""

    TOKEN = "GITHUB_TOKEN"
    REF = "GITHUB_REF"
    EVENT_PATH = "GITHUB_EVENT_PATH"
    CONFIG_PREFIX = "OWNERGUARD_"

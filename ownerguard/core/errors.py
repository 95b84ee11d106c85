"""
Ownerguard Core: Exception hierarchy.

Two failure kinds abort a check before any path is evaluated:

- ConfigurationError: the rule file, config file or CI context is missing or
  unreadable. The host should fail closed.
- PatternError: a rule line cannot be compiled. The message names the line so
  the operator can fix the rule file.

Uncovered paths are never reported through exceptions; they are the normal
result of a check.
"""
from typing import Optional

from ownerguard.core.constants import ErrorCode


class OwnerguardError(Exception):
    """Base exception for all Ownerguard errors."""

    def __init__(self, message: str, error_code: ErrorCode = ErrorCode.INVALID_INPUT):
        """Initialize OwnerguardError.

        Args:
            message: Error message
            error_code: Associated error code
        """
        self.message = message
        self.error_code = error_code
        super().__init__(message)


class ConfigurationError(OwnerguardError):
    """Rule file, configuration or required context is missing or unreadable."""


class PatternError(OwnerguardError):
    """A rule pattern is syntactically invalid."""

    def __init__(self, pattern: str, line: Optional[int], reason: str):
        """Initialize PatternError.

        Args:
            pattern: Offending pattern text as written in the rule file
            line: 1-based line of the rule file (or position in the pattern list)
            reason: Short description of what is wrong
        """
        self.pattern = pattern
        self.line = line
        self.reason = reason
        location = f"line {line}" if line is not None else "unknown line"
        super().__init__(
            f"Invalid pattern {pattern!r} at {location}: {reason}", ErrorCode.INVALID_INPUT
        )

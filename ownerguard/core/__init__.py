"""Ownerguard Core - Shared constants and error types.

Import specific names from submodules:
    from ownerguard.core.constants import ErrorCode, ExitCode
    from ownerguard.core.errors import ConfigurationError, PatternError
"""

from ownerguard.core import constants, errors

__all__ = [
    "constants",
    "errors",
]

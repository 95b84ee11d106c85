"""Ownerguard - CODEOWNERS coverage checking for changed files.

Verifies that every file changed in a pull request is covered by at least
one rule of a CODEOWNERS-style file, using gitignore pattern semantics.

Example:
    >>> from ownerguard import check, compile_matcher
    >>> matcher = compile_matcher("*.js  @alice\\n*.ts  @bob\\n")
    >>> check(matcher, ["a.js", "b.ts", "c.go"])
    ['c.go']
"""

from ownerguard.checker import CoverageReport, check, compile_matcher, load_matcher, run_check
from ownerguard.core.constants import OWNERGUARD_VERSION
from ownerguard.core.errors import ConfigurationError, OwnerguardError, PatternError
from ownerguard.rules import CompiledMatcher, CoverageMatcher

__version__ = OWNERGUARD_VERSION

__all__ = [
    "check",
    "compile_matcher",
    "load_matcher",
    "run_check",
    "CoverageReport",
    "CompiledMatcher",
    "CoverageMatcher",
    "OwnerguardError",
    "ConfigurationError",
    "PatternError",
]

"""Entry contract for ownership-coverage checks.

Example:
    >>> matcher = compile_matcher("*.js  @alice\\n")
    >>> check(matcher, ["index.js", "./index.js", "readme.md"])
    ['readme.md']
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Optional, Tuple, Union

from ownerguard.rules.engine import CompiledMatcher, CoverageMatcher, CoverageObserver
from ownerguard.rules.parser import load_rule_file, parse_rule_text


@dataclass(frozen=True)
class CoverageReport:
    """Outcome of checking a change set."""

    checked: Tuple[str, ...]
    uncovered: Tuple[str, ...]

    @property
    def passed(self) -> bool:
        return not self.uncovered


def compile_matcher(rule_file_text: str, case_sensitive: bool = True) -> CompiledMatcher:
    """Compile rule file contents into a matcher.

    Raises:
        PatternError: If a rule line holds a malformed pattern
    """
    return CoverageMatcher.compile(parse_rule_text(rule_file_text), case_sensitive)


def load_matcher(
    path: Optional[Union[str, Path]] = None, case_sensitive: bool = True
) -> CompiledMatcher:
    """Read a rule file and compile it.

    Raises:
        ConfigurationError: If the rule file is missing or unreadable
        PatternError: If a rule line holds a malformed pattern
    """
    return compile_matcher(load_rule_file(path), case_sensitive)


def check(
    matcher: CompiledMatcher,
    changed_paths: Iterable[str],
    observer: Optional[CoverageObserver] = None,
) -> List[str]:
    """Return the changed paths no rule covers, in input order."""
    return matcher.check_all(changed_paths, observer)


def run_check(
    matcher: CompiledMatcher,
    changed_paths: Iterable[str],
    observer: Optional[CoverageObserver] = None,
) -> CoverageReport:
    """Check a change set and wrap the outcome in a CoverageReport."""
    paths = tuple(changed_paths)
    uncovered = check(matcher, paths, observer)
    return CoverageReport(checked=paths, uncovered=tuple(uncovered))

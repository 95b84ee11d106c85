#!/usr/bin/env python3
"""Coverage matcher for changed-file paths.

This module evaluates paths against an ordered CODEOWNERS rule list:
- Gitignore-style last-match-wins evaluation
- Negated rules (``!pattern``) un-cover paths matched earlier
- Files inside a covered directory stay covered; a later negation cannot
  re-open a directory that an earlier rule matched
- Batch evaluation returning every uncovered path, in input order
- Observer callback per evaluated path for progress reporting

A CompiledMatcher is immutable once built, so one instance can be shared by
any number of threads evaluating disjoint path lists.

Example:
    >>> matcher = CoverageMatcher.compile(["*.js", "!special.js"])
    >>> matcher.is_covered("index.js")
    True
    >>> matcher.check_all(["index.js", "special.js", "README.md"])
    ['special.js', 'README.md']
"""

from dataclasses import dataclass
from typing import Callable, Iterable, List, Optional, Sequence, Tuple, Union

from ownerguard.core.constants import PATH_SEPARATOR
from ownerguard.rules.parser import RuleLine
from ownerguard.rules.patterns import GlobPattern, compile_glob, normalize_path

# Called with (path, covered) for every path checked
CoverageObserver = Callable[[str, bool], None]


@dataclass(frozen=True)
class Rule:
    """A compiled rule. Position in the matcher determines precedence."""

    glob: GlobPattern
    index: int
    line: Optional[int] = None
    owners: Tuple[str, ...] = ()

    @property
    def pattern(self) -> str:
        return self.glob.source

    @property
    def negated(self) -> bool:
        return self.glob.negated

    def matches(self, path: str, is_dir: bool = False) -> bool:
        return self.glob.matches(path, is_dir)


@dataclass(frozen=True)
class CompiledMatcher:
    """Ordered, immutable rule set ready for matching."""

    rules: Tuple[Rule, ...] = ()
    case_sensitive: bool = True

    def last_match(self, path: str) -> Optional[Rule]:
        """Find the rule that decides coverage of a path.

        Ancestor directories are checked first, outermost to innermost. When
        a positive rule is the last to match an ancestor, that rule decides
        for everything below it. Otherwise the last rule matching the path
        itself decides.

        Args:
            path: Changed file path (a leading "./" is ignored)

        Returns:
            The deciding rule, or None if no rule matches
        """
        segments = normalize_path(path).split(PATH_SEPARATOR)
        depth = len(segments)
        rule: Optional[Rule] = None
        for i in range(1, depth + 1):
            rule = self._last_entry_match(PATH_SEPARATOR.join(segments[:i]), is_dir=i < depth)
            if rule is not None and not rule.negated:
                return rule
        return rule

    def _last_entry_match(self, entry: str, is_dir: bool) -> Optional[Rule]:
        for rule in reversed(self.rules):
            if rule.matches(entry, is_dir):
                return rule
        return None

    def is_covered(self, path: str) -> bool:
        """Check if a path is covered.

        A path is covered when its deciding rule (see last_match) is not a negation.

        Args:
            path: Changed file path

        Returns:
            True if some owner is responsible for the path
        """
        rule = self.last_match(path)
        return rule is not None and not rule.negated

    def check_all(
        self, paths: Iterable[str], observer: Optional[CoverageObserver] = None
    ) -> List[str]:
        """Evaluate every path and collect the uncovered ones.

        Does not stop at the first uncovered path.

        Args:
            paths: Changed file paths
            observer: Optional callback notified with (path, covered) per path

        Returns:
            Uncovered paths, in input order
        """
        uncovered: List[str] = []
        for path in paths:
            covered = self.is_covered(path)
            if observer is not None:
                observer(path, covered)
            if not covered:
                uncovered.append(path)
        return uncovered

    def __len__(self) -> int:
        """Return number of rules."""
        return len(self.rules)


class CoverageMatcher:
    """Builder compiling rule patterns into a CompiledMatcher.

    Patterns are compiled as they are added so that a malformed pattern is
    reported with its line before any path is evaluated.
    """

    def __init__(self, case_sensitive: bool = True):
        """Initialize coverage matcher.

        Args:
            case_sensitive: Whether patterns are case-sensitive
        """
        self._case_sensitive = case_sensitive
        self._rules: List[Rule] = []

    def add_pattern(
        self, pattern: str, line: Optional[int] = None, owners: Sequence[str] = ()
    ) -> Rule:
        """Compile and append a pattern.

        Args:
            pattern: Rule pattern, optionally prefixed with "!"
            line: Line in the rule file (defaults to the rule's 1-based position)
            owners: Owner tokens following the pattern

        Returns:
            The compiled rule

        Raises:
            PatternError: If the pattern is malformed
        """
        index = len(self._rules)
        if line is None:
            line = index + 1
        glob = compile_glob(pattern, line=line, case_sensitive=self._case_sensitive)
        rule = Rule(glob=glob, index=index, line=line, owners=tuple(owners))
        self._rules.append(rule)
        return rule

    def add_rule_line(self, rule_line: RuleLine) -> Rule:
        """Compile and append a parsed rule file line."""
        return self.add_pattern(rule_line.pattern, line=rule_line.line, owners=rule_line.owners)

    def build(self) -> CompiledMatcher:
        """Freeze the rules added so far into a CompiledMatcher."""
        return CompiledMatcher(rules=tuple(self._rules), case_sensitive=self._case_sensitive)

    @classmethod
    def compile(
        cls, patterns: Iterable[Union[str, RuleLine]], case_sensitive: bool = True
    ) -> CompiledMatcher:
        """Compile an ordered sequence of patterns or rule lines.

        Args:
            patterns: Pattern strings or parsed RuleLines, in precedence order
            case_sensitive: Whether patterns are case-sensitive

        Returns:
            Compiled matcher

        Raises:
            PatternError: If any pattern is malformed
        """
        builder = cls(case_sensitive=case_sensitive)
        for entry in patterns:
            if isinstance(entry, RuleLine):
                builder.add_rule_line(entry)
            else:
                builder.add_pattern(entry)
        return builder.build()

    def __len__(self) -> int:
        """Return number of rules added."""
        return len(self._rules)

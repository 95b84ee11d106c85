"""Ownerguard Rules System.

This module provides CODEOWNERS parsing and coverage matching:
- RuleLine / parse_rule_text: rule file lines in file order
- GlobPattern / compile_glob: gitignore-style pattern compilation
- CoverageMatcher / CompiledMatcher: last-match-wins coverage evaluation

A path is covered when the last rule matching it is not a negation, or when
one of its parent directories is covered.
"""

from .engine import CompiledMatcher, CoverageMatcher, CoverageObserver, Rule
from .parser import RuleLine, load_rule_file, parse_patterns, parse_rule_text
from .patterns import GlobPattern, compile_glob, normalize_path

__all__ = [
    # Rule file parsing
    "RuleLine",
    "parse_rule_text",
    "parse_patterns",
    "load_rule_file",
    # Pattern compilation
    "GlobPattern",
    "compile_glob",
    "normalize_path",
    # Coverage matching
    "CoverageObserver",
    "Rule",
    "CompiledMatcher",
    "CoverageMatcher",
]

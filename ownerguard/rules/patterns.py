#!/usr/bin/env python3
"""Gitignore-style glob compilation for CODEOWNERS patterns.

This module turns a single rule pattern into a compiled regular expression:
- ``*`` matches any run of characters except ``/``
- ``**`` as a whole segment spans directories (``**/x``, ``x/**``, ``a/**/b``)
- ``?`` matches one character except ``/``
- ``[...]`` character classes with ranges and ``!``/``^`` negation
- ``\\`` escapes the next character (``\\#``, ``\\!``)
- leading ``!`` negates the rule
- trailing ``/`` restricts the rule to directories
- a leading or middle ``/`` anchors the pattern to the repository root

A compiled pattern matches a single file or directory entry. Whether a file
inside a matched directory is covered is decided by the coverage engine,
which checks every ancestor directory before the file itself.

Example:
    >>> glob = compile_glob("src/**/*.py")
    >>> glob.matches("src/pkg/module.py")
    True
    >>> glob.matches("tests/src/module.py")
    False
"""

import re
from dataclasses import dataclass
from typing import List, Optional, Pattern, Tuple

from ownerguard.core.constants import CURRENT_DIR_PREFIX, NEGATION_PREFIX, PATH_SEPARATOR
from ownerguard.core.errors import PatternError

DOUBLESTAR = "**"

# Regex fragments
_ANY_SEGMENT_RUN = "[^/]*"
_ANY_SEGMENT_CHAR = "[^/]"
_ANY_LEADING_DIRS = "(?:.*/)?"


@dataclass(frozen=True)
class GlobPattern:
    """A compiled gitignore-style pattern."""

    source: str  # Pattern as written, including any "!"
    body: str  # Pattern without negation prefix and trailing "/"
    negated: bool
    directory_only: bool
    anchored: bool
    regex: Pattern[str]

    def matches(self, path: str, is_dir: bool = False) -> bool:
        """Check whether a normalized file or directory path is matched.

        Negation does not affect the result; callers decide what a match means.

        Args:
            path: Path without a trailing "/"
            is_dir: Whether the path names a directory
        """
        if self.directory_only and not is_dir:
            return False
        return self.regex.match(path) is not None


def normalize_path(path: str) -> str:
    """Normalize a changed-file path for matching.

    Strips any leading ``./`` so that ``./a.js`` and ``a.js`` are the same path.
    """
    while path.startswith(CURRENT_DIR_PREFIX):
        path = path[len(CURRENT_DIR_PREFIX) :]
    return path


def compile_glob(
    pattern: str, line: Optional[int] = None, case_sensitive: bool = True
) -> GlobPattern:
    """Compile one rule pattern.

    Args:
        pattern: Pattern token from the rule file (e.g., "*.js", "!docs/", "/build/**")
        line: Line of the rule file, used in error messages
        case_sensitive: Whether matching respects case

    Returns:
        Compiled pattern

    Raises:
        PatternError: If the pattern is empty or malformed
    """
    text = pattern
    negated = text.startswith(NEGATION_PREFIX)
    if negated:
        text = text[len(NEGATION_PREFIX) :]

    directory_only = False
    while text.endswith(PATH_SEPARATOR) and not _is_escaped(text, len(text) - 1):
        directory_only = True
        text = text[:-1]

    anchored = text.startswith(PATH_SEPARATOR)
    text = text.lstrip(PATH_SEPARATOR)
    if PATH_SEPARATOR in text:
        anchored = True

    if not text:
        raise PatternError(pattern, line, "pattern is empty")

    body = _translate_path(text, pattern, line)
    if not anchored:
        body = _ANY_LEADING_DIRS + body

    flags = re.DOTALL if case_sensitive else re.DOTALL | re.IGNORECASE
    try:
        regex = re.compile(f"(?:{body})\\Z", flags)
    except re.error as e:
        raise PatternError(pattern, line, str(e)) from e

    return GlobPattern(
        source=pattern,
        body=text,
        negated=negated,
        directory_only=directory_only,
        anchored=anchored,
        regex=regex,
    )


def _is_escaped(text: str, index: int) -> bool:
    """Return True if the character at index is preceded by an odd run of backslashes."""
    backslashes = 0
    index -= 1
    while index >= 0 and text[index] == "\\":
        backslashes += 1
        index -= 1
    return backslashes % 2 == 1


def _translate_path(text: str, pattern: str, line: Optional[int]) -> str:
    """Translate a slash-separated pattern body to a regex fragment.

    Segments equal to ``**`` consume the separator that follows them so that
    ``a/**/b`` also matches ``a/b``.
    """
    segments = text.split(PATH_SEPARATOR)
    last = len(segments) - 1
    parts: List[str] = []

    for i, segment in enumerate(segments):
        if segment == DOUBLESTAR:
            if last == 0:
                parts.append(".*")
            elif i == last:
                # "dir/**": everything inside, not the directory itself
                parts.append(".+")
            else:
                parts.append(_ANY_LEADING_DIRS)
            continue

        parts.append(_translate_segment(segment, pattern, line))
        if i < last:
            parts.append(PATH_SEPARATOR)

    return "".join(parts)


def _translate_segment(segment: str, pattern: str, line: Optional[int]) -> str:
    """Translate a single path segment (no separators) to a regex fragment."""
    parts: List[str] = []
    i = 0
    n = len(segment)

    while i < n:
        char = segment[i]
        if char == "\\":
            if i + 1 >= n:
                raise PatternError(pattern, line, "trailing backslash escapes nothing")
            parts.append(re.escape(segment[i + 1]))
            i += 2
        elif char == "*":
            # Runs of stars inside a segment behave like a single star
            while i < n and segment[i] == "*":
                i += 1
            parts.append(_ANY_SEGMENT_RUN)
        elif char == "?":
            parts.append(_ANY_SEGMENT_CHAR)
            i += 1
        elif char == "[":
            fragment, i = _translate_class(segment, i, pattern, line)
            parts.append(fragment)
        else:
            parts.append(re.escape(char))
            i += 1

    return "".join(parts)


def _translate_class(
    segment: str, start: int, pattern: str, line: Optional[int]
) -> Tuple[str, int]:
    """Translate a bracket expression starting at ``segment[start] == "["``.

    Returns:
        Tuple of (regex fragment, index just past the closing bracket)

    Raises:
        PatternError: If the bracket is never closed
    """
    n = len(segment)
    i = start + 1
    negated = i < n and segment[i] in "!^"
    if negated:
        i += 1

    items: List[str] = []
    first = True
    while i < n:
        char = segment[i]
        # "]" right after the opening bracket is a literal member
        if char == "]" and not first:
            break
        first = False
        if char == "\\":
            if i + 1 >= n:
                raise PatternError(pattern, line, "trailing backslash escapes nothing")
            items.append(re.escape(segment[i + 1]))
            i += 2
            continue
        items.append("-" if char == "-" else re.escape(char))
        i += 1
    else:
        raise PatternError(pattern, line, "unterminated character class")

    opening = "[^/" if negated else "["
    return opening + "".join(items) + "]", i + 1

"""CODEOWNERS rule file parsing.

Reads a CODEOWNERS-style file and extracts its rule lines in file order.
Each rule line has the form ``<pattern> <owner> <owner>...``; only the
pattern decides coverage, owners are carried along for diagnostics.
"""

import re
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Tuple, Union

from ownerguard.core.constants import COMMENT_PREFIX, DEFAULT_CODEOWNERS_PATH, ErrorCode
from ownerguard.core.errors import ConfigurationError

_LINE_BREAK = re.compile(r"\r?\n")


@dataclass(frozen=True)
class RuleLine:
    """One non-blank, non-comment line of a rule file."""

    pattern: str
    line: int  # 1-based line number in the rule file
    owners: Tuple[str, ...] = ()


def parse_rule_text(text: str) -> List[RuleLine]:
    """Parse rule file contents into ordered rule lines.

    Blank lines and lines whose first non-whitespace character is ``#`` are
    skipped. An empty result is valid and means no path is covered.

    Args:
        text: Raw rule file contents

    Returns:
        Rule lines in file order
    """
    rule_lines: List[RuleLine] = []

    for number, raw in enumerate(_LINE_BREAK.split(text), start=1):
        line = raw.strip()
        if not line or line.startswith(COMMENT_PREFIX):
            continue

        pattern, *owners = line.split()
        rule_lines.append(RuleLine(pattern=pattern, line=number, owners=tuple(owners)))

    return rule_lines


def parse_patterns(text: str) -> List[str]:
    """Return only the pattern tokens of a rule file, in order."""
    return [rule_line.pattern for rule_line in parse_rule_text(text)]


def load_rule_file(path: Optional[Union[str, Path]] = None) -> str:
    """Read a rule file from disk.

    Args:
        path: Rule file location (default: .github/CODEOWNERS)

    Returns:
        File contents as text

    Raises:
        ConfigurationError: If the file is missing or cannot be read as UTF-8
    """
    rule_path = Path(path) if path else Path(DEFAULT_CODEOWNERS_PATH)

    if not rule_path.is_file():
        raise ConfigurationError(f"Rule file not found at {rule_path}", ErrorCode.NOT_FOUND)

    try:
        # utf-8-sig drops a byte order mark written by some editors
        return rule_path.read_text(encoding="utf-8-sig")
    except UnicodeDecodeError as e:
        raise ConfigurationError(f"Rule file {rule_path} is not valid UTF-8: {e}") from e
    except PermissionError as e:
        raise ConfigurationError(
            f"Permission denied reading rule file {rule_path}", ErrorCode.PERMISSION_DENIED
        ) from e
    except OSError as e:
        raise ConfigurationError(f"Error reading rule file {rule_path}: {e}") from e

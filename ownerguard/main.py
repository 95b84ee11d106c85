#!/usr/bin/env python3
"""Check runner for Ownerguard.

This module handles:
- Loading and compiling the rule file named by the configuration
- Reporting each checked path through the structured logger
- Translating the coverage outcome into an exit code

Errors raised while loading the rule file (ConfigurationError, PatternError)
propagate to the caller, which owns the exit semantics for "could not run".

Example:
    >>> from ownerguard.main import run_ownerguard
    >>> run_ownerguard(config, ["src/app.py"], logger)
    <ExitCode.SUCCESS: 0>
"""

from typing import Optional, Sequence

from ownerguard.checker import load_matcher, run_check
from ownerguard.context import CheckContext
from ownerguard.core.constants import ConfigKey, ExitCode
from ownerguard.infrastructure.config_manager import ConfigManager
from ownerguard.infrastructure.logger import Logger
from ownerguard.rules.engine import CompiledMatcher


class LoggingObserver:
    """Coverage observer writing progress and violations to a Logger."""

    def __init__(self, logger: Logger, matcher: Optional[CompiledMatcher] = None):
        """Initialize observer.

        Args:
            logger: Destination logger
            matcher: Matcher used to name the deciding rule in debug output
        """
        self.logger = logger
        self.matcher = matcher

    def __call__(self, path: str, covered: bool) -> None:
        self.logger.info(f"Checking file {path}")
        if not covered:
            self.logger.error(f"{path} does not have a codeowner.")
            return

        if self.matcher is not None and self.logger.is_enabled_for("debug"):
            rule = self.matcher.last_match(path)
            if rule is not None:
                self.logger.debug(
                    f"{path} covered by {rule.pattern}",
                    line=rule.line,
                    owners=" ".join(rule.owners) or "-",
                )


def run_ownerguard(
    config: ConfigManager,
    changed_paths: Sequence[str],
    logger: Logger,
    context: Optional[CheckContext] = None,
) -> ExitCode:
    """Run a coverage check for one change set.

    Args:
        config: Resolved configuration
        changed_paths: Paths changed by the pull request
        logger: Logger instance
        context: CI context, if one was required

    Returns:
        ExitCode.SUCCESS when every path is covered, else ExitCode.UNCOVERED_FILES

    Raises:
        ConfigurationError: If the rule file is missing or unreadable
        PatternError: If the rule file holds a malformed pattern
    """
    rule_path = config.get(ConfigKey.CODEOWNERS_PATH)
    case_sensitive = not config.get(ConfigKey.IGNORE_CASE, False)

    matcher = load_matcher(rule_path, case_sensitive=case_sensitive)
    logger.info("Loaded ownership rules", path=rule_path, rules=len(matcher))
    if not len(matcher):
        logger.warning("Rule file has no rules; every changed file is uncovered")

    if context is not None:
        with logger.add_context(pull_request=context.pull_request):
            return _report(matcher, changed_paths, logger)
    return _report(matcher, changed_paths, logger)


def _report(matcher: CompiledMatcher, changed_paths: Sequence[str], logger: Logger) -> ExitCode:
    report = run_check(matcher, changed_paths, LoggingObserver(logger, matcher))

    if report.passed:
        logger.info(f"All {len(report.checked)} changed file(s) have a codeowner.")
        return ExitCode.SUCCESS

    logger.error(
        f"{len(report.uncovered)} of {len(report.checked)} changed file(s) "
        f"do not have a codeowner: {', '.join(report.uncovered)}"
    )
    return ExitCode.UNCOVERED_FILES

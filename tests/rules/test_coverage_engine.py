#!/usr/bin/env python3
"""Tests for CoverageMatcher and CompiledMatcher."""

from concurrent.futures import ThreadPoolExecutor

import pytest

from ownerguard.core.errors import PatternError
from ownerguard.rules.engine import CompiledMatcher, CoverageMatcher, Rule
from ownerguard.rules.parser import RuleLine, parse_rule_text


class TestCoverageMatcherBuilder:
    """Tests for compiling rules."""

    def test_init_default(self):
        """A new builder has no rules."""
        builder = CoverageMatcher()
        assert len(builder) == 0
        assert len(builder.build()) == 0

    def test_add_pattern_returns_rule(self):
        """add_pattern compiles and records position."""
        builder = CoverageMatcher()
        first = builder.add_pattern("*.js", owners=["@alice"])
        second = builder.add_pattern("!special.js")

        assert isinstance(first, Rule)
        assert first.index == 0
        assert first.line == 1
        assert first.owners == ("@alice",)
        assert first.pattern == "*.js"
        assert not first.negated
        assert second.index == 1
        assert second.line == 2
        assert second.negated

    def test_build_freezes_rules(self):
        """Later additions do not change a built matcher."""
        builder = CoverageMatcher()
        builder.add_pattern("*.js")
        matcher = builder.build()
        builder.add_pattern("*.md")

        assert len(matcher) == 1
        assert not matcher.is_covered("README.md")

    def test_compile_from_patterns(self):
        """compile() turns a pattern list straight into a matcher."""
        matcher = CoverageMatcher.compile(["*.js", "!special.js"], case_sensitive=True)

        assert isinstance(matcher, CompiledMatcher)
        assert [rule.pattern for rule in matcher.rules] == ["*.js", "!special.js"]
        assert matcher.is_covered("index.js")
        assert not matcher.is_covered("special.js")

    def test_compiled_matcher_is_immutable(self):
        """Attributes of a compiled matcher cannot be reassigned."""
        matcher = CoverageMatcher.compile(["*.js"])
        with pytest.raises(AttributeError):
            matcher.rules = ()

    def test_from_rule_lines_keeps_file_lines(self):
        """Rule lines carry their rule-file line numbers into rules."""
        matcher = CoverageMatcher.compile(parse_rule_text("# c\n\n*.js @a @b\n"))
        assert matcher.rules[0].line == 3
        assert matcher.rules[0].owners == ("@a", "@b")

    def test_pattern_error_names_position(self):
        """Plain pattern lists report a 1-based position."""
        with pytest.raises(PatternError) as exc_info:
            CoverageMatcher.compile(["*.js", "bad["])

        assert exc_info.value.pattern == "bad["
        assert exc_info.value.line == 2

    def test_pattern_error_names_file_line(self):
        """Rule lines report the line of the rule file."""
        rule_lines = parse_rule_text("# header\n*.js @a\n\nsrc/[ab @b\n")

        with pytest.raises(PatternError) as exc_info:
            CoverageMatcher.compile(rule_lines)

        assert exc_info.value.line == 4
        assert "line 4" in str(exc_info.value)

    def test_mixed_inputs(self):
        """Strings and RuleLines can be mixed."""
        matcher = CoverageMatcher.compile(["*.js", RuleLine("*.ts", line=10)])
        assert matcher.rules[1].line == 10
        assert matcher.is_covered("a.ts")

    def test_case_insensitive_matcher(self):
        """case_sensitive=False applies to every rule."""
        matcher = CoverageMatcher.compile(["*.JS"], case_sensitive=False)
        assert not matcher.case_sensitive
        assert matcher.is_covered("app.js")


class TestCoverage:
    """Tests for per-path coverage decisions."""

    def test_no_rules_covers_nothing(self):
        """An empty rule set covers no path."""
        matcher = CompiledMatcher()
        assert not matcher.is_covered("a.js")
        assert matcher.last_match("a.js") is None

    def test_negation_overrides_earlier_match(self):
        """A later negation un-covers a matched path."""
        matcher = CoverageMatcher.compile(["*.js", "!special.js"])

        assert matcher.is_covered("other.js")
        assert not matcher.is_covered("special.js")
        assert not matcher.is_covered("lib/special.js")

    def test_reinclude_after_negation(self):
        """A rule after a negation covers the path again."""
        matcher = CoverageMatcher.compile(["*", "!*.md", "README.md"])

        assert matcher.is_covered("main.py")
        assert matcher.is_covered("README.md")
        assert not matcher.is_covered("CHANGES.md")

    def test_negation_before_match_has_no_effect(self):
        """Order matters: an earlier negation is overridden."""
        matcher = CoverageMatcher.compile(["!special.js", "*.js"])
        assert matcher.is_covered("special.js")

    def test_negation_alone_covers_nothing(self):
        """A negation never covers a path by itself."""
        matcher = CoverageMatcher.compile(["!*.js"])
        assert not matcher.is_covered("a.js")
        assert not matcher.is_covered("a.py")

    def test_pattern_covers_directory_contents(self):
        """A rule matching a directory covers every file below it."""
        assert CoverageMatcher.compile(["docs"]).is_covered("docs/guide/index.md")
        assert CoverageMatcher.compile(["docs"]).is_covered("site/docs/index.md")
        assert CoverageMatcher.compile(["**/foo"]).is_covered("a/foo/bar.txt")
        assert CoverageMatcher.compile(["a/**/b"]).is_covered("a/x/b/file.txt")
        assert CoverageMatcher.compile(["docs/*"]).is_covered("docs/a/b.md")

    def test_directory_only_rule(self):
        """docs/ covers files inside docs but not a file named docs."""
        matcher = CoverageMatcher.compile(["docs/"])

        assert matcher.is_covered("docs/index.md")
        assert matcher.is_covered("site/docs/index.md")
        assert not matcher.is_covered("docs")

    def test_file_in_covered_directory_cannot_be_uncovered(self):
        """Negating a file or subdirectory of a covered directory has no effect."""
        assert CoverageMatcher.compile(["docs/", "!docs/a.md"]).is_covered("docs/a.md")

        matcher = CoverageMatcher.compile(["/docs/", "!docs/drafts/"])
        assert matcher.is_covered("docs/index.md")
        assert matcher.is_covered("docs/drafts/idea.md")
        assert matcher.last_match("docs/drafts/idea.md").pattern == "/docs/"

    def test_negation_inside_uncovered_directory(self):
        """Negations apply to files whose directories are not covered."""
        matcher = CoverageMatcher.compile(["*.md", "!docs/drafts/*.md"])

        assert matcher.is_covered("docs/index.md")
        assert not matcher.is_covered("docs/drafts/idea.md")

    def test_reincluded_directory_contents_still_checked(self):
        """Negating a directory does not hide files matched by a later rule."""
        matcher = CoverageMatcher.compile(["src/**", "!src/generated/"])

        assert matcher.is_covered("src/app.py")
        assert matcher.is_covered("src/generated/out.py")
        assert matcher.last_match("src/generated/out.py").pattern == "src/**"

    def test_leading_current_dir_is_ignored(self):
        """./path and path are the same path."""
        matcher = CoverageMatcher.compile(["/src/*.py"])
        assert matcher.is_covered("./src/app.py")
        assert matcher.is_covered("src/app.py")

    def test_last_match_returns_deciding_rule(self):
        """last_match reports the rule that decided the verdict."""
        matcher = CoverageMatcher.compile(["*", "*.js", "!vendor.js", "/lib/"])

        assert matcher.last_match("a.js").pattern == "*.js"
        assert matcher.last_match("a.py").pattern == "*"
        assert matcher.last_match("vendor.js").pattern == "!vendor.js"
        assert matcher.last_match("lib/vendor.js").pattern == "/lib/"

    def test_sample_rule_file(self, sample_codeowners):
        """A realistic rule file decides coverage as expected."""
        matcher = CoverageMatcher.compile(parse_rule_text(sample_codeowners))

        assert matcher.is_covered("src/index.js")
        assert matcher.is_covered("types/app.ts")
        assert matcher.is_covered("docs/guide/intro.md")
        assert not matcher.is_covered("docs/drafts/todo.md")
        assert matcher.is_covered("build/rules.mk")
        assert matcher.is_covered("build/linux/gcc.mk")
        assert not matcher.is_covered("src/build/rules.mk")
        assert not matcher.is_covered("setup.py")


class TestCheckAll:
    """Tests for batch evaluation."""

    def test_returns_uncovered_in_input_order(self):
        """Every uncovered path is returned, in input order."""
        matcher = CoverageMatcher.compile(["*.js"])
        paths = ["z.md", "a.js", "b.py", "c.js", "a.txt"]

        assert matcher.check_all(paths) == ["z.md", "b.py", "a.txt"]

    def test_all_covered(self):
        """A fully covered change set yields an empty list."""
        matcher = CoverageMatcher.compile(["*"])
        assert matcher.check_all(["a", "b/c", "./d"]) == []

    def test_empty_rules_uncover_everything(self):
        """With no rules every path is uncovered."""
        paths = ["a.js", "src/b.py", "./c.md"]
        assert CompiledMatcher().check_all(paths) == paths

    def test_empty_path_list(self):
        """No paths means nothing uncovered."""
        assert CoverageMatcher.compile(["*.js"]).check_all([]) == []

    def test_uncovered_path_keeps_original_spelling(self):
        """Returned paths are the caller's strings, not normalized ones."""
        matcher = CoverageMatcher.compile(["*.js"])
        assert matcher.check_all(["./readme.md"]) == ["./readme.md"]

    def test_observer_sees_every_path(self):
        """The observer is called once per path with its verdict."""
        matcher = CoverageMatcher.compile(["*.js"])
        calls = []

        uncovered = matcher.check_all(
            ["a.js", "b.md", "c.js"], observer=lambda path, covered: calls.append((path, covered))
        )

        assert uncovered == ["b.md"]
        assert calls == [("a.js", True), ("b.md", False), ("c.js", True)]

    def test_accepts_generators(self):
        """Any iterable of paths is accepted."""
        matcher = CoverageMatcher.compile(["*.js"])
        assert matcher.check_all(p for p in ["a.js", "b.md"]) == ["b.md"]

    def test_idempotent(self):
        """Repeated checks give identical results."""
        matcher = CoverageMatcher.compile(["*.js", "!special.js"])
        paths = ["a.js", "special.js", "b.md"]

        first = matcher.check_all(paths)
        second = matcher.check_all(paths)

        assert first == second == ["special.js", "b.md"]
        assert paths == ["a.js", "special.js", "b.md"]

    def test_result_independent_of_evaluation_order(self):
        """Reordering input reorders output but not its content."""
        matcher = CoverageMatcher.compile(["*.js"])
        paths = ["a.md", "b.js", "c.py"]

        forward = matcher.check_all(paths)
        backward = matcher.check_all(list(reversed(paths)))

        assert forward == ["a.md", "c.py"]
        assert backward == ["c.py", "a.md"]
        assert set(forward) == set(backward)

    def test_concurrent_use_of_one_matcher(self):
        """One matcher can be shared across threads."""
        matcher = CoverageMatcher.compile(["*.py", "!src/generated/*.py"])
        batches = [
            [f"src/mod{i}.py", f"src/generated/out{i}.py", f"docs/page{i}.md"] for i in range(50)
        ]

        with ThreadPoolExecutor(max_workers=8) as pool:
            results = list(pool.map(matcher.check_all, batches))

        for i, uncovered in enumerate(results):
            assert uncovered == [f"src/generated/out{i}.py", f"docs/page{i}.md"]

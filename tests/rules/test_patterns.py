#!/usr/bin/env python3
"""Tests for compiled patterns and path matching."""

import os
import re
import time
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

import pytest

from rsyncfilter import InvalidArgumentError, Pattern, PatternKind, PatternSyntaxError, compile, matches

ABSENT_ROOT = Path("/nonexistent-rsyncfilter-root")


class TestCompile:
    """Tests for compile() classification."""

    def test_none_is_blank(self):
        """Test absent text produces a blank pattern."""
        assert compile(None).kind is PatternKind.BLANK

    @pytest.mark.parametrize("text", ["", "   ", "\t\n"])
    def test_whitespace_is_blank(self, text):
        """Test whitespace-only text produces a blank pattern."""
        pattern = compile(text)
        assert pattern.kind is PatternKind.BLANK
        assert pattern.regex is None
        assert pattern.expression is None

    @pytest.mark.parametrize("text", ["#comment", ";comment", "  # indented", "#*.java"])
    def test_comment(self, text):
        """Test # and ; lines produce comment patterns."""
        assert compile(text).kind is PatternKind.COMMENT

    def test_rule_is_compiled(self):
        """Test ordinary rules produce compiled patterns."""
        pattern = compile("*.java")
        assert pattern.kind is PatternKind.COMPILED
        assert isinstance(pattern.regex, re.Pattern)
        assert pattern.text == "*.java"

    def test_include_rule_rejected(self):
        """Test include rules fail to compile."""
        with pytest.raises(PatternSyntaxError):
            compile("+ *.java")

    def test_unknown_posix_class_rejected(self):
        """Test unknown POSIX classes fail to compile with the full rule text."""
        with pytest.raises(PatternSyntaxError) as exc_info:
            compile("- /x[[:nope:]]")
        assert exc_info.value.pattern == "- /x[[:nope:]]"
        assert exc_info.value.index == 4

    def test_malformed_bracket_rejected(self):
        """Test regex engine errors surface as syntax errors with a cause."""
        with pytest.raises(PatternSyntaxError) as exc_info:
            compile("[a-")
        assert exc_info.value.pattern == "[a-"
        assert isinstance(exc_info.value.__cause__, re.error)

    def test_pathological_rule_rejected(self):
        """Test a huge nested wildcard rule fails cleanly."""
        text = "(" + "*" * 100000 + ")"
        with pytest.raises(PatternSyntaxError) as exc_info:
            compile(text)
        assert exc_info.value.pattern == text

    def test_star_run_over_limit_rejected(self):
        """Test a few hundred stars in one run exceed the wildcard limit."""
        text = "(" + "*" * 500 + ")"
        with pytest.raises(PatternSyntaxError, match="too complex") as exc_info:
            compile(text)
        assert exc_info.value.pattern == text

    def test_syntax_error_is_validation_error(self):
        """Test syntax errors share the package base exception."""
        from rsyncfilter import ValidationError
        from rsyncfilter.core.constants import ErrorCode

        with pytest.raises(ValidationError) as exc_info:
            compile("+ x")
        assert exc_info.value.error_code == ErrorCode.PATTERN_SYNTAX


class TestEquality:
    """Tests for Pattern equality and hashing."""

    def test_same_rule_equal(self):
        """Test patterns from the same rule are equal with equal hashes."""
        p1 = compile("*.java")
        p2 = compile("*.java")
        assert p1 == p2
        assert hash(p1) == hash(p2)

    def test_different_rules_not_equal(self):
        """Test patterns with different expressions differ."""
        assert compile("*.java") != compile("*.class")

    def test_equal_by_expression(self):
        """Test spellings that normalize to the same expression are equal."""
        assert compile("- *.java") == compile("*.java")

    def test_blank_patterns_equal(self):
        """Test all blank patterns are equal."""
        assert compile(None) == compile("  ")
        assert hash(compile(None)) == hash(compile(""))

    def test_comments_equal_by_text(self):
        """Test comments compare by their text."""
        assert compile("# a") == compile("# a")
        assert compile("# a") != compile("# b")

    def test_kinds_differ(self):
        """Test patterns of different kinds are never equal."""
        assert compile("") != compile("#")
        assert compile("#") != compile("x")

    def test_not_equal_to_other_types(self):
        """Test comparison with non-patterns."""
        assert compile("*.java") != "*.java"

    def test_usable_in_sets(self):
        """Test patterns deduplicate in sets."""
        assert len({compile("a"), compile("- a"), compile("b")}) == 2

    def test_str(self):
        """Test str() shows the expression or the original text."""
        assert str(compile("*.java")) == compile("*.java").expression
        assert str(compile("; note")) == "; note"
        assert str(compile(None)) == ""

    def test_immutable(self):
        """Test patterns cannot be modified."""
        pattern = compile("*.java")
        with pytest.raises(AttributeError):
            pattern.text = "*.class"  # type: ignore[misc]


class TestMatches:
    """Tests for Pattern.matches() with non-directory rules."""

    def test_simple_extension(self, source_dir):
        """Test a tail rule matches by file name."""
        pattern = compile("*.java")
        assert pattern.matches(source_dir, "src/main/java/Main.java")
        assert not pattern.matches(source_dir, "src/main/java/Main.class")

    def test_absolute_candidate(self, source_dir):
        """Test absolute candidates are made relative to root."""
        pattern = compile("*.java")
        assert pattern.matches(source_dir, source_dir / "src/main/java/Main.java")

    def test_single_argument(self, source_dir):
        """Test the one-argument form uses the filesystem root."""
        pattern = compile("*.java")
        assert pattern.matches(source_dir / "src/main/java/Main.java")
        assert pattern.matches(str(source_dir / "src/main/java/Main.java"))
        assert not pattern.matches(source_dir / "src/main/java/Main.class")

    def test_module_level_matches(self, source_dir):
        """Test the matches() function mirrors the method."""
        pattern = compile("*.java")
        assert matches(pattern, source_dir, "src/main/java/Main.java")
        assert matches(pattern, source_dir / "src/main/java/Main.java")

    def test_inert_patterns_never_match(self, source_dir):
        """Test blank and comment patterns match nothing."""
        for text in (None, "   ", "#x", ";x", "# *"):
            pattern = compile(text)
            assert not pattern.matches(source_dir, "file.txt")
            assert not pattern.matches(source_dir / "file.txt")

    @pytest.mark.parametrize("text", [None, "#x", "*.java", "build/"])
    def test_relative_root_rejected(self, text):
        """Test every pattern rejects a relative root."""
        with pytest.raises(InvalidArgumentError):
            compile(text).matches(Path("not/absolute"), "/tmp/Main.java")

    @pytest.mark.parametrize("text", [None, ";x", "*.java"])
    def test_relative_single_argument_rejected(self, text):
        """Test the one-argument form requires an absolute path."""
        with pytest.raises(InvalidArgumentError):
            compile(text).matches(Path("src/main/java/Main.java"))

    def test_invalid_argument_is_value_error(self):
        """Test argument errors are ValueErrors."""
        with pytest.raises(ValueError):
            compile("*.java").matches("relative")

    def test_path_outside_root_rejected(self, source_dir):
        """Test candidates resolving outside root are rejected."""
        with pytest.raises(InvalidArgumentError):
            compile("*.txt").matches(source_dir, "../elsewhere.txt")

    def test_dot_segments_normalized(self, source_dir):
        """Test . and .. segments are resolved before matching."""
        assert compile("/docs/api.md").matches(source_dir, "subdir/../docs/./api.md")

    def test_root_never_matches(self, source_dir):
        """Test the transfer root itself is not filtered."""
        assert not compile("*").matches(source_dir, source_dir)
        assert not compile("**").matches(source_dir, ".")

    def test_anchored(self):
        """Test anchored rules only match from the root."""
        pattern = compile("/docs")
        assert pattern.matches(ABSENT_ROOT, "docs")
        assert pattern.matches(ABSENT_ROOT, "docs/api.md")
        assert not pattern.matches(ABSENT_ROOT, "subdir/docs")
        assert not pattern.matches(ABSENT_ROOT, "docsx")

    def test_anchored_multi_segment(self):
        """Test anchored rules with inner slashes stay anchored."""
        pattern = compile("/src/main")
        assert pattern.matches(ABSENT_ROOT, "src/main/java/Main.java")
        assert not pattern.matches(ABSENT_ROOT, "x/src/main")

    def test_multi_segment_tail(self):
        """Test unanchored multi-segment rules match on segment boundaries."""
        pattern = compile("main/*.java")
        assert pattern.matches(ABSENT_ROOT, "main/A.java")
        assert pattern.matches(ABSENT_ROOT, "src/main/A.java")
        assert not pattern.matches(ABSENT_ROOT, "src/domain/A.java")
        assert not pattern.matches(ABSENT_ROOT, "src/main/x/A.java")

    def test_star_stays_in_segment(self):
        """Test * does not cross a separator."""
        pattern = compile("/src*")
        assert pattern.matches(ABSENT_ROOT, "src2")
        assert not pattern.matches(ABSENT_ROOT, "a/src2")

    def test_double_star(self):
        """Test ** crosses separators."""
        pattern = compile("src/**/*.java")
        assert pattern.matches(ABSENT_ROOT, "src/main/java/Main.java")
        assert pattern.matches(ABSENT_ROOT, "lib/src/a/B.java")
        assert not pattern.matches(ABSENT_ROOT, "src/Main.java")

    def test_question_mark(self):
        """Test ? matches exactly one non-separator character."""
        pattern = compile("a?c")
        assert pattern.matches(ABSENT_ROOT, "abc")
        assert not pattern.matches(ABSENT_ROOT, "ac")
        assert not pattern.matches(ABSENT_ROOT, "abbc")
        assert not pattern.matches(ABSENT_ROOT, "a/c")

    def test_hidden_files(self):
        """Test a dot rule matches dot files in any directory."""
        pattern = compile(".*")
        assert pattern.matches(ABSENT_ROOT, ".hidden")
        assert pattern.matches(ABSENT_ROOT, "a/.git")
        assert not pattern.matches(ABSENT_ROOT, "file.txt")

    def test_escaped_wildcard(self):
        """Test escaped wildcards match literally."""
        pattern = compile("\\*.txt")
        assert pattern.matches(ABSENT_ROOT, "*.txt")
        assert not pattern.matches(ABSENT_ROOT, "a.txt")

    def test_literal_backslash(self):
        """Test backslashes are literal in rules without wildcards."""
        assert compile("a\\b").matches(ABSENT_ROOT, "a\\b")

    def test_posix_class(self):
        """Test POSIX classes in rules."""
        pattern = compile("[[:digit:]]*.log")
        assert pattern.matches(ABSENT_ROOT, "1.log")
        assert pattern.matches(ABSENT_ROOT, "var/2024.log")
        assert not pattern.matches(ABSENT_ROOT, "a.log")

    def test_posix_class_with_more_members(self):
        """Test a POSIX class can share a bracket with other members."""
        pattern = compile("[[:digit:]a][[:alpha:]]")
        assert pattern.matches(ABSENT_ROOT, "1b")
        assert pattern.matches(ABSENT_ROOT, "ab")
        assert not pattern.matches(ABSENT_ROOT, "bb")
        assert not pattern.matches(ABSENT_ROOT, "11")

    def test_star_run_does_not_backtrack(self):
        """Test a long run of stars fails to match without exponential backtracking."""
        pattern = compile("(" + "*" * 40 + "x)")
        start = time.monotonic()
        assert not pattern.matches(ABSENT_ROOT, "(" + "a" * 30)
        assert pattern.matches(ABSENT_ROOT, "(" + "a" * 30 + "x)")
        assert time.monotonic() - start < 2.0

    def test_bracket_expressions(self):
        """Test ordinary and negated bracket expressions."""
        assert compile("[ab].txt").matches(ABSENT_ROOT, "b.txt")
        assert not compile("[ab].txt").matches(ABSENT_ROOT, "c.txt")
        assert compile("[!a]*").matches(ABSENT_ROOT, "b")
        assert not compile("[!a]*").matches(ABSENT_ROOT, "abc")

    def test_regex_specials_literal(self):
        """Test regex metacharacters in rules are literal."""
        pattern = compile("a+(1).txt")
        assert pattern.matches(ABSENT_ROOT, "a+(1).txt")
        assert not pattern.matches(ABSENT_ROOT, "aa(1)xtxt")

    def test_no_partial_match(self):
        """Test rules must match to the end of the path."""
        assert not compile("*.jav").matches(ABSENT_ROOT, "Main.java")

    def test_concurrent_use(self, source_dir):
        """Test one pattern can be shared between threads."""
        pattern = compile("*.java")
        paths = ["src/main/java/Main.java", "src/main/java/Main.class"] * 200
        with ThreadPoolExecutor(max_workers=8) as pool:
            results = list(pool.map(lambda p: pattern.matches(source_dir, p), paths))
        assert results == [True, False] * 200


class TestDirectoryRules:
    """Tests for directory-only rules."""

    def test_directory_only_flag(self):
        """Test the directory_only property."""
        assert compile("build/").directory_only
        assert compile("- /build/").directory_only
        assert compile("//").directory_only
        assert not compile("build").directory_only
        assert not compile("build//").directory_only
        assert not compile("#build/").directory_only

    def test_matches_directory_itself(self, source_dir):
        """Test a directory rule matches the directory."""
        assert compile("build/").matches(source_dir, "build")

    def test_matches_descendants(self, source_dir):
        """Test files below a matched directory inherit the match."""
        pattern = compile("build/")
        assert pattern.matches(source_dir, "build/output.o")
        assert pattern.matches(source_dir / "build" / "output.o")

    def test_inherits_from_distant_ancestor(self, source_dir):
        """Test the ancestor walk reaches past the direct parent."""
        pattern = compile("main/")
        assert pattern.matches(source_dir, "src/main/java/Main.java")

    def test_missing_path_matches(self):
        """Test paths absent from disk fall through to matched."""
        assert compile("build/").matches(ABSENT_ROOT, "build")
        assert compile("build/").matches(ABSENT_ROOT, "x/build/out.txt")

    def test_regular_file_not_matched(self, source_dir):
        """Test a directory rule does not match a file of that name."""
        assert not compile("file.txt/").matches(source_dir, "file.txt")

    def test_wildcard_directory_rule(self, source_dir):
        """Test */ matches directories and their contents only."""
        pattern = compile("*/")
        assert pattern.matches(source_dir, "subdir")
        assert pattern.matches(source_dir, "subdir/nested.txt")
        assert not pattern.matches(source_dir, "file.txt")

    @pytest.mark.skipif(not hasattr(os, "symlink"), reason="symlinks unsupported")
    def test_symlink_not_matched(self, source_dir, temp_dir):
        """Test a symlink named like the rule is not a directory match."""
        target = temp_dir / "real-build"
        target.mkdir()
        (source_dir / "out").symlink_to(target, target_is_directory=True)

        assert not compile("out/").matches(source_dir, "out")

    @pytest.mark.skipif(not hasattr(os, "symlink"), reason="symlinks unsupported")
    def test_symlink_below_matched_directory(self, source_dir, temp_dir):
        """Test a symlink inside a matched directory inherits the match."""
        target = temp_dir / "elsewhere"
        target.mkdir()
        (source_dir / "build" / "link").symlink_to(target, target_is_directory=True)

        assert compile("build/").matches(source_dir, "build/link")

    def test_pattern_type(self):
        """Test compile() returns Pattern instances."""
        assert isinstance(compile("build/"), Pattern)

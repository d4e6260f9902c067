#!/usr/bin/env python3
"""Compiled rsync filter rules and path matching.

This module provides the rule matcher for rsyncfilter:
- Classification of rule text into blank, comment or compiled patterns
- Matching of paths relative to a transfer root
- Directory-only rules with inherited exclusion of descendants
- Value equality based on the generated expression

Example:
    >>> pattern = compile("*.java")
    >>> pattern.matches("/home/user/src/Main.java")
    True
    >>> pattern.matches("/home/user", "src/Main.class")
    False
"""

import os
import re
import stat
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional

from rsyncfilter.core.constants import COMMENT_PREFIXES
from rsyncfilter.core.validators import (
    InvalidArgumentError,
    PathLike,
    PatternSyntaxError,
    validate_absolute,
    validate_root,
)
from rsyncfilter.rules.translator import rule_is_directory, translate_rule


class PatternKind(Enum):
    """Variant of a compiled filter rule."""

    BLANK = "blank"  # Absent or whitespace-only text, never matches
    COMMENT = "comment"  # Starts with # or ;, never matches
    COMPILED = "compiled"  # Backed by a regular expression


@dataclass(frozen=True, eq=False)
class Pattern:
    """An immutable filter rule.

    Instances are created by :func:`compile` and may be shared freely
    between threads.
    """

    text: Optional[str]
    kind: PatternKind
    regex: Optional[re.Pattern] = None

    @property
    def expression(self) -> Optional[str]:
        """Generated regular expression, or None for inert patterns."""
        return self.regex.pattern if self.regex is not None else None

    @property
    def directory_only(self) -> bool:
        """True if the rule, after its marker and anchor, ends in exactly one slash."""
        return self.kind is PatternKind.COMPILED and rule_is_directory(self.text)

    def matches(self, root: PathLike, path: Optional[PathLike] = None) -> bool:
        """Check whether a path is selected by this rule.

        Called as ``matches(root, path)``, ``path`` may be relative or
        absolute and is resolved against the absolute ``root``. Called as
        ``matches(path)``, the path must be absolute and its filesystem root
        becomes the transfer root.

        Args:
            root: Absolute transfer root, or the absolute path in the
                one-argument form
            path: Path to test

        Returns:
            True if the path matches

        Raises:
            InvalidArgumentError: If root (or the lone path) is not absolute,
                or the path resolves outside root
        """
        if path is None:
            path = validate_absolute(root)
            root = path.anchor

        root_path = validate_root(root)
        resolved = Path(os.path.normpath(root_path / path))
        relative = _relative_to(root_path, resolved)

        if self.regex is None:
            return False

        if not self._matches_relative(relative):
            return False

        if self.directory_only:
            return self._matches_directory(root_path, resolved)

        return True

    def _matches_relative(self, relative: str) -> bool:
        # The transfer root itself is never filtered.
        if not relative:
            return False
        return self.regex.fullmatch(relative) is not None

    def _matches_directory(self, root: Path, resolved: Path) -> bool:
        """Apply directory-only semantics after the expression matched."""
        checking = resolved
        while checking != root:
            checking = checking.parent
            if self._matches_relative(_relative_to(root, checking)):
                # A parent directory was excluded, and everything below it.
                return True

        try:
            st = os.lstat(resolved)
        except OSError:
            # Nothing on disk to contradict the match.
            return True

        if stat.S_ISLNK(st.st_mode):
            return False
        return stat.S_ISDIR(st.st_mode)

    def __str__(self) -> str:
        if self.kind is PatternKind.COMPILED:
            return self.expression
        return self.text or ""

    def __repr__(self) -> str:
        return f"Pattern(text={self.text!r}, kind={self.kind.name})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Pattern):
            return NotImplemented
        if self.kind is not other.kind:
            return False
        if self.kind is PatternKind.COMPILED:
            return self.expression == other.expression
        if self.kind is PatternKind.COMMENT:
            return self.text == other.text
        return True

    def __hash__(self) -> int:
        if self.kind is PatternKind.COMPILED:
            return hash(self.expression)
        if self.kind is PatternKind.COMMENT:
            return hash((self.kind, self.text))
        return hash(self.kind)


def _relative_to(root: Path, path: Path) -> str:
    """Return ``path`` relative to ``root`` with ``/`` separators."""
    try:
        relative = path.relative_to(root)
    except ValueError:
        raise InvalidArgumentError(f"Path {path} is not inside root {root}") from None
    text = relative.as_posix()
    return "" if text == "." else text


def compile(text: Optional[str]) -> Pattern:  # noqa: A001
    """Compile one filter rule line.

    - Absent or whitespace-only text gives a blank pattern.
    - Text starting with ``#`` or ``;`` after trimming gives a comment pattern.
    - Anything else is translated into a regular expression.

    Args:
        text: Rule text

    Returns:
        The compiled pattern

    Raises:
        PatternSyntaxError: If the rule is unsupported or malformed
    """
    if text is None or not text.strip():
        return Pattern(text, PatternKind.BLANK)

    if text.strip().startswith(COMMENT_PREFIXES):
        return Pattern(text, PatternKind.COMMENT)

    expression = translate_rule(text)
    try:
        regex = re.compile(expression, re.DOTALL)
    except re.error as e:
        raise PatternSyntaxError(f"Invalid rule ({e.msg})", text, -1) from e
    except (RecursionError, OverflowError, MemoryError) as e:
        raise PatternSyntaxError(
            "Rule to regex conversion exhausted the regex compiler (too complex or recursive)",
            text,
        ) from e

    return Pattern(text, PatternKind.COMPILED, regex)


def matches(pattern: Pattern, root: PathLike, path: Optional[PathLike] = None) -> bool:
    """Check a path against a pattern; see :meth:`Pattern.matches`."""
    return pattern.matches(root, path)

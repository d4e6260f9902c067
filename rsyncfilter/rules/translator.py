#!/usr/bin/env python3
r"""Translation of rsync filter rules into regular expressions.

Two stages:
- ``translate_body`` rewrites wildcard syntax character by character
- ``translate_rule`` wraps the body with anchoring, full-path and
  directory-suffix handling and pins the expression to the end of the path

The resulting expression is evaluated with ``fullmatch`` against a
``/``-separated path relative to the transfer root.

Example:
    >>> translate_rule("*.java")
    '(?:.*/)?[^/]*\\.java$'
    >>> translate_rule("/build/")
    '^build(?:$|/.*)$'
"""

from typing import List, Tuple

from rsyncfilter.core.constants import (
    ESCAPABLE_CHARS,
    EXCLUDE_PREFIX,
    INCLUDE_PREFIX,
    REGEX_SPECIAL_CHARS,
    WILDCARD_CHARS,
)
from rsyncfilter.core.validators import PatternSyntaxError, validate_rule_text
from rsyncfilter.rules.posix import POSIX_OPEN, posix_to_regex

# Fragments
ANY = ".*"  # ** crosses directory boundaries
ANY_IN_SEGMENT = "[^/]*"  # * stays within one path segment
ONE_CHAR = "[^/]"  # ? is a single non-separator character
LITERAL_BACKSLASH = r"\\"
TAIL_PREFIX = "(?:.*/)?"  # unanchored rules may start at any segment
FULL_PATH_PREFIX = "(?:^|.*/)"  # multi-segment rules start on a boundary
ANCHORED_SUFFIX = "(?:$|/.*)"  # anchored rules also cover descendants
DIRECTORY_SUFFIX = "(?:/.*)?"  # directory rules also cover descendants
END = "$"


def has_wildcards(text: str) -> bool:
    """Return True if the rule uses any of ``* ? [``."""
    return any(c in text for c in WILDCARD_CHARS)


def is_directory_rule(text: str) -> bool:
    """Return True if the rule ends in exactly one slash."""
    return text.endswith("/") and not text.endswith("//")


def translate_body(text: str) -> str:
    """Translate wildcard rule text into a regex fragment.

    Args:
        text: Rule text without markers, anchor or directory slash

    Returns:
        Regex fragment (unanchored)

    Raises:
        PatternSyntaxError: On unknown POSIX classes or excessive complexity
    """
    wildcards = has_wildcards(text)
    out: List[str] = []
    count = 0
    i = 0
    n = len(text)

    while i < n:
        c = text[i]

        if c == "*":
            if text.startswith("**", i):
                count += 2
                _append_star(out, ANY)
                i += 2
            else:
                count += 1
                _append_star(out, ANY_IN_SEGMENT)
                i += 1
            continue

        if c == "?":
            count += 1
            out.append(ONE_CHAR)
            i += 1
            continue

        if c == "\\":
            if wildcards and i + 1 < n:
                escaped = text[i + 1]
                if escaped in ESCAPABLE_CHARS:
                    out.append("\\" + escaped)
                else:
                    # Not an escape in wildcard syntax: keep the backslash.
                    out.append(LITERAL_BACKSLASH)
                    out.append(_escape_char(escaped))
                i += 2
            else:
                out.append(LITERAL_BACKSLASH)
                i += 1
            continue

        if c == "[":
            count += 1
            if text.startswith(POSIX_OPEN, i):
                # The class name ends at the first "]" after the opening token.
                close = text.find("]", i + len(POSIX_OPEN))
                if close > 0 and text[close - 1] == ":":
                    try:
                        expression = posix_to_regex(text[i : close + 1] + "]")
                    except PatternSyntaxError as e:
                        raise PatternSyntaxError(e.description, text, i) from None
                    if text.startswith("]", close + 1):
                        out.append(expression)
                        i = close + 2
                    else:
                        # Class followed by more members, as in [[:digit:]a]
                        out.append("[" + expression[1:-1])
                        i = close + 1
                    continue
            if text.startswith("[!", i):
                out.append("[^")
                i += 2
                continue
            out.append(c)
            i += 1
            continue

        out.append(_escape_char(c))
        i += 1

    validate_rule_text(text, count)
    return "".join(out)


def _append_star(out: List[str], token: str) -> None:
    """Append a star token, merging it into a star token just before it."""
    if out and out[-1] in (ANY, ANY_IN_SEGMENT):
        if token == ANY:
            out[-1] = ANY
        return
    out.append(token)


def _escape_char(c: str) -> str:
    if c in REGEX_SPECIAL_CHARS:
        return "\\" + c
    return c


def split_rule(text: str) -> Tuple[str, bool]:
    """Strip the exclude marker and leading slash from a rule.

    Args:
        text: Non-blank, non-comment rule text

    Returns:
        The remaining rule text and whether it was anchored

    Raises:
        PatternSyntaxError: If the rule is an include rule or is empty after
            removing its marker
    """
    rule = text
    if rule.startswith(EXCLUDE_PREFIX):
        rule = rule[len(EXCLUDE_PREFIX) :]
    if rule.startswith(INCLUDE_PREFIX):
        raise PatternSyntaxError(
            "Include operations unsupported (cannot start with + and space)", text, 0
        )
    if not rule:
        raise PatternSyntaxError("Empty rule", text)

    if rule.startswith("/"):
        return rule[1:], True
    return rule, False


def rule_is_directory(text: str) -> bool:
    """Return True if a full rule, marker and anchor included, is directory-only."""
    return is_directory_rule(split_rule(text)[0])


def translate_rule(text: str) -> str:
    """Translate a complete filter rule into a regular expression.

    Args:
        text: Non-blank, non-comment rule text

    Returns:
        Regular expression string

    Raises:
        PatternSyntaxError: If the rule is an include rule, is empty after
            removing its marker, or cannot be translated
    """
    validate_rule_text(text)

    rule, anchored = split_rule(text)
    out: List[str] = []

    if anchored:
        out.append("^")
    else:
        out.append(TAIL_PREFIX)
        # Rules naming a slash before their last character, or using **,
        # are matched against the whole relative path.
        if "/" in rule[:-1] or "**" in rule:
            out.append(FULL_PATH_PREFIX)

    directory = is_directory_rule(rule)
    body = rule[:-1] if directory else rule
    try:
        out.append(translate_body(body))
    except PatternSyntaxError as e:
        offset = len(text) - len(rule) if e.index >= 0 else 0
        raise PatternSyntaxError(e.description, text, e.index + offset) from None

    if anchored:
        out.append(ANCHORED_SUFFIX)
    elif directory:
        out.append(DIRECTORY_SUFFIX)

    out.append(END)
    return "".join(out)

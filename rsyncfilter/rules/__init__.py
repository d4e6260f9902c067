"""rsyncfilter Rules System.

This module compiles rsync exclude rules and matches paths against them:
- compile / Pattern: one rule line, classified and translated to a regex
- FilterList: every rule of an exclude file

Supported syntax follows rsync's pattern matching rules for exclude
filters: ``*``, ``**``, ``?``, bracket expressions, POSIX classes,
backslash escapes, anchored and directory-only rules.
"""

from .engine import FilterList
from .patterns import Pattern, PatternKind, compile, matches
from .posix import POSIX_CLASSES, posix_to_regex
from .translator import translate_body, translate_rule

__all__ = [
    # Patterns
    "PatternKind",
    "Pattern",
    "compile",
    "matches",
    # Translation
    "translate_body",
    "translate_rule",
    "POSIX_CLASSES",
    "posix_to_regex",
    # Rule files
    "FilterList",
]

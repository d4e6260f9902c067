"""rsyncfilter - rsync-compatible exclude rule matching.

Example:
    >>> import rsyncfilter
    >>> pattern = rsyncfilter.compile("build/")
    >>> rsyncfilter.matches(pattern, "/srv/project", "build/out.txt")
    True
"""

from rsyncfilter.core.constants import RSYNCFILTER_VERSION as __version__
from rsyncfilter.core.validators import InvalidArgumentError, PatternSyntaxError, ValidationError
from rsyncfilter.rules import FilterList, Pattern, PatternKind, compile, matches

__all__ = [
    "__version__",
    "compile",
    "matches",
    "Pattern",
    "PatternKind",
    "FilterList",
    "ValidationError",
    "PatternSyntaxError",
    "InvalidArgumentError",
]

"""POSIX character classes for filter rules.

Maps the class names accepted inside ``[[:NAME:]]`` to equivalent ASCII
bracket expressions. The table is built once at import and never mutated.
"""

from types import MappingProxyType
from typing import Mapping

from rsyncfilter.core.validators import PatternSyntaxError

POSIX_CLASSES: Mapping[str, str] = MappingProxyType(
    {
        "alnum": r"[a-zA-Z0-9]",
        "alpha": r"[a-zA-Z]",
        "ascii": r"[\x00-\x7F]",
        "blank": r"[ \t]",
        "cntrl": r"[\x00-\x1F\x7F]",
        "digit": r"[0-9]",
        "graph": r"[\x21-\x7E]",
        "lower": r"[a-z]",
        "print": r"[\x20-\x7E]",
        "punct": r"""[!"#$%&'()*+,\-./:;<=>?@\[\\\]^_`{|}~]""",
        "space": r"[ \t\r\n\v\f]",
        "upper": r"[A-Z]",
        "word": r"[A-Za-z0-9_]",
        "xdigit": r"[A-Fa-f0-9]",
    }
)

POSIX_OPEN = "[[:"
POSIX_CLOSE = ":]]"


def posix_to_regex(token: str) -> str:
    """Convert a ``[[:NAME:]]`` token to its bracket expression.

    Args:
        token: Full POSIX token including the surrounding brackets

    Returns:
        Regex bracket expression for the class

    Raises:
        PatternSyntaxError: If the token is malformed or names an unknown class
    """
    if not token.startswith(POSIX_OPEN) or not token.endswith(POSIX_CLOSE):
        raise PatternSyntaxError("Invalid POSIX class format", token)

    name = token[len(POSIX_OPEN) : -len(POSIX_CLOSE)]
    try:
        return POSIX_CLASSES[name.lower()]
    except KeyError:
        raise PatternSyntaxError(f"Unknown POSIX class {name!r}", token) from None

"""
rsyncfilter Foundation: Errors and Input Validators.

This module provides the exception types raised by rule compilation and
path matching, plus the argument checks shared by the matcher and the
filter list.
"""
import os
from pathlib import Path
from typing import Optional, Union

from rsyncfilter.core.constants import ErrorCode, Limits

PathLike = Union[str, "os.PathLike[str]"]


class ValidationError(Exception):
    """Base exception for validation errors."""

    def __init__(self, message: str, error_code: ErrorCode = ErrorCode.INVALID_INPUT):
        """Initialize ValidationError.

        Args:
            message: Error message
            error_code: Associated error code
        """
        super().__init__(message)
        self.error_code = error_code


class PatternSyntaxError(ValidationError):
    """A filter rule could not be compiled.

    Attributes:
        description: What went wrong
        pattern: The offending rule text
        index: Position of the problem in the rule text, or -1
    """

    def __init__(self, description: str, pattern: Optional[str], index: int = -1):
        self.description = description
        self.pattern = pattern
        self.index = index
        message = f"{description}: {pattern!r}"
        if index >= 0:
            message += f" (at index {index})"
        super().__init__(message, ErrorCode.PATTERN_SYNTAX)


class InvalidArgumentError(ValidationError, ValueError):
    """A path argument passed to the matcher is unusable."""

    def __init__(self, message: str):
        super().__init__(message, ErrorCode.INVALID_INPUT)


def validate_root(root: PathLike) -> Path:
    """Validate a transfer root.

    Args:
        root: Root directory to validate

    Returns:
        The root as a normalized Path

    Raises:
        InvalidArgumentError: If root is not absolute
    """
    path = Path(root)
    if not path.is_absolute():
        raise InvalidArgumentError(f"Root path must be absolute: {root}")
    return Path(os.path.normpath(path))


def validate_absolute(path: PathLike) -> Path:
    """Validate a path passed without an explicit root.

    Raises:
        InvalidArgumentError: If path is not absolute
    """
    candidate = Path(path)
    if not candidate.is_absolute():
        raise InvalidArgumentError(f"Provided path must be absolute: {path}")
    return candidate


def validate_rule_text(text: str, wildcards: int = 0) -> None:
    """Reject rule text too large to compile safely.

    Args:
        text: Rule text being translated
        wildcards: Number of wildcard tokens emitted so far

    Raises:
        PatternSyntaxError: If the rule exceeds the compile limits
    """
    if len(text) > Limits.MAX_RULE_LENGTH:
        raise PatternSyntaxError(
            f"Rule longer than {Limits.MAX_RULE_LENGTH} characters (too complex)", text
        )
    if wildcards > Limits.MAX_RULE_WILDCARDS:
        raise PatternSyntaxError(
            f"Rule uses more than {Limits.MAX_RULE_WILDCARDS} wildcards (too complex)", text
        )

#!/usr/bin/env python3
"""Ordered lists of filter rules.

This module loads rsync exclude files and evaluates every rule in them:
- One rule per line, blank and comment lines kept as inert patterns
- Syntax errors reported with the file and line number
- A path is excluded when any compiled rule matches it

Example:
    >>> rules = FilterList.from_lines(["*.o", "build/", "# generated"])
    >>> rules.is_excluded("/srv/project", "build/app.o")
    True
"""

from pathlib import Path
from typing import Iterable, Iterator, List, Optional, Union

from rsyncfilter.core.validators import PathLike, PatternSyntaxError
from rsyncfilter.infrastructure.logger import Logger, get_logger
from rsyncfilter.rules.patterns import Pattern, PatternKind, compile


class FilterList:
    """An ordered collection of compiled exclude rules."""

    def __init__(self, patterns: Optional[Iterable[Pattern]] = None, logger: Optional[Logger] = None):
        """Initialize filter list.

        Args:
            patterns: Already compiled patterns
            logger: Logger for match decisions (defaults to the global logger)
        """
        self._patterns: List[Pattern] = list(patterns or [])
        self._logger = logger or get_logger()

    @classmethod
    def from_lines(cls, lines: Iterable[str], logger: Optional[Logger] = None) -> "FilterList":
        """Compile rule lines.

        Raises:
            PatternSyntaxError: If any line fails to compile
        """
        rules = cls(logger=logger)
        rules.extend(lines)
        return rules

    @classmethod
    def from_file(cls, path: Union[str, Path], logger: Optional[Logger] = None) -> "FilterList":
        """Load an exclude file.

        Args:
            path: Rule file, UTF-8, one rule per line

        Returns:
            Filter list holding one pattern per line

        Raises:
            PatternSyntaxError: If a line fails to compile; the message names
                the file and line
            OSError: If the file cannot be read
        """
        rules = cls(logger=logger)
        with open(path, "r", encoding="utf-8") as f:
            for lineno, line in enumerate(f, start=1):
                try:
                    rules.add(line.rstrip("\r\n"))
                except PatternSyntaxError as e:
                    raise PatternSyntaxError(
                        f"{path}:{lineno}: {e.description}", e.pattern, e.index
                    ) from e

        rules._logger.info("Loaded filter rules", source=str(path), rules=rules.compiled_count)
        return rules

    def add(self, text: Optional[str]) -> Pattern:
        """Compile and append one rule.

        Returns:
            The compiled pattern
        """
        pattern = compile(text)
        self._patterns.append(pattern)
        return pattern

    def extend(self, lines: Iterable[str]) -> None:
        """Compile and append several rules."""
        for line in lines:
            self.add(line.rstrip("\r\n"))

    @property
    def compiled_count(self) -> int:
        """Number of rules that can match."""
        return sum(1 for p in self._patterns if p.kind is PatternKind.COMPILED)

    def is_excluded(self, root: PathLike, path: Optional[PathLike] = None) -> bool:
        """Check whether any rule matches the path.

        Takes the same arguments as :meth:`Pattern.matches`.
        """
        for pattern in self._patterns:
            if pattern.matches(root, path):
                self._logger.debug("Path excluded", path=str(path or root), rule=pattern.text)
                return True
        return False

    def matching_rules(self, root: PathLike, path: Optional[PathLike] = None) -> List[str]:
        """Get the text of every rule matching the path."""
        return [p.text for p in self._patterns if p.matches(root, path)]

    def __iter__(self) -> Iterator[Pattern]:
        return iter(self._patterns)

    def __len__(self) -> int:
        """Return number of rules, inert ones included."""
        return len(self._patterns)

    def __bool__(self) -> bool:
        """Return True if any rule can match."""
        return self.compiled_count > 0

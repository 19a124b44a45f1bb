"""Pattern list parsing.

Each input line holds one regular expression. ``#`` starts a comment that
runs to the end of the line unless it is escaped with a backslash. Lines that
are empty once comments and surrounding whitespace are removed are ignored.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Iterable, List, TextIO

from .exceptions import PatternError, PatternInputError

logger = logging.getLogger(__name__)

PATTERN_FLAGS = re.IGNORECASE


@dataclass(frozen=True)
class Pattern:
    """A compiled pattern together with the text it came from."""

    source: str
    line_number: int
    regex: re.Pattern

    def search(self, subject: str) -> bool:
        return self.regex.search(subject) is not None


def _is_escaped(line: str, index: int) -> bool:
    backslashes = 0
    position = index - 1
    while position >= 0 and line[position] == "\\":
        backslashes += 1
        position -= 1
    return backslashes % 2 == 1


def strip_comment(line: str) -> str:
    """Drop everything from the first unescaped ``#`` and trim whitespace."""
    index = line.find("#")
    while index != -1 and _is_escaped(line, index):
        index = line.find("#", index + 1)
    if index != -1:
        line = line[:index]
    return line.strip()


def parse_patterns(lines: Iterable[str]) -> List[Pattern]:
    """
    Compile every non-empty line into a ``Pattern``, preserving input order.

    Args:
        lines: Raw input lines (trailing newlines are fine)

    Returns:
        The compiled patterns; empty when the input holds only blanks and comments

    Raises:
        PatternError: If a line is not a valid regular expression
    """
    patterns: List[Pattern] = []
    for line_number, raw_line in enumerate(lines, start=1):
        source = strip_comment(raw_line)
        if not source:
            continue
        try:
            regex = re.compile(source, PATTERN_FLAGS)
        except re.error as exc:
            raise PatternError(line_number, str(exc)) from exc
        patterns.append(Pattern(source=source, line_number=line_number, regex=regex))

    logger.debug("Parsed %d patterns", len(patterns))
    return patterns


def read_patterns(stream: TextIO) -> List[Pattern]:
    """Read and compile patterns from a text stream such as stdin.

    Raises:
        PatternInputError: If the stream does not decode as text
        PatternError: If a line is not a valid regular expression
    """
    try:
        lines = stream.readlines()
    except UnicodeDecodeError as exc:
        raise PatternInputError() from exc
    return parse_patterns(lines)


__all__ = ["Pattern", "parse_patterns", "read_patterns", "strip_comment"]

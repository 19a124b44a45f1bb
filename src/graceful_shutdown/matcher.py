"""Decide which processes a pattern set selects."""

from __future__ import annotations

import logging
import os
from enum import Enum
from typing import TYPE_CHECKING, Iterable, List, Optional, Sequence

from .patterns import Pattern
from .processes import ProcessRecord

if TYPE_CHECKING:
    from .options import Options

logger = logging.getLogger(__name__)


class MatchMode(Enum):
    """Which process attribute patterns are tested against."""

    BASENAME = "basename"
    COMMANDLINE = "commandline"


class Matcher:
    """Pure predicate over process records."""

    def __init__(self, patterns: Sequence[Pattern], mode: MatchMode = MatchMode.BASENAME, owner_id: Optional[int] = None):
        self.patterns = tuple(patterns)
        self.mode = mode
        self.owner_id = owner_id

    @classmethod
    def from_options(cls, options: "Options") -> "Matcher":
        return cls(options.patterns, options.match_mode, options.owner_id)

    def subject(self, record: ProcessRecord) -> str:
        if self.mode is MatchMode.COMMANDLINE:
            return record.cmdline
        return record.name

    def is_match(self, record: ProcessRecord) -> bool:
        if self.owner_id is not None and record.owner_id != self.owner_id:
            return False
        subject = self.subject(record)
        return any(pattern.search(subject) for pattern in self.patterns)


def select_processes(
    matcher: Matcher,
    records: Iterable[ProcessRecord],
    *,
    exclude_pid: Optional[int] = None,
) -> List[ProcessRecord]:
    """Return the records *matcher* selects, never including *exclude_pid* (default: this process)."""
    if exclude_pid is None:
        exclude_pid = os.getpid()

    matched = []
    for record in records:
        if record.pid == exclude_pid:
            continue
        if matcher.is_match(record):
            matched.append(record)

    logger.debug("Matcher selected %d processes", len(matched))
    return matched


__all__ = ["MatchMode", "Matcher", "select_processes"]

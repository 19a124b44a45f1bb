"""Resolved run configuration."""

from __future__ import annotations

import signal
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple

from .matcher import MatchMode
from .patterns import Pattern
from .signals import DEFAULT_KILL_SIGNAL, DEFAULT_TERMINATE_SIGNAL

DEFAULT_WAIT_TIME_SECONDS = 5.0


class OutputMode(Enum):
    NORMAL = "normal"
    VERBOSE = "verbose"
    QUIET = "quiet"

    @property
    def show_normal(self) -> bool:
        return self is not OutputMode.QUIET

    @property
    def show_verbose(self) -> bool:
        return self is OutputMode.VERBOSE

    @classmethod
    def from_flags(cls, *, verbose: bool, quiet: bool, dry_run: bool = False) -> "OutputMode":
        """Dry runs always report verbosely; otherwise quiet beats normal and verbose beats normal."""
        if dry_run or verbose:
            return cls.VERBOSE
        if quiet:
            return cls.QUIET
        return cls.NORMAL


@dataclass(frozen=True)
class Options:
    """Everything one shutdown run needs, built once and read-only afterwards."""

    patterns: Tuple[Pattern, ...] = field(default_factory=tuple)
    terminate_signal: signal.Signals = DEFAULT_TERMINATE_SIGNAL
    kill_signal: signal.Signals = DEFAULT_KILL_SIGNAL
    wait_time: float = DEFAULT_WAIT_TIME_SECONDS
    kill: bool = True
    match_mode: MatchMode = MatchMode.BASENAME
    owner_id: Optional[int] = None
    output_mode: OutputMode = OutputMode.NORMAL
    dry_run: bool = False

    def __post_init__(self) -> None:
        if self.wait_time < 0:
            raise ValueError(f"wait_time must be non-negative (got {self.wait_time})")

    @property
    def wait_enabled(self) -> bool:
        return self.wait_time > 0

    @property
    def owner_filter_enabled(self) -> bool:
        return self.owner_id is not None

    @property
    def match_whole_command(self) -> bool:
        return self.match_mode is MatchMode.COMMANDLINE

    @property
    def quiet(self) -> bool:
        return not self.output_mode.show_normal


__all__ = ["DEFAULT_WAIT_TIME_SECONDS", "OutputMode", "Options"]

"""User-facing status output."""

from __future__ import annotations

import sys
from typing import Optional, TextIO

from .matcher import MatchMode
from .options import OutputMode
from .processes import ProcessRecord


class Console:
    """Write status lines to stderr and reports to stdout according to the output mode."""

    def __init__(
        self,
        output_mode: OutputMode = OutputMode.NORMAL,
        stream: Optional[TextIO] = None,
        out_stream: Optional[TextIO] = None,
    ):
        self.output_mode = output_mode
        self._stream = stream
        self._out_stream = out_stream

    # Both streams resolve lazily so pytest's capsys replacements are honoured.
    @property
    def stream(self) -> TextIO:
        return self._stream if self._stream is not None else sys.stderr

    @property
    def out_stream(self) -> TextIO:
        return self._out_stream if self._out_stream is not None else sys.stdout

    def _emit(self, message: str) -> None:
        print(message, file=self.stream)

    def report(self, message: str) -> None:
        """Write a result line meant for piping, such as a dry-run plan, to stdout."""
        if self.output_mode.show_normal:
            print(message, file=self.out_stream)

    def verbose(self, message: str) -> None:
        if self.output_mode.show_verbose:
            self._emit(message)

    def normal(self, message: str) -> None:
        if self.output_mode.show_normal:
            self._emit(message)

    def warning(self, message: str) -> None:
        self.normal(f"WARNING: {message}")

    def error(self, exc: BaseException) -> None:
        """Report *exc* followed by its chain of causes, indented one level each."""
        if not self.output_mode.show_normal:
            return
        self._emit(f"ERROR: {exc}")
        cause = exc.__cause__ or exc.__context__
        level = 1
        while cause is not None:
            self._emit(f"{'':{level * 2}}Caused by: {cause}")
            cause = cause.__cause__ or cause.__context__
            level += 1


def describe_process(record: ProcessRecord, match_mode: MatchMode = MatchMode.BASENAME) -> str:
    if match_mode is MatchMode.COMMANDLINE:
        return f"{record.pid} ({record.name}): {record.cmdline}"
    return f"{record.pid} ({record.name})"


__all__ = ["Console", "describe_process"]

"""Run one shutdown: snapshot, match, signal."""

from __future__ import annotations

import logging
from typing import Optional

from .console import Console
from .matcher import Matcher, select_processes
from .options import Options
from .orchestrator import ShutdownReport, SignalOrchestrator
from .processes import ProcessBackend, PsutilProcessBackend

logger = logging.getLogger(__name__)


def shutdown(
    options: Options,
    backend: Optional[ProcessBackend] = None,
    console: Optional[Console] = None,
    orchestrator: Optional[SignalOrchestrator] = None,
) -> ShutdownReport:
    """
    Shut down every process selected by *options*.

    Raises:
        EnumerationError: If the process table cannot be read; no signal has been sent
    """
    backend = backend or PsutilProcessBackend()
    console = console or Console(options.output_mode)
    orchestrator = orchestrator or SignalOrchestrator(backend, options, console)

    matcher = Matcher.from_options(options)
    matched = select_processes(matcher, backend.snapshot())
    logger.debug("Matched pids: %s", [record.pid for record in matched])

    if options.dry_run:
        return orchestrator.dry_run(matched)
    return orchestrator.run(matched)


def run(options: Options, backend: Optional[ProcessBackend] = None, console: Optional[Console] = None) -> bool:
    """Return True iff every matched process is gone at the end of the run."""
    return shutdown(options, backend, console).success


__all__ = ["run", "shutdown"]

"""
Two-phase shutdown of matched processes.

Every matched process first receives the terminate signal. The orchestrator
then polls until they have all exited or the wait window closes. Processes
still running at that point receive the kill signal when escalation is
enabled, and are reported as failures otherwise.

Usage:
    orchestrator = SignalOrchestrator(PsutilProcessBackend(), options, Console())
    report = orchestrator.run(matched)
    sys.exit(0 if report.success else 1)
"""

from __future__ import annotations

import logging
import signal
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, List, Optional, Sequence

from .console import Console, describe_process
from .exceptions import SignalDeliveryError
from .options import Options
from .processes import ProcessBackend, ProcessRecord

logger = logging.getLogger(__name__)

POLL_INTERVAL_SECONDS = 0.1


class ProcessOutcome(Enum):
    """Terminal state of one matched process."""

    TERMINATED_BY_REQUEST = "terminated_by_request"
    TERMINATED_BY_FORCE = "terminated_by_force"
    STILL_ALIVE = "still_alive"


@dataclass
class ShutdownReport:
    """Per-process outcomes of one run."""

    records: Dict[int, ProcessRecord] = field(default_factory=dict)
    outcomes: Dict[int, ProcessOutcome] = field(default_factory=dict)

    def record(self, process: ProcessRecord, outcome: ProcessOutcome) -> None:
        self.records[process.pid] = process
        self.outcomes[process.pid] = outcome

    @property
    def success(self) -> bool:
        return ProcessOutcome.STILL_ALIVE not in self.outcomes.values()

    @property
    def still_alive(self) -> List[ProcessRecord]:
        return [self.records[pid] for pid, outcome in self.outcomes.items() if outcome is ProcessOutcome.STILL_ALIVE]

    def outcome_of(self, pid: int) -> Optional[ProcessOutcome]:
        return self.outcomes.get(pid)


class SignalOrchestrator:
    """Drive terminate → wait → kill over a set of matched processes."""

    def __init__(
        self,
        backend: ProcessBackend,
        options: Options,
        console: Optional[Console] = None,
        *,
        poll_interval: float = POLL_INTERVAL_SECONDS,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._backend = backend
        self._options = options
        self._console = console or Console(options.output_mode)
        self._poll_interval = poll_interval
        self._sleep = sleep
        self._clock = clock

    def _describe(self, record: ProcessRecord) -> str:
        return describe_process(record, self._options.match_mode)

    def run(self, matched: Sequence[ProcessRecord]) -> ShutdownReport:
        """
        Shut down *matched* and classify how each process ended.

        Signal delivery failures are isolated to the process they concern and
        never abort the batch.

        Returns:
            ShutdownReport whose ``success`` is False iff any process is still alive
        """
        report = ShutdownReport()
        if not matched:
            logger.debug("No processes matched; nothing to shut down")
            return report

        pending = self._send_all(matched, self._options.terminate_signal, report)

        if self._options.wait_enabled:
            pending = self._wait_for_exit(pending, report)

        if pending:
            self._escalate(pending, report)

        self._report_survivors(report)
        return report

    def dry_run(self, matched: Sequence[ProcessRecord]) -> ShutdownReport:
        """Describe what ``run`` would signal without touching any process."""
        for record in matched:
            self._console.report(f"Would have sent {self._options.terminate_signal.name} to process {self._describe(record)}")
        return ShutdownReport()

    def _send_all(self, records: Sequence[ProcessRecord], signum: signal.Signals, report: ShutdownReport) -> List[ProcessRecord]:
        """Signal every record; return those that received it."""
        delivered = []
        for record in records:
            if self._send(record, signum):
                delivered.append(record)
            else:
                report.record(record, ProcessOutcome.STILL_ALIVE)
        return delivered

    def _send(self, record: ProcessRecord, signum: signal.Signals) -> bool:
        self._console.verbose(f"Sending {signum.name} to process {self._describe(record)}")
        try:
            self._backend.send_signal(record, signum)
        except SignalDeliveryError as exc:
            logger.debug("Signal delivery failed for pid %s: %s", record.pid, exc)
            self._console.normal(f"Failed to send {signum.name} to {self._describe(record)}: {exc.reason or exc}")
            return False
        return True

    def _wait_for_exit(self, pending: List[ProcessRecord], report: ShutdownReport) -> List[ProcessRecord]:
        start = self._clock()
        while pending and self._clock() - start < self._options.wait_time:
            self._sleep(self._poll_interval)
            still_running = []
            for record in pending:
                if self._backend.is_alive(record):
                    still_running.append(record)
                    continue
                self._console.verbose(f"Process shut down: {self._describe(record)}")
                report.record(record, ProcessOutcome.TERMINATED_BY_REQUEST)
            pending = still_running

        logger.debug("Wait phase finished with %d processes still running", len(pending))
        return pending

    def _escalate(self, pending: List[ProcessRecord], report: ShutdownReport) -> None:
        if not self._options.kill:
            logger.debug("Escalation disabled; %d processes left running", len(pending))
            for record in pending:
                report.record(record, ProcessOutcome.STILL_ALIVE)
            return

        self._console.verbose("Timeout reached. Forcefully shutting down processes.")
        killed = self._send_all(pending, self._options.kill_signal, report)
        if not killed:
            return

        # One settle interval so the kernel can reap the killed processes.
        self._sleep(self._poll_interval)
        for record in killed:
            if self._backend.is_alive(record):
                report.record(record, ProcessOutcome.STILL_ALIVE)
            else:
                report.record(record, ProcessOutcome.TERMINATED_BY_FORCE)

    def _report_survivors(self, report: ShutdownReport) -> None:
        for record in report.still_alive:
            self._console.normal(f"Process still alive: {self._describe(record)}")


__all__ = ["POLL_INTERVAL_SECONDS", "ProcessOutcome", "ShutdownReport", "SignalOrchestrator"]

"""Process table access.

The matcher and the signal orchestrator only talk to a ``ProcessBackend``:
take a snapshot, ask whether a snapshotted process is still alive, and send it
a signal. ``PsutilProcessBackend`` is the Linux implementation built on psutil.

Liveness checks are best effort against pid reuse: a pid that is recycled for
an unrelated process between two checks can in principle be mistaken for the
original one. psutil's creation-time comparison catches the common case.
"""

from __future__ import annotations

import logging
import signal
from dataclasses import dataclass
from typing import Dict, List, Optional, Protocol

import psutil

from .exceptions import EnumerationError, SignalDeliveryError

logger = logging.getLogger(__name__)

_SNAPSHOT_ATTRS = ["pid", "name", "cmdline", "uids"]


@dataclass(frozen=True)
class ProcessRecord:
    """Process attributes captured at snapshot time."""

    pid: int
    owner_id: int
    name: str
    cmdline: str


class ProcessBackend(Protocol):
    """Minimal contract the orchestration engine needs from the platform."""

    def snapshot(self) -> List[ProcessRecord]: ...

    def is_alive(self, record: ProcessRecord) -> bool: ...

    def send_signal(self, record: ProcessRecord, signum: signal.Signals) -> None: ...


def _record_from_info(info: Dict) -> Optional[ProcessRecord]:
    pid = info.get("pid")
    uids = info.get("uids")
    if pid is None or uids is None:
        return None

    name_value = info.get("name")
    name = "" if name_value is None else str(name_value)

    cmdline_value = info.get("cmdline")
    cmdline = ""
    if isinstance(cmdline_value, list):
        cmdline = " ".join(str(arg) for arg in cmdline_value)

    return ProcessRecord(pid=int(pid), owner_id=int(uids.real), name=name, cmdline=cmdline)


class PsutilProcessBackend:
    """Snapshot, check and signal processes through psutil."""

    def __init__(self) -> None:
        self._handles: Dict[int, psutil.Process] = {}

    def snapshot(self) -> List[ProcessRecord]:
        """
        Return a record for every process visible to the caller.

        Processes that exit or become unreadable while they are inspected are
        skipped.

        Raises:
            EnumerationError: If the process table cannot be listed at all
        """
        records: List[ProcessRecord] = []
        handles: Dict[int, psutil.Process] = {}
        try:
            for proc in psutil.process_iter(_SNAPSHOT_ATTRS):
                # process_iter already skips vanished pids and stores None for unreadable attributes.
                record = _record_from_info(proc.info)
                if record is None:
                    logger.debug("Skipping unreadable process %s", proc.pid)
                    continue
                records.append(record)
                handles[record.pid] = proc
        except (psutil.Error, OSError) as exc:
            raise EnumerationError(f"Failed to list processes: {exc}") from exc

        self._handles = handles
        logger.debug("Process snapshot captured %d processes", len(records))
        return records

    def is_alive(self, record: ProcessRecord) -> bool:
        """Report whether the snapshotted process is still running (zombies count as gone)."""
        handle = self._handles.get(record.pid)
        try:
            if handle is None:
                handle = psutil.Process(record.pid)
                if handle.name() != record.name:
                    logger.debug("Pid %s now belongs to %s, not %s", record.pid, handle.name(), record.name)
                    return False
            if not handle.is_running():
                return False
            return handle.status() != psutil.STATUS_ZOMBIE
        except psutil.NoSuchProcess:
            return False
        except psutil.AccessDenied:
            return psutil.pid_exists(record.pid)

    def send_signal(self, record: ProcessRecord, signum: signal.Signals) -> None:
        """
        Deliver *signum* to the process.

        A process that already exited is treated as signalled.

        Raises:
            SignalDeliveryError: If the signal cannot be delivered (e.g. permission denied)
        """
        try:
            handle = self._handles.get(record.pid) or psutil.Process(record.pid)
            handle.send_signal(signum)
        except psutil.NoSuchProcess:
            logger.debug("Process %s exited before %s could be sent", record.pid, signum.name)
        except psutil.AccessDenied as exc:
            raise SignalDeliveryError(record.pid, signum.name, "permission denied") from exc
        except (psutil.Error, OSError) as exc:
            raise SignalDeliveryError(record.pid, signum.name, str(exc)) from exc


__all__ = ["ProcessBackend", "ProcessRecord", "PsutilProcessBackend"]

"""Signal lookup table.

Signals can be given by number or by symbolic name. Names are
case-insensitive and the ``SIG`` prefix is optional, so ``term``, ``TERM``,
``SIGTERM`` and ``15`` all resolve to ``signal.SIGTERM``.
"""

from __future__ import annotations

import signal
from typing import Iterable, List

SUPPORTED_SIGNALS: tuple[signal.Signals, ...] = (
    signal.SIGABRT,
    signal.SIGALRM,
    signal.SIGHUP,
    signal.SIGINT,
    signal.SIGKILL,
    signal.SIGQUIT,
    signal.SIGSTOP,
    signal.SIGTERM,
    signal.SIGUSR1,
    signal.SIGUSR2,
)

DEFAULT_TERMINATE_SIGNAL = signal.SIGTERM
DEFAULT_KILL_SIGNAL = signal.SIGKILL

_BY_NAME = {sig.name[3:]: sig for sig in SUPPORTED_SIGNALS}
_BY_NUMBER = {int(sig): sig for sig in SUPPORTED_SIGNALS}


def parse_signal(text: str) -> signal.Signals:
    """Resolve a signal from its number or (case-insensitive) name.

    Raises:
        ValueError: If *text* names no supported signal.
    """
    candidate = text.strip()
    if candidate.isdigit():
        sig = _BY_NUMBER.get(int(candidate))
    else:
        upper = candidate.upper()
        if upper.startswith("SIG"):
            upper = upper[3:]
        sig = _BY_NAME.get(upper)
    if sig is None:
        raise ValueError(f'Failed to parse "{text}" as a signal name.')
    return sig


def signal_listing(signals: Iterable[signal.Signals] = SUPPORTED_SIGNALS, *, decorated: bool = False) -> List[str]:
    """Render ``number<TAB>NAME`` lines, with a header and footer when *decorated*."""
    lines = []
    if decorated:
        lines.append("Currently supported signals:")
    lines.extend(f"{int(sig)}\t{sig.name}" for sig in sorted(signals, key=int))
    if decorated:
        lines.append("Signal names does not require the SIG prefix, and are case-insensitive.")
    return lines


__all__ = [
    "DEFAULT_KILL_SIGNAL",
    "DEFAULT_TERMINATE_SIGNAL",
    "SUPPORTED_SIGNALS",
    "parse_signal",
    "signal_listing",
]

"""Gracefully terminate processes matched by regular expressions."""

from .exceptions import (
    ApplicationError,
    EnumerationError,
    PatternError,
    PatternInputError,
    SignalDeliveryError,
    UserNotFoundError,
)
from .matcher import Matcher, MatchMode, select_processes
from .options import Options, OutputMode
from .orchestrator import ProcessOutcome, ShutdownReport, SignalOrchestrator
from .patterns import Pattern, parse_patterns, strip_comment
from .processes import ProcessBackend, ProcessRecord, PsutilProcessBackend

__all__ = [
    "ApplicationError",
    "EnumerationError",
    "MatchMode",
    "Matcher",
    "Options",
    "OutputMode",
    "Pattern",
    "PatternError",
    "PatternInputError",
    "ProcessBackend",
    "ProcessOutcome",
    "ProcessRecord",
    "PsutilProcessBackend",
    "ShutdownReport",
    "SignalDeliveryError",
    "SignalOrchestrator",
    "UserNotFoundError",
    "parse_patterns",
    "select_processes",
    "strip_comment",
]

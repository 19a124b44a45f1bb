#!/usr/bin/env python3
"""Gracefully terminate processes whose names match patterns read from stdin.

Usage:
    echo '^firefox$' | graceful-shutdown --wait-time 10
    graceful-shutdown --whole-command --no-kill < patterns.txt

Each stdin line is a regular expression; ``#`` starts a comment. Matching
processes receive the terminate signal, and any still running after the wait
time receive the kill signal.
"""

from __future__ import annotations

import argparse
import logging
import os
import pwd
import signal
import sys
from typing import Any, Dict, List, Optional, Sequence, TextIO

from graceful_shutdown import runner
from graceful_shutdown.config import ConfigurationError, env_bool, env_parsed, env_seconds
from graceful_shutdown.console import Console
from graceful_shutdown.exceptions import ApplicationError, UserNotFoundError
from graceful_shutdown.logging_config import setup_logging
from graceful_shutdown.matcher import MatchMode
from graceful_shutdown.options import DEFAULT_WAIT_TIME_SECONDS, Options, OutputMode
from graceful_shutdown.patterns import Pattern, read_patterns
from graceful_shutdown.signals import (
    DEFAULT_KILL_SIGNAL,
    DEFAULT_TERMINATE_SIGNAL,
    parse_signal,
    signal_listing,
)

logger = logging.getLogger(__name__)

EXIT_SUCCESS = 0
EXIT_FAILURE = 1
EXIT_INTERRUPTED = 130


def load_defaults() -> Dict[str, Any]:
    """Read flag defaults from ``GRACEFUL_SHUTDOWN_*`` environment variables."""
    return {
        "wait_time": env_seconds("GRACEFUL_SHUTDOWN_WAIT_TIME", or_value=DEFAULT_WAIT_TIME_SECONDS),
        "terminate_signal": env_parsed(
            "GRACEFUL_SHUTDOWN_TERMINATE_SIGNAL",
            or_value=DEFAULT_TERMINATE_SIGNAL,
            cast=parse_signal,
        ),
        "kill_signal": env_parsed("GRACEFUL_SHUTDOWN_KILL_SIGNAL", or_value=DEFAULT_KILL_SIGNAL, cast=parse_signal),
        "no_kill": bool(env_bool("GRACEFUL_SHUTDOWN_NO_KILL", or_value=False)),
    }


def _signal_arg(text: str) -> signal.Signals:
    try:
        return parse_signal(text)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from exc


def _seconds_arg(text: str) -> float:
    try:
        value = float(text)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"{text!r} is not a number of seconds") from exc
    if value < 0:
        raise argparse.ArgumentTypeError(f"wait time must be non-negative (got {text})")
    return value


def build_parser(defaults: Optional[Dict[str, Any]] = None) -> argparse.ArgumentParser:
    defaults = defaults if defaults is not None else load_defaults()
    parser = argparse.ArgumentParser(
        prog="graceful-shutdown",
        description="Reads a list of commands to gracefully terminate from STDIN.",
    )
    parser.add_argument(
        "-w",
        "--wait-time",
        type=_seconds_arg,
        default=defaults["wait_time"],
        metavar="SECONDS",
        help="Number of seconds to wait for processes to terminate. Use 0 to skip waiting.",
    )
    parser.add_argument(
        "--no-kill",
        action="store_true",
        default=defaults["no_kill"],
        help="Do not kill processes that outlive the wait time; exit with an error status instead.",
    )
    parser.add_argument(
        "-s",
        "--terminate-signal",
        type=_signal_arg,
        default=defaults["terminate_signal"],
        metavar="SIGNAL",
        help="Signal to use when terminating processes (number or name, SIG prefix optional).",
    )
    parser.add_argument(
        "--kill-signal",
        type=_signal_arg,
        default=defaults["kill_signal"],
        metavar="SIGNAL",
        help="Signal to use when killing processes that did not quit in time.",
    )
    parser.add_argument(
        "-W",
        "--whole-command",
        "--whole",
        dest="match_whole",
        action="store_true",
        help="Match the whole commandline for the process rather than the basename.",
    )
    parser.add_argument("-u", "--user", metavar="USER", help="Only find processes owned by the user with the given name.")
    parser.add_argument(
        "-m",
        "--mine",
        action="store_true",
        help="Only find processes owned by you. Has no effect if --user is specified.",
    )
    parser.add_argument(
        "-n",
        "--dry-run",
        action="store_true",
        help="Don't send any signals, show what would be done instead. Implies --verbose.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        dest="output_mode",
        action="store_const",
        const=OutputMode.VERBOSE,
        default=OutputMode.NORMAL,
        help="Show more verbose output.",
    )
    parser.add_argument(
        "-q",
        "--quiet",
        dest="output_mode",
        action="store_const",
        const=OutputMode.QUIET,
        help="Don't render any output.",
    )
    parser.add_argument("--list-signals", action="store_true", help="List all supported signals and exit.")
    return parser


def resolve_owner(user: Optional[str], mine: bool) -> Optional[int]:
    """Return the uid to restrict matches to, or None for everybody."""
    if user is not None:
        try:
            return pwd.getpwnam(user).pw_uid
        except KeyError as exc:
            raise UserNotFoundError(user) from exc
    if mine:
        return os.getuid()
    return None


def output_mode_from_args(args: argparse.Namespace) -> OutputMode:
    return OutputMode.from_flags(
        verbose=args.output_mode is OutputMode.VERBOSE,
        quiet=args.output_mode is OutputMode.QUIET,
        dry_run=args.dry_run,
    )


def build_options(args: argparse.Namespace, patterns: Sequence[Pattern]) -> Options:
    return Options(
        patterns=tuple(patterns),
        terminate_signal=args.terminate_signal,
        kill_signal=args.kill_signal,
        wait_time=args.wait_time,
        kill=not args.no_kill,
        match_mode=MatchMode.COMMANDLINE if args.match_whole else MatchMode.BASENAME,
        owner_id=resolve_owner(args.user, args.mine),
        output_mode=output_mode_from_args(args),
        dry_run=args.dry_run,
    )


def list_signals(stream: Optional[TextIO] = None) -> None:
    stream = stream or sys.stdout
    # Header and footer only for humans; piped output stays machine-readable.
    for line in signal_listing(decorated=_is_tty(stream)):
        print(line, file=stream)


def _is_tty(stream: TextIO) -> bool:
    isatty = getattr(stream, "isatty", None)
    return bool(isatty and isatty())


def main(argv: Optional[List[str]] = None, stdin: Optional[TextIO] = None) -> int:
    try:
        defaults = load_defaults()
    except ConfigurationError as exc:
        Console().error(exc)
        return EXIT_FAILURE

    args = build_parser(defaults).parse_args(argv)
    if args.list_signals:
        list_signals()
        return EXIT_SUCCESS

    console = Console(output_mode_from_args(args))
    stdin = stdin if stdin is not None else sys.stdin

    try:
        setup_logging()
        if _is_tty(stdin):
            console.warning("Reading processlist from TTY stdin. Exit with ^D when you are done, or ^C to abort.")
        patterns = read_patterns(stdin)
        options = build_options(args, patterns)
        success = runner.run(options, console=console)
    except (ApplicationError, ConfigurationError) as exc:
        logger.debug("Run aborted", exc_info=True)
        console.error(exc)
        return EXIT_FAILURE
    except KeyboardInterrupt:
        return EXIT_INTERRUPTED

    return EXIT_SUCCESS if success else EXIT_FAILURE


if __name__ == "__main__":
    sys.exit(main())

"""Exception classes for graceful-shutdown.

All custom exceptions inherit from ``ApplicationError`` so the command line
front end can report them uniformly.

Exception classes support two patterns:
1. No-argument raise: raise EnumerationError()
2. Contextual attributes: err = PatternError(line_number=3, message="..."); raise err
"""

from typing import Any


class ApplicationError(Exception):
    """Base exception for all application errors.

    Supports keyword arguments that are stored as attributes for debugging.
    """

    def __init__(self, message: str = "", **kwargs: Any) -> None:
        if not message:
            message = self.__class__.__doc__ or "Application error occurred"
        super().__init__(message)
        for key, value in kwargs.items():
            setattr(self, key, value)


class PatternError(ApplicationError):
    """A pattern line is not a valid regular expression."""

    def __init__(self, line_number: int, message: str) -> None:
        super().__init__(f"Invalid pattern on line {line_number}: {message}", line_number=line_number, reason=message)


class PatternInputError(ApplicationError):
    """The pattern list could not be decoded."""

    def __init__(self, message: str = "", **kwargs: Any) -> None:
        if not message:
            message = "Could not read patterns: input is not valid UTF-8"
        super().__init__(message, **kwargs)


class EnumerationError(ApplicationError):
    """The process table could not be read."""

    def __init__(self, message: str = "", **kwargs: Any) -> None:
        if not message:
            message = "Could not read the process table"
        super().__init__(message, **kwargs)


class SignalDeliveryError(ApplicationError):
    """A signal could not be delivered to a single process."""

    def __init__(self, pid: int, signal_name: str, reason: str = "") -> None:
        message = f"Failed to send {signal_name} to process {pid}"
        if reason:
            message += f": {reason}"
        super().__init__(message, pid=pid, signal_name=signal_name, reason=reason)


class UserNotFoundError(ApplicationError):
    """No account exists with the requested user name."""

    def __init__(self, name: str) -> None:
        super().__init__(f'Could not find user with name "{name}"', name=name)


__all__ = [
    "ApplicationError",
    "EnumerationError",
    "PatternError",
    "PatternInputError",
    "SignalDeliveryError",
    "UserNotFoundError",
]

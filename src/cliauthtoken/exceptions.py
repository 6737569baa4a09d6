"""Exception hierarchy for cliauthtoken.

All exceptions inherit from :class:`CLIAuthTokenError`, which carries an
``exit_code`` attribute mapped to a constant from
:mod:`cliauthtoken.exit_codes`, an :class:`ErrorKind` classification and a
``fatal`` flag. The library never terminates the process itself: the
top-level handler in :func:`cliauthtoken.app.main` catches
``CLIAuthTokenError`` and exits with the appropriate code.

Two kinds have no exception class: :attr:`ErrorKind.QUERY_PARSE_FAILURE`
and :attr:`ErrorKind.SHUTDOWN_FAILURE` are only ever logged.

Subclass hierarchy::

    CLIAuthTokenError            (exit 1)
    +-- InvalidConfigurationError  (exit 2, fatal)
    |   +-- ConfigError            (exit 2, fatal)
    +-- ListenerUnavailableError   (exit 3, fatal)
    +-- BrowserLaunchError         (exit 4, fatal)
    +-- ResponseWriteError         (exit 5, fatal)
    +-- TokenTimeoutError          (exit 6, recoverable)
"""

from __future__ import annotations

import enum

from cliauthtoken.exit_codes import (
    EXIT_BROWSER_LAUNCH_FAILURE,
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_CONFIGURATION,
    EXIT_LISTENER_UNAVAILABLE,
    EXIT_RESPONSE_WRITE_FAILURE,
    EXIT_TIMEOUT,
)


class ErrorKind(str, enum.Enum):
    """Classification of every failure the token flows can run into."""

    INVALID_CONFIGURATION = "invalid_configuration"
    LISTENER_UNAVAILABLE = "listener_unavailable"
    BROWSER_LAUNCH_FAILURE = "browser_launch_failure"
    RESPONSE_WRITE_FAILURE = "response_write_failure"
    QUERY_PARSE_FAILURE = "query_parse_failure"
    SHUTDOWN_FAILURE = "shutdown_failure"
    TIMEOUT_EXCEEDED = "timeout_exceeded"


class CLIAuthTokenError(Exception):
    """Base exception for all cliauthtoken errors.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE
    kind: ErrorKind | None = None
    fatal: bool = True

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class InvalidConfigurationError(CLIAuthTokenError):
    """Raised when the authorization URL cannot be parsed or is not absolute."""

    exit_code = EXIT_INVALID_CONFIGURATION
    kind = ErrorKind.INVALID_CONFIGURATION


class ConfigError(InvalidConfigurationError):
    """Raised for settings-file problems (invalid JSON, unknown keys, bad values)."""


class ListenerUnavailableError(CLIAuthTokenError):
    """Raised when the local callback port cannot be bound."""

    exit_code = EXIT_LISTENER_UNAVAILABLE
    kind = ErrorKind.LISTENER_UNAVAILABLE


class BrowserLaunchError(CLIAuthTokenError):
    """Raised when the default browser could not be started."""

    exit_code = EXIT_BROWSER_LAUNCH_FAILURE
    kind = ErrorKind.BROWSER_LAUNCH_FAILURE


class ResponseWriteError(CLIAuthTokenError):
    """Raised when the success page could not be written to the callback connection."""

    exit_code = EXIT_RESPONSE_WRITE_FAILURE
    kind = ErrorKind.RESPONSE_WRITE_FAILURE


class TokenTimeoutError(CLIAuthTokenError):
    """Raised when no callback arrives within the configured token timeout.

    Unlike its siblings this is not fatal: the caller may retry or fall back
    to the paste flow.
    """

    exit_code = EXIT_TIMEOUT
    kind = ErrorKind.TIMEOUT_EXCEEDED
    fatal = False

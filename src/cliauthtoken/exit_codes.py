"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~cliauthtoken.exceptions.CLIAuthTokenError` subclass.
Shell wrappers can inspect the exit code to tell a timeout (worth retrying)
apart from a broken environment without parsing stderr.

Example::

    $ TOKEN=$(cliauthtoken redirect https://auth.example.com/cli)
    $ echo $?
    6   # EXIT_TIMEOUT -- nobody completed the login in the browser
"""

EXIT_SUCCESS = 0
"""The token was obtained."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_CONFIGURATION = 2
"""The authorization URL or another setting is malformed."""

EXIT_LISTENER_UNAVAILABLE = 3
"""The local callback listener could not be bound."""

EXIT_BROWSER_LAUNCH_FAILURE = 4
"""The default web browser could not be started."""

EXIT_RESPONSE_WRITE_FAILURE = 5
"""The success page could not be written to the callback connection."""

EXIT_TIMEOUT = 6
"""No callback arrived before the token timeout elapsed."""

EXIT_INTERRUPTED = 130
"""The user pressed Ctrl-C."""

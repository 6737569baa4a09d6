"""Typer application and CLI entry point for cliauthtoken.

Registers the ``redirect`` and ``paste`` token commands and the ``config``
sub-group. The :func:`main` function is the console-script entry point
declared in ``pyproject.toml``: it installs a Ctrl-C handler, invokes the
Typer app and maps :class:`~cliauthtoken.exceptions.CLIAuthTokenError` to
its exit code. Any other exception is written to a crash log under the
data directory.
"""

from __future__ import annotations

import signal
import sys
import traceback
from datetime import datetime
from pathlib import Path
from typing import Any

import typer

from cliauthtoken import __version__
from cliauthtoken.commands.config import config_app
from cliauthtoken.commands.token import paste_command, redirect_command
from cliauthtoken.exceptions import CLIAuthTokenError
from cliauthtoken.exit_codes import EXIT_GENERIC_FAILURE, EXIT_INTERRUPTED


app = typer.Typer(
    name="cliauthtoken",
    help="Obtain a session token through your browser.",
    no_args_is_help=True,
    add_completion=False,
    rich_markup_mode="rich",
)

app.command("redirect")(redirect_command)
app.command("paste")(paste_command)
app.add_typer(config_app, name="config", help="Manage saved defaults.")


def _print_version(value: bool) -> None:
    if value:
        typer.echo(f"cliauthtoken {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    version: bool = typer.Option(
        False,
        "--version",
        callback=_print_version,
        is_eager=True,
        help="Show version and exit.",
    ),
    no_color: bool = typer.Option(False, "--no-color", help="Disable color output."),
    quiet: bool = typer.Option(
        False, "--quiet", "-q", help="Hide progress messages. The URL to open is still shown."
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Show callback server debug output."
    ),
) -> None:
    """Install the global OutputManager built from the output flags."""
    from cliauthtoken.output import OutputManager, set_output

    set_output(OutputManager(no_color=no_color, quiet=quiet, verbose=verbose))


def _setup_signal_handlers() -> None:
    """Turn Ctrl-C into a clean exit.

    ``SystemExit`` raised from the handler unwinds through the redirect
    flow, which shuts its callback server down on the way out.
    """

    def _on_sigint(signum: int, frame: Any) -> None:  # noqa: ANN401
        sys.stderr.write("\nCancelled.\n")
        sys.exit(EXIT_INTERRUPTED)

    signal.signal(signal.SIGINT, _on_sigint)


def _write_crash_log(exc: Exception) -> Path:
    """Save the traceback of *exc* to the data directory and return the file."""
    from cliauthtoken.config import get_data_dir

    stamp = datetime.now().strftime("%Y%m%d-%H%M%S")
    log_path = get_data_dir() / f"crash-{stamp}.log"
    log_path.write_text(
        f"cliauthtoken {__version__}\n"
        f"argv: {sys.argv!r}\n"
        f"{type(exc).__name__}: {exc}\n\n"
        f"{traceback.format_exc()}",
        encoding="utf-8",
    )
    return log_path


def main() -> None:
    """Console-script entry point. Always ends in ``SystemExit``."""
    from cliauthtoken.output import error

    _setup_signal_handlers()
    try:
        app()
    except SystemExit:
        raise
    except KeyboardInterrupt:
        sys.stderr.write("\nCancelled.\n")
        sys.exit(EXIT_INTERRUPTED)
    except CLIAuthTokenError as exc:
        error(str(exc))
        sys.exit(exc.exit_code)
    except Exception as exc:
        log_path = _write_crash_log(exc)
        error(f"Unexpected error. Crash log: {log_path}")
        sys.exit(EXIT_GENERIC_FAILURE)

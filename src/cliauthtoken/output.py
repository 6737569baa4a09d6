"""Diagnostics and data output with strict stdout/stderr discipline.

Follows `clig.dev <https://clig.dev/>`_ conventions:

* **stdout** -- the obtained token (or ``config show`` data) and nothing
  else, so ``TOKEN=$(cliauthtoken redirect ...)`` captures exactly the
  token.
* **stderr** -- the "open this URL" notice, progress, warnings, errors and
  ``--verbose`` debug lines.
* **Colour control** -- respects ``NO_COLOR``, ``TERM=dumb`` and the
  ``--no-color`` CLI flag.

:class:`OutputManager` is the logging sink handed to the token flows and
the callback server. The CLI installs one via :func:`set_output`; library
callers that never do get a lazily created default from
:func:`get_output`.
"""

from __future__ import annotations

import json
import os
import sys
from typing import Any, Optional

from rich.console import Console
from rich.markup import escape
from rich.syntax import Syntax


class OutputManager:
    """Routes every message to the right stream with the right styling.

    Args:
        no_color: Disable all colour and Rich markup.
        quiet: Suppress ``info``, ``success`` and ``suggest`` messages.
        verbose: Show ``debug`` messages.
    """

    def __init__(
        self,
        no_color: bool = False,
        quiet: bool = False,
        verbose: bool = False,
    ) -> None:
        self._no_color = no_color or _should_disable_color()
        self._quiet = quiet
        self._verbose = verbose

        self._stdout = Console(file=sys.stdout, no_color=self._no_color)
        self._stderr = Console(file=sys.stderr, no_color=self._no_color, stderr=True)

    @property
    def stderr_console(self) -> Console:
        """The Rich console bound to stderr, used for interactive prompts."""
        return self._stderr

    # --- stdout ---

    def print_data(self, text: str) -> None:
        """Print raw text to stdout, unstyled.

        Tokens go through here so that Rich never wraps or re-colours them.
        """
        print(text, file=sys.stdout, flush=True)

    def format_response(self, data: Any) -> None:
        """Print a JSON-serialisable value to stdout, highlighted on a terminal."""
        text = json.dumps(data, indent=2, ensure_ascii=False, default=str)
        if self._no_color or not _is_tty():
            self.print_data(text)
        else:
            self._stdout.print(Syntax(text, "json", theme="monokai", word_wrap=True))

    # --- stderr ---

    def _emit(self, message: str, label: str = "", style: str = "") -> None:
        """Write one diagnostic line to stderr.

        *label* is prepended (``"Error:"``); *style* is the Rich style for
        the label, or for the whole line when there is no label. Messages
        are escaped so URLs and tokens with brackets print literally.
        """
        if self._no_color:
            line = f"{label} {message}" if label else message
            print(line, file=sys.stderr, flush=True)
            return
        if label:
            styled = f"[{style}]{escape(label)}[/{style}] {escape(message)}"
        elif style:
            styled = f"[{style}]{escape(message)}[/{style}]"
        else:
            styled = escape(message)
        self._stderr.print(styled)

    def info(self, message: str) -> None:
        """Suppressed by ``--quiet``."""
        if not self._quiet:
            self._emit(message)

    def notice(self, message: str) -> None:
        """Instructions the user must act on, such as the URL to open.

        Unlike :meth:`info` this is printed even with ``--quiet``.
        """
        self._emit(message, style="bold")

    def success(self, message: str) -> None:
        if not self._quiet:
            self._emit(message, style="green")

    def warning(self, message: str) -> None:
        self._emit(message, label="Warning:", style="yellow")

    def error(self, message: str) -> None:
        """Never suppressed."""
        self._emit(message, label="Error:", style="bold red")

    def suggest(self, message: str) -> None:
        """Print a next-step hint, e.g. falling back to the paste flow."""
        if not self._quiet:
            self._emit(f"→ {message}", style="dim")

    def debug(self, message: str) -> None:
        """Shown only with ``--verbose``.

        The callback server calls this from its own threads; Rich consoles
        serialise writes internally.
        """
        if self._verbose:
            self._emit(message, label="[debug]", style="dim")


def _is_tty() -> bool:
    return hasattr(sys.stdout, "isatty") and sys.stdout.isatty()


def _should_disable_color() -> bool:
    """Return True when NO_COLOR is set (any value) or TERM=dumb."""
    return "NO_COLOR" in os.environ or os.environ.get("TERM") == "dumb"


# --- global instance ---

_output: Optional[OutputManager] = None


def get_output() -> OutputManager:
    """Return the global :class:`OutputManager`, creating a default one lazily."""
    global _output
    if _output is None:
        _output = OutputManager()
    return _output


def set_output(output: OutputManager) -> None:
    """Install *output* as the global manager. Called by the CLI root callback."""
    global _output
    _output = output


def reset_output() -> None:
    """Drop the global manager so the next use rebinds to the current streams."""
    global _output
    _output = None


def print_data(text: str) -> None:
    get_output().print_data(text)


def format_response(data: Any) -> None:
    get_output().format_response(data)


def info(message: str) -> None:
    get_output().info(message)


def success(message: str) -> None:
    get_output().success(message)


def error(message: str) -> None:
    get_output().error(message)


def suggest(message: str) -> None:
    get_output().suggest(message)


def debug(message: str) -> None:
    get_output().debug(message)

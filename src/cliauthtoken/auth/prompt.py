"""Default terminal and browser collaborators for the token flows.

:class:`~cliauthtoken.auth.flow.CLIAuthToken` takes both as constructor
arguments, so tests and embedding applications can swap them out.
"""

from __future__ import annotations

import webbrowser
from typing import Optional

from rich.console import Console
from rich.markup import escape

from cliauthtoken.output import get_output


def open_browser(url: str) -> bool:
    """Open *url* in the user's default browser.

    Returns:
        ``True`` if a browser was launched, ``False`` otherwise.
    """
    return webbrowser.open(url)


def ask_multiline(message: str, console: Optional[Console] = None) -> str:
    """Prompt for a possibly multi-line value on the terminal.

    Lines are read until an empty line or end of input and joined with
    ``"\\n"``. Nothing is stripped or otherwise altered.

    Args:
        message: Question shown above the input.
        console: Console to prompt on. Defaults to the stderr console of
            the global :class:`~cliauthtoken.output.OutputManager`.

    Returns:
        The entered text.
    """
    console = console or get_output().stderr_console
    console.print(f"[bold]?[/bold] {escape(message)} [dim](finish with an empty line)[/dim]")

    lines: list[str] = []
    while True:
        try:
            line = console.input()
        except EOFError:
            break
        if line == "":
            break
        lines.append(line)
    return "\n".join(lines)

"""Token commands -- run a flow and print the token.

``cliauthtoken redirect`` runs the browser redirect flow,
``cliauthtoken paste`` the manual copy/paste flow. The token is the only
thing written to stdout, so the commands compose in shell scripts::

    export API_TOKEN="$(cliauthtoken redirect https://auth.example.com/cli)"

Diagnostics and the "open this URL" notice go to stderr.
"""

from __future__ import annotations

from typing import Optional

import typer

from cliauthtoken.exceptions import CLIAuthTokenError
from cliauthtoken.output import debug, error, get_output, print_data, suggest


_URL_ARGUMENT = typer.Argument(
    None,
    help="Authorization endpoint. Falls back to $CLIAUTHTOKEN_AUTH_URL "
    "or the saved auth_request_url.",
    show_default=False,
)


def redirect_command(
    url: Optional[str] = _URL_ARGUMENT,
    listen_addr: Optional[str] = typer.Option(
        None, "--listen-addr", help="Local address for the callback listener."
    ),
    timeout: Optional[str] = typer.Option(
        None,
        "--timeout",
        "-t",
        help="Seconds to wait for the browser callback, or 'none'.",
    ),
    query_param: Optional[str] = typer.Option(
        None, "--query-param", help="Callback query parameter holding the token."
    ),
    callback_path: Optional[str] = typer.Option(
        None, "--callback-path", help="Path the callback listener answers on."
    ),
    redirect_param: Optional[str] = typer.Option(
        None,
        "--redirect-param",
        help="Authorization URL parameter carrying the callback address.",
    ),
) -> None:
    """Log in through the browser and print the captured token.

    Starts a listener on an ephemeral local port, opens the authorization
    URL with a redirect back to it and waits for the callback.

    Example::

        cliauthtoken redirect https://auth.example.com/cli --timeout 120
    """
    from cliauthtoken.auth.flow import CLIAuthToken
    from cliauthtoken.config import NOT_GIVEN, parse_timeout, resolve_config

    try:
        config = resolve_config(
            url,
            token_timeout=NOT_GIVEN if timeout is None else parse_timeout(timeout),
            listen_addr=listen_addr,
            callback_query_parameter=query_param,
            callback_path=callback_path,
            auth_request_callback_parameter=redirect_param,
        )
        debug(f"Token timeout: {config.token_timeout}")
        token = CLIAuthToken(config, output=get_output()).request_token_redirected()
    except CLIAuthTokenError as exc:
        error(str(exc))
        if not exc.fatal:
            suggest("Retry, or use 'cliauthtoken paste' to copy the token by hand.")
        raise typer.Exit(code=exc.exit_code) from None

    print_data(token)


def paste_command(
    url: Optional[str] = _URL_ARGUMENT,
    copy_param: Optional[str] = typer.Option(
        None,
        "--copy-param",
        help="Authorization URL parameter asking the endpoint to display the token.",
    ),
    copy_value: Optional[str] = typer.Option(
        None, "--copy-value", help="Value of the copy parameter."
    ),
) -> None:
    """Show the authorization URL and read the token pasted back.

    Use this when the browser cannot reach back to this machine, e.g. over
    SSH.

    Example::

        cliauthtoken paste https://auth.example.com/cli
    """
    from cliauthtoken.auth.flow import CLIAuthToken
    from cliauthtoken.config import resolve_config

    try:
        config = resolve_config(
            url,
            auth_request_copy_parameter=copy_param,
            auth_request_copy_parameter_value=copy_value,
        )
        token = CLIAuthToken(config, output=get_output()).request_token_pasteable()
    except CLIAuthTokenError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    print_data(token)

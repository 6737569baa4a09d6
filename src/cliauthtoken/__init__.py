"""cliauthtoken -- obtain a session token for a CLI through the user's browser.

The CLI opens an authorization endpoint in the browser and captures the
token from the redirect back to a short-lived local HTTP listener. When no
browser redirect is possible the user can paste the token instead.

Typical use::

    from cliauthtoken import new_cli_auth_token

    token = new_cli_auth_token("https://auth.example.com/cli").request_token_redirected()

or from a shell::

    TOKEN=$(cliauthtoken redirect https://auth.example.com/cli)

Modules:
    auth: The redirect and paste flows and their building blocks.
    app: Typer application and CLI entry point.
    models: Pydantic configuration model and defaults.
    config: XDG-aware settings file and precedence resolution.
    exceptions: Exception hierarchy with exit-code mapping.
    exit_codes: Numeric exit codes following clig.dev conventions.
    output: stdout/stderr discipline and diagnostics with Rich.
"""

__version__ = "0.1.0"

from cliauthtoken.auth.flow import CLIAuthToken, new_cli_auth_token  # noqa: E402
from cliauthtoken.models import AuthTokenConfig  # noqa: E402

__all__ = ["AuthTokenConfig", "CLIAuthToken", "new_cli_auth_token", "__version__"]

"""Token acquisition flows.

* :mod:`~cliauthtoken.auth.flow` -- :class:`CLIAuthToken`, the orchestrator
  behind both the redirect flow and the paste flow.
* :mod:`~cliauthtoken.auth.callback_server` -- the ephemeral local HTTP
  listener that receives the browser redirect.
* :mod:`~cliauthtoken.auth.synchronizer` -- the one-shot handoff between
  the callback handler and the flow.
* :mod:`~cliauthtoken.auth.urls` -- authorization URL construction.
* :mod:`~cliauthtoken.auth.prompt` -- default browser and terminal
  collaborators.
"""

from cliauthtoken.auth.callback_server import CallbackServer, ServerState
from cliauthtoken.auth.flow import CLIAuthToken, new_cli_auth_token
from cliauthtoken.auth.synchronizer import SessionSynchronizer
from cliauthtoken.auth.urls import build_auth_url, build_copy_url, build_redirect_url

__all__ = [
    "CLIAuthToken",
    "CallbackServer",
    "ServerState",
    "SessionSynchronizer",
    "build_auth_url",
    "build_copy_url",
    "build_redirect_url",
    "new_cli_auth_token",
]

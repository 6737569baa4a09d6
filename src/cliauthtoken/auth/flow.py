"""Interactive token flows: browser redirect and manual paste.

:class:`CLIAuthToken` sequences the pieces of a login:

**Redirect flow** (:meth:`CLIAuthToken.request_token_redirected`):
start the local :class:`~cliauthtoken.auth.callback_server.CallbackServer`,
build the authorization URL pointing back at it, open the browser, wait
for the callback and return the token while the server shuts down in the
background.

**Paste flow** (:meth:`CLIAuthToken.request_token_pasteable`): show the
authorization URL with the "display the token" parameter and read the
token the user pastes into the terminal.

Both return the token as an opaque string and never inspect it.

Example::

    clia = new_cli_auth_token("https://auth.example.com/cli", token_timeout=120)
    try:
        token = clia.request_token_redirected()
    except TokenTimeoutError:
        token = clia.request_token_pasteable()
"""

from __future__ import annotations

from typing import Any, Callable, Optional

from cliauthtoken.auth.callback_server import CallbackServer
from cliauthtoken.auth.prompt import ask_multiline, open_browser
from cliauthtoken.auth.synchronizer import SessionSynchronizer
from cliauthtoken.auth.urls import build_copy_url, build_redirect_url
from cliauthtoken.exceptions import BrowserLaunchError, CLIAuthTokenError
from cliauthtoken.models import AuthTokenConfig
from cliauthtoken.output import OutputManager, get_output


class CLIAuthToken:
    """Obtains a session token from a remote authorization endpoint.

    Args:
        config: Flow configuration.
        output: Logging sink. Defaults to the global
            :class:`~cliauthtoken.output.OutputManager`.
        browser_opener: Opens a URL in the browser, returning ``False`` on
            failure.
        prompt: Asks a multi-line question on the terminal and returns the
            answer.
    """

    def __init__(
        self,
        config: AuthTokenConfig,
        output: Optional[OutputManager] = None,
        browser_opener: Callable[[str], bool] = open_browser,
        prompt: Callable[[str], str] = ask_multiline,
    ) -> None:
        self.config = config
        self.output = output or get_output()
        self.browser_opener = browser_opener
        self.prompt = prompt
        self._last_server: Optional[CallbackServer] = None

    @property
    def last_server(self) -> Optional[CallbackServer]:
        """The callback server of the most recent redirect flow, if any.

        Each call to :meth:`request_token_redirected` starts a new one.
        """
        return self._last_server

    def request_token_redirected(self) -> str:
        """Run the redirect flow and return the captured token.

        Returns:
            The value of ``callback_query_parameter`` from the first
            callback, possibly an empty string.

        Raises:
            ListenerUnavailableError: If the local port cannot be bound.
            InvalidConfigurationError: If the authorization URL is malformed.
            BrowserLaunchError: If the browser cannot be opened.
            ResponseWriteError: If the success page could not be sent.
            TokenTimeoutError: If no callback arrives within
                ``token_timeout``. The listener is released before this is
                raised.
        """
        synchronizer = SessionSynchronizer()
        server = CallbackServer(self.config, synchronizer, self.output)
        self._last_server = server
        server.start()

        try:
            url = build_redirect_url(self.config, server.address)
            self.output.notice(self.config.prompt_open_browser.format(url=url))
            self._open_browser(url)
            session = synchronizer.receive(self.config.token_timeout)
        except BaseException:
            server.shutdown_quietly()
            raise

        server.shutdown_async()
        self.output.debug(f"Received session - {session}")
        return session

    def request_token_pasteable(self) -> str:
        """Run the paste flow and return exactly what the user entered.

        Raises:
            InvalidConfigurationError: If the authorization URL is malformed.
        """
        url = build_copy_url(self.config)
        self.output.notice(self.config.prompt_please_open.format(url=url))
        return self.prompt(self.config.prompt_paste_token)

    def _open_browser(self, url: str) -> None:
        try:
            opened = self.browser_opener(url)
        except CLIAuthTokenError:
            raise
        except Exception as exc:
            raise BrowserLaunchError(f"Error opening browser - {exc}") from exc
        if not opened:
            raise BrowserLaunchError("Error opening browser - no usable browser found")


def new_cli_auth_token(auth_request_url: str, **overrides: Any) -> CLIAuthToken:
    """Build a :class:`CLIAuthToken` with default settings.

    Args:
        auth_request_url: The authorization endpoint.
        **overrides: Any other :class:`~cliauthtoken.models.AuthTokenConfig`
            field, plus ``output``, ``browser_opener`` and ``prompt``.
    """
    flow_kwargs = {
        key: overrides.pop(key)
        for key in ("output", "browser_opener", "prompt")
        if key in overrides
    }
    config = AuthTokenConfig(auth_request_url=auth_request_url, **overrides)
    return CLIAuthToken(config, **flow_kwargs)

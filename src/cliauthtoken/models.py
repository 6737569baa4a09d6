"""Pydantic configuration model and defaults for the token flows.

:class:`AuthTokenConfig` is the single source of truth for how a flow
talks to the authorization endpoint and how the local callback server
behaves. Every default lives here as a module constant so that callers can
reuse (or restyle) them explicitly instead of relying on hidden globals.

Example::

    config = AuthTokenConfig(auth_request_url="https://auth.example.com/cli")
    config.token_timeout = 60  # validated on assignment
"""

from __future__ import annotations

from typing import Any, Callable, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


CALLBACK_QUERY_PARAMETER = "session"
CALLBACK_PATH = "/"
CALLBACK_SUCCESS_PAGE = """
<!DOCTYPE html><html lang="en"><body><h1>Success...</h1>
<p>You are authenticated, you can now return to the CLI. This will try to auto-close...</p>
<script>window.onload=function(){setTimeout(this.close, 2000)}</script></body></html>
"""
AUTH_REQUEST_CALLBACK_PARAMETER = "redirect"
AUTH_REQUEST_COPY_PARAMETER = "sessioncopy"
AUTH_REQUEST_COPY_PARAMETER_VALUE = "true"
LISTEN_ADDR = "127.0.0.1"
TOKEN_TIMEOUT = 5 * 60.0

PROMPT_PLEASE_OPEN = "Please open {url} in your browser"
PROMPT_PASTE_TOKEN = "Please paste the displayed token"
PROMPT_OPEN_BROWSER_URL = (
    "You will now be taken to your browser for authentication. "
    "Or browse this URL {url}"
)


def default_callback_value(address: Optional[tuple[Any, ...]]) -> str:
    """Format the bound listener address as the local callback URL.

    Args:
        address: The ``(host, port)`` pair the callback server is bound to
            (IPv6 sockets report a 4-tuple; only the first two items are
            used).

    Returns:
        ``http://<host>:<port>``, e.g. ``http://127.0.0.1:53121``. IPv6
        hosts are bracketed. An empty string when *address* is ``None``.
    """
    if address is None:
        return ""
    host, port = address[0], address[1]
    if ":" in host:
        host = f"[{host}]"
    return f"http://{host}:{port}"


class AuthTokenConfig(BaseModel):
    """Settings for one token flow invocation.

    ``validate_assignment`` is on, so setting a field after construction
    goes through the same validation as the constructor. Unknown fields are
    rejected so typos in a settings file surface as errors.
    """

    model_config = ConfigDict(extra="forbid", validate_assignment=True)

    auth_request_url: str = Field(
        description="Authorization endpoint opened in the user's browser"
    )
    callback_query_parameter: str = Field(
        default=CALLBACK_QUERY_PARAMETER,
        description="Query parameter of the callback request holding the token",
    )
    callback_path: str = Field(
        default=CALLBACK_PATH, description="Path the local callback server answers on"
    )
    callback_success_page: str = Field(
        default=CALLBACK_SUCCESS_PAGE,
        description="HTML returned to the browser after a callback",
    )
    auth_request_callback_parameter: str = Field(
        default=AUTH_REQUEST_CALLBACK_PARAMETER,
        description="Query parameter telling the endpoint where to redirect",
    )
    auth_request_callback_value_func: Callable[[Any], str] = Field(
        default=default_callback_value,
        exclude=True,
        description="Maps the bound listener address to the redirect value",
    )
    auth_request_copy_parameter: str = Field(
        default=AUTH_REQUEST_COPY_PARAMETER,
        description="Query parameter asking the endpoint to display the token",
    )
    auth_request_copy_parameter_value: str = AUTH_REQUEST_COPY_PARAMETER_VALUE
    listen_addr: str = Field(
        default=LISTEN_ADDR, description="Local bind address, loopback by default"
    )
    token_timeout: Optional[float] = Field(
        default=TOKEN_TIMEOUT,
        gt=0,
        description="Seconds to wait for the callback; None waits forever",
    )
    prompt_open_browser: str = PROMPT_OPEN_BROWSER_URL
    prompt_please_open: str = PROMPT_PLEASE_OPEN
    prompt_paste_token: str = PROMPT_PASTE_TOKEN
    shutdown_poll_interval: float = Field(
        default=0.1,
        gt=0,
        description="Serve-loop poll interval; bounds how long shutdown takes",
    )

    @field_validator("auth_request_url")
    @classmethod
    def _url_not_empty(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("auth_request_url must not be empty")
        return value

    @field_validator("callback_path")
    @classmethod
    def _path_is_absolute(cls, value: str) -> str:
        if not value.startswith("/"):
            raise ValueError(f"callback_path must start with '/': {value!r}")
        return value

    @field_validator("callback_query_parameter", "auth_request_callback_parameter",
                     "auth_request_copy_parameter")
    @classmethod
    def _name_not_empty(cls, value: str) -> str:
        if not value:
            raise ValueError("query parameter names must not be empty")
        return value


class AuthTokenSettings(BaseModel):
    """Persisted defaults from the settings file.

    Every field is optional; only the keys present in the file override
    :class:`AuthTokenConfig` defaults (``model_dump(exclude_unset=True)``).
    An explicit ``null`` for ``token_timeout`` disables the timeout.
    """

    model_config = ConfigDict(extra="forbid")

    auth_request_url: Optional[str] = None
    callback_query_parameter: Optional[str] = None
    callback_path: Optional[str] = None
    callback_success_page: Optional[str] = None
    auth_request_callback_parameter: Optional[str] = None
    auth_request_copy_parameter: Optional[str] = None
    auth_request_copy_parameter_value: Optional[str] = None
    listen_addr: Optional[str] = None
    token_timeout: Optional[float] = Field(default=None, gt=0)
    prompt_open_browser: Optional[str] = None
    prompt_please_open: Optional[str] = None
    prompt_paste_token: Optional[str] = None
    shutdown_poll_interval: Optional[float] = Field(default=None, gt=0)

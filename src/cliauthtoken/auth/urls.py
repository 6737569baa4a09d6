"""Authorization URL construction.

Both flows open the same configured endpoint and differ only in the query
parameter they merge into it: the redirect flow says where to send the
browser back to, the paste flow asks the endpoint to display the token.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Mapping

import httpx

from cliauthtoken.exceptions import InvalidConfigurationError

if TYPE_CHECKING:
    from cliauthtoken.models import AuthTokenConfig


def build_auth_url(base_url: str, params: Mapping[str, str]) -> str:
    """Merge *params* into the query string of *base_url*.

    Existing query parameters are kept in place; a key that also appears in
    *params* takes the new value.

    Args:
        base_url: The configured authorization endpoint.
        params: Query parameters to add or replace.

    Returns:
        The re-serialised URL.

    Raises:
        InvalidConfigurationError: If *base_url* cannot be parsed or is not
            an absolute ``http``/``https`` URL.
    """
    try:
        url = httpx.URL(base_url)
    except (httpx.InvalidURL, TypeError) as exc:
        raise InvalidConfigurationError(f"Cannot parse url {base_url!r}: {exc}") from exc

    if url.scheme not in ("http", "https") or not url.host:
        raise InvalidConfigurationError(
            f"Authorization URL must be an absolute http(s) URL: {base_url!r}"
        )

    return str(url.copy_merge_params(dict(params)))


def build_redirect_url(config: AuthTokenConfig, address: Any) -> str:
    """Authorization URL for the redirect flow.

    Args:
        config: Flow configuration.
        address: The callback server's bound address, passed unchanged to
            ``config.auth_request_callback_value_func``.
    """
    value = config.auth_request_callback_value_func(address)
    return build_auth_url(
        config.auth_request_url, {config.auth_request_callback_parameter: value}
    )


def build_copy_url(config: AuthTokenConfig) -> str:
    """Authorization URL for the paste flow."""
    return build_auth_url(
        config.auth_request_url,
        {config.auth_request_copy_parameter: config.auth_request_copy_parameter_value},
    )

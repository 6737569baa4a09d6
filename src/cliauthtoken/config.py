"""Settings file, directory layout and precedence resolution.

* **Directories** -- ``$XDG_CONFIG_HOME/cliauthtoken`` and
  ``$XDG_DATA_HOME/cliauthtoken`` on Linux/BSD, ``~/.cliauthtoken/`` on
  macOS and Windows (:func:`get_config_dir`, :func:`get_data_dir`).
* **Settings** -- ``config.json``, a JSON object validated as
  :class:`~cliauthtoken.models.AuthTokenSettings` and rewritten atomically.
* **Resolution** -- :func:`resolve_config` layers CLI flags, environment
  variables and saved settings over the model defaults to build the
  :class:`~cliauthtoken.models.AuthTokenConfig` a flow runs with.
"""

from __future__ import annotations

import json
import os
import platform
import tempfile
from pathlib import Path
from typing import Any, Optional

from pydantic import ValidationError

from cliauthtoken.exceptions import ConfigError
from cliauthtoken.models import AuthTokenConfig, AuthTokenSettings

_APP_NAME = "cliauthtoken"
_SETTINGS_FILENAME = "config.json"

ENV_AUTH_URL = "CLIAUTHTOKEN_AUTH_URL"
ENV_LISTEN_ADDR = "CLIAUTHTOKEN_LISTEN_ADDR"
ENV_TOKEN_TIMEOUT = "CLIAUTHTOKEN_TOKEN_TIMEOUT"

_NO_TIMEOUT_WORDS = ("none", "never", "off")


# --- Directories ---


def _is_xdg_platform() -> bool:
    system = platform.system()
    return system == "Linux" or system.endswith("BSD")


def _app_dir(xdg_var: str, xdg_default: str, fallback: str = "") -> Path:
    """Return (and create) this app's directory under an XDG base.

    *xdg_default* is relative to ``$HOME`` and used when *xdg_var* is unset
    or empty. Off XDG platforms everything lives under ``~/.cliauthtoken``,
    in the optional *fallback* subdirectory.
    """
    if _is_xdg_platform():
        base = os.environ.get(xdg_var) or str(Path.home() / xdg_default)
        path = Path(base) / _APP_NAME
    else:
        path = Path.home() / f".{_APP_NAME}"
        if fallback:
            path = path / fallback
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_config_dir() -> Path:
    """Directory holding ``config.json``."""
    return _app_dir("XDG_CONFIG_HOME", ".config")


def get_data_dir() -> Path:
    """Directory for crash logs."""
    return _app_dir("XDG_DATA_HOME", os.path.join(".local", "share"), fallback="logs")


def settings_path() -> Path:
    return get_config_dir() / _SETTINGS_FILENAME


def _atomic_write(path: Path, data: str) -> None:
    """Replace *path* with *data* so readers never see a partial file.

    The temp file is created in the target directory, making ``os.replace``
    a same-filesystem rename. It is removed again if anything fails.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    with tempfile.NamedTemporaryFile(
        "w",
        encoding="utf-8",
        dir=path.parent,
        prefix=f".{path.name}.",
        suffix=".tmp",
        delete=False,
    ) as tmp:
        tmp_path = Path(tmp.name)
        try:
            tmp.write(data)
            tmp.flush()
            os.fsync(tmp.fileno())
        except BaseException:
            tmp.close()
            tmp_path.unlink(missing_ok=True)
            raise
    try:
        os.replace(tmp_path, path)
    except OSError:
        tmp_path.unlink(missing_ok=True)
        raise


# --- Settings file ---


def load_settings() -> AuthTokenSettings:
    """Load the settings file.

    Returns:
        The deserialised :class:`~cliauthtoken.models.AuthTokenSettings`,
        or an empty instance if the file does not exist.

    Raises:
        ConfigError: If the file contains invalid JSON, unknown keys or
            values of the wrong type.
    """
    path = settings_path()
    if not path.is_file():
        return AuthTokenSettings()
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        return AuthTokenSettings.model_validate(data)
    except (json.JSONDecodeError, ValueError) as exc:
        raise ConfigError(f"Invalid settings at {path}: {exc}") from exc


def save_settings(settings: AuthTokenSettings) -> None:
    """Persist *settings* atomically. Only explicitly set keys are written."""
    data = settings.model_dump(mode="json", exclude_unset=True)
    _atomic_write(settings_path(), json.dumps(data, indent=2) + "\n")


def reset_settings() -> bool:
    """Delete the settings file. Returns False if there was none."""
    path = settings_path()
    if not path.is_file():
        return False
    path.unlink()
    return True


def parse_timeout(value: str) -> Optional[float]:
    """Parse a timeout given as text.

    ``none``, ``never`` and ``off`` (any case) mean "wait forever".

    Raises:
        ConfigError: If *value* is neither a number nor one of those words.
    """
    if value.strip().lower() in _NO_TIMEOUT_WORDS:
        return None
    try:
        return float(value)
    except ValueError:
        raise ConfigError(
            f"Invalid token timeout {value!r}: expected seconds or 'none'"
        ) from None


# --- Precedence resolution ---

# Stands for "no --timeout given"; ``None`` already means "wait forever".
NOT_GIVEN: Any = object()


def _env_overrides(skip: set[str]) -> dict[str, Any]:
    """Read the ``CLIAUTHTOKEN_*`` variables, ignoring keys in *skip*.

    Skipped keys are never parsed, so a malformed variable cannot fail a
    run whose CLI flags already override it.
    """
    overrides: dict[str, Any] = {}
    env_url = os.environ.get(ENV_AUTH_URL)
    if env_url and "auth_request_url" not in skip:
        overrides["auth_request_url"] = env_url
    env_addr = os.environ.get(ENV_LISTEN_ADDR)
    if env_addr and "listen_addr" not in skip:
        overrides["listen_addr"] = env_addr
    env_timeout = os.environ.get(ENV_TOKEN_TIMEOUT)
    if env_timeout and "token_timeout" not in skip:
        overrides["token_timeout"] = parse_timeout(env_timeout)
    return overrides


def resolve_config(
    auth_request_url: Optional[str] = None,
    token_timeout: Optional[float] = NOT_GIVEN,
    **cli_overrides: Any,
) -> AuthTokenConfig:
    """Build the effective flow configuration.

    Precedence (high to low):
        1. CLI flags (*auth_request_url*, *token_timeout* and
           *cli_overrides*). ``None`` in *cli_overrides* means "not given";
           for *token_timeout* it means "no timeout" and :data:`NOT_GIVEN`
           means "not given".
        2. Environment variables (``CLIAUTHTOKEN_AUTH_URL``,
           ``CLIAUTHTOKEN_LISTEN_ADDR``, ``CLIAUTHTOKEN_TOKEN_TIMEOUT``)
        3. Settings file
        4. :class:`~cliauthtoken.models.AuthTokenConfig` defaults

    Raises:
        ConfigError: If no authorization URL is configured anywhere, or a
            merged value fails validation.
    """
    cli: dict[str, Any] = {k: v for k, v in cli_overrides.items() if v is not None}
    if auth_request_url is not None:
        cli["auth_request_url"] = auth_request_url
    if token_timeout is not NOT_GIVEN:
        cli["token_timeout"] = token_timeout

    merged: dict[str, Any] = load_settings().model_dump(exclude_unset=True)
    merged.update(_env_overrides(skip=set(cli)))
    merged.update(cli)

    if not merged.get("auth_request_url"):
        raise ConfigError(
            "No authorization URL given: pass it as an argument, set "
            f"{ENV_AUTH_URL}, or run 'cliauthtoken config set auth_request_url URL'"
        )

    try:
        return AuthTokenConfig(**merged)
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration: {exc}") from exc

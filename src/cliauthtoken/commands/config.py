"""Config commands -- view and modify saved defaults.

Provides the ``cliauthtoken config`` sub-command group for reading,
updating and resetting the settings file
(:class:`~cliauthtoken.models.AuthTokenSettings`). Saved values sit below
environment variables and CLI flags in the precedence chain, see
:func:`cliauthtoken.config.resolve_config`.
"""

from __future__ import annotations

import typer

from cliauthtoken.exceptions import ConfigError
from cliauthtoken.output import error, format_response, info, print_data, success


config_app = typer.Typer(no_args_is_help=True)

_FLOAT_KEYS = ("shutdown_poll_interval",)


@config_app.command("show")
def config_show() -> None:
    """Show the saved settings.

    Example::

        cliauthtoken config show
    """
    from cliauthtoken.config import load_settings, settings_path

    try:
        settings = load_settings()
    except ConfigError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None
    info(f"Settings file: {settings_path()}")
    format_response(settings.model_dump(mode="json", exclude_unset=True))


@config_app.command("path")
def config_path() -> None:
    """Print the settings file location."""
    from cliauthtoken.config import settings_path

    print_data(str(settings_path()))


@config_app.command("set")
def config_set(
    key: str = typer.Argument(help="Setting name, e.g. 'listen_addr'."),
    value: str = typer.Argument(help="Value to save."),
) -> None:
    """Save a default value.

    ``token_timeout`` accepts seconds or ``none``; everything else except
    ``shutdown_poll_interval`` is text. The updated settings are validated
    before saving.

    Example::

        cliauthtoken config set auth_request_url https://auth.example.com/cli
        cliauthtoken config set token_timeout 120
    """
    from cliauthtoken.config import load_settings, parse_timeout, save_settings
    from cliauthtoken.models import AuthTokenSettings

    if key not in AuthTokenSettings.model_fields:
        error(f"Unknown config key: {key}")
        raise typer.Exit(code=2)

    try:
        settings = load_settings()
        data = settings.model_dump(exclude_unset=True)
        if key == "token_timeout":
            data[key] = parse_timeout(value)
        elif key in _FLOAT_KEYS:
            data[key] = float(value)
        else:
            data[key] = value
        new_settings = AuthTokenSettings.model_validate(data)
    except ConfigError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None
    except ValueError as exc:
        error(f"Validation error: {exc}")
        raise typer.Exit(code=2) from None

    save_settings(new_settings)
    success(f"Set {key} = {data[key]}")


@config_app.command("unset")
def config_unset(
    key: str = typer.Argument(help="Setting name to remove."),
) -> None:
    """Remove a saved value so the built-in default applies again."""
    from cliauthtoken.config import load_settings, save_settings
    from cliauthtoken.models import AuthTokenSettings

    try:
        data = load_settings().model_dump(exclude_unset=True)
    except ConfigError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None
    if key not in data:
        info(f"{key} is not set.")
        return
    del data[key]
    save_settings(AuthTokenSettings.model_validate(data))
    success(f"Unset {key}")


@config_app.command("reset")
def config_reset(
    force: bool = typer.Option(False, "--force", "-f", help="Skip confirmation."),
) -> None:
    """Delete all saved settings.

    Example::

        cliauthtoken config reset --force
    """
    from cliauthtoken.config import reset_settings

    if not force:
        confirmed = typer.confirm("Delete all saved settings?")
        if not confirmed:
            info("Cancelled.")
            raise typer.Exit()

    if reset_settings():
        success("Settings reset to defaults.")
    else:
        info("No saved settings.")

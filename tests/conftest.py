"""Shared test fixtures for cliauthtoken.

Provides isolated config directories, a plain-text verbose output manager
for asserting on diagnostics, and a Typer CLI runner.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from cliauthtoken.models import AuthTokenConfig
from cliauthtoken.output import OutputManager, reset_output, set_output


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager after every test.

    The OutputManager caches references to sys.stdout/sys.stderr at
    creation time. When CliRunner or capsys swap those streams out the
    cached references go stale, so a fresh manager is created on next use.
    """
    yield
    reset_output()


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point the XDG config and data directories at a temp directory.

    Also clears the ``CLIAUTHTOKEN_*`` environment variables so the
    developer's own settings never leak into a test.
    """
    monkeypatch.setattr("cliauthtoken.config._is_xdg_platform", lambda: True)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
    for var in (
        "CLIAUTHTOKEN_AUTH_URL",
        "CLIAUTHTOKEN_LISTEN_ADDR",
        "CLIAUTHTOKEN_TOKEN_TIMEOUT",
    ):
        monkeypatch.delenv(var, raising=False)
    return tmp_path


@pytest.fixture
def plain_output(capsys: pytest.CaptureFixture[str]) -> OutputManager:
    """Install a colourless, verbose OutputManager writing to captured streams."""
    output = OutputManager(no_color=True, verbose=True)
    set_output(output)
    return output


@pytest.fixture
def auth_config() -> AuthTokenConfig:
    """A config with a short timeout so a broken test cannot hang the suite."""
    return AuthTokenConfig(
        auth_request_url="https://auth.example.com/cli/login?client=cli",
        token_timeout=5,
    )


@pytest.fixture
def cli_runner():
    """Typer CLI test runner."""
    from typer.testing import CliRunner

    return CliRunner()

"""Tests for cliauthtoken.config -- XDG paths, atomic writes, settings, precedence."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from cliauthtoken.config import (
    _atomic_write,
    get_config_dir,
    get_data_dir,
    load_settings,
    parse_timeout,
    reset_settings,
    resolve_config,
    save_settings,
    settings_path,
)
from cliauthtoken.exceptions import ConfigError
from cliauthtoken.models import AuthTokenSettings


def _write_settings(data: object) -> None:
    path = settings_path()
    path.write_text(json.dumps(data), encoding="utf-8")


class TestPaths:
    def test_xdg_config_dir(self, isolated_config: Path) -> None:
        result = get_config_dir()

        assert result == isolated_config / "config" / "cliauthtoken"
        assert result.is_dir()

    def test_xdg_data_dir(self, isolated_config: Path) -> None:
        assert get_data_dir() == isolated_config / "data" / "cliauthtoken"

    def test_xdg_default_under_home(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("cliauthtoken.config._is_xdg_platform", lambda: True)
        monkeypatch.delenv("XDG_CONFIG_HOME", raising=False)
        monkeypatch.setattr(Path, "home", classmethod(lambda cls: tmp_path))

        assert get_config_dir() == tmp_path / ".config" / "cliauthtoken"

    def test_non_xdg_fallback(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("cliauthtoken.config._is_xdg_platform", lambda: False)
        monkeypatch.setattr(Path, "home", classmethod(lambda cls: tmp_path))

        assert get_config_dir() == tmp_path / ".cliauthtoken"
        assert get_data_dir() == tmp_path / ".cliauthtoken" / "logs"


class TestAtomicWrite:
    def test_writes_and_leaves_no_temp_files(self, tmp_path: Path) -> None:
        target = tmp_path / "sub" / "config.json"

        _atomic_write(target, '{"a": 1}\n')

        assert target.read_text(encoding="utf-8") == '{"a": 1}\n'
        assert [p.name for p in target.parent.iterdir()] == ["config.json"]


class TestSettings:
    def test_missing_file_gives_empty_settings(self, isolated_config: Path) -> None:
        assert load_settings().model_dump(exclude_unset=True) == {}

    def test_save_writes_only_set_keys(self, isolated_config: Path) -> None:
        save_settings(AuthTokenSettings(listen_addr="127.0.0.2"))

        assert json.loads(settings_path().read_text(encoding="utf-8")) == {
            "listen_addr": "127.0.0.2"
        }
        assert load_settings().listen_addr == "127.0.0.2"

    def test_invalid_json(self, isolated_config: Path) -> None:
        settings_path().write_text("{not json", encoding="utf-8")

        with pytest.raises(ConfigError, match="Invalid settings"):
            load_settings()

    def test_unknown_key(self, isolated_config: Path) -> None:
        _write_settings({"listen_port": 80})

        with pytest.raises(ConfigError):
            load_settings()

    def test_reset(self, isolated_config: Path) -> None:
        save_settings(AuthTokenSettings(listen_addr="127.0.0.2"))

        assert reset_settings() is True
        assert reset_settings() is False
        assert not settings_path().exists()


class TestParseTimeout:
    @pytest.mark.parametrize("text", ["none", "Never", "OFF"])
    def test_no_timeout_words(self, text: str) -> None:
        assert parse_timeout(text) is None

    def test_seconds(self) -> None:
        assert parse_timeout("90") == 90.0
        assert parse_timeout("0.5") == 0.5

    def test_garbage(self) -> None:
        with pytest.raises(ConfigError, match="Invalid token timeout"):
            parse_timeout("soon")


class TestResolveConfig:
    def test_cli_url(self, isolated_config: Path) -> None:
        config = resolve_config("https://auth.example.com/cli")

        assert config.auth_request_url == "https://auth.example.com/cli"
        assert config.listen_addr == "127.0.0.1"

    def test_missing_url(self, isolated_config: Path) -> None:
        with pytest.raises(ConfigError, match="No authorization URL"):
            resolve_config()

    def test_url_from_settings(self, isolated_config: Path) -> None:
        _write_settings({"auth_request_url": "https://saved.example.com/"})

        assert resolve_config().auth_request_url == "https://saved.example.com/"

    def test_precedence(self, isolated_config: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        _write_settings(
            {
                "auth_request_url": "https://saved.example.com/",
                "listen_addr": "127.0.0.2",
                "token_timeout": 100,
                "callback_query_parameter": "token",
            }
        )
        monkeypatch.setenv("CLIAUTHTOKEN_AUTH_URL", "https://env.example.com/")
        monkeypatch.setenv("CLIAUTHTOKEN_LISTEN_ADDR", "127.0.0.3")
        monkeypatch.setenv("CLIAUTHTOKEN_TOKEN_TIMEOUT", "50")

        config = resolve_config(listen_addr="127.0.0.4", callback_path=None)

        assert config.auth_request_url == "https://env.example.com/"
        assert config.listen_addr == "127.0.0.4"
        assert config.token_timeout == 50
        assert config.callback_query_parameter == "token"
        assert config.callback_path == "/"

    def test_cli_url_beats_env(self, isolated_config: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("CLIAUTHTOKEN_AUTH_URL", "https://env.example.com/")

        assert resolve_config("https://cli.example.com/").auth_request_url == "https://cli.example.com/"

    def test_env_disables_timeout(self, isolated_config: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("CLIAUTHTOKEN_TOKEN_TIMEOUT", "none")

        assert resolve_config("https://auth.example.com/").token_timeout is None

    def test_settings_null_disables_timeout(self, isolated_config: Path) -> None:
        _write_settings({"token_timeout": None})

        assert resolve_config("https://auth.example.com/").token_timeout is None

    def test_invalid_merged_value(self, isolated_config: Path) -> None:
        with pytest.raises(ConfigError, match="Invalid configuration"):
            resolve_config("https://auth.example.com/", callback_path="no-slash")

    def test_cli_timeout_beats_env(self, isolated_config: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("CLIAUTHTOKEN_TOKEN_TIMEOUT", "not-a-number")

        assert resolve_config("https://auth.example.com/", token_timeout=15).token_timeout == 15

    def test_cli_timeout_none_means_wait_forever(
        self, isolated_config: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("CLIAUTHTOKEN_TOKEN_TIMEOUT", "60")

        assert resolve_config("https://auth.example.com/", token_timeout=None).token_timeout is None

    def test_invalid_cli_timeout(self, isolated_config: Path) -> None:
        with pytest.raises(ConfigError, match="Invalid configuration"):
            resolve_config("https://auth.example.com/", token_timeout=-5)

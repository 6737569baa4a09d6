"""Tests for cliauthtoken.models -- config defaults and validation."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from cliauthtoken.models import (
    CALLBACK_SUCCESS_PAGE,
    AuthTokenConfig,
    AuthTokenSettings,
    default_callback_value,
)


class TestAuthTokenConfig:
    def test_defaults(self) -> None:
        config = AuthTokenConfig(auth_request_url="https://auth.example.com/cli")

        assert config.callback_query_parameter == "session"
        assert config.callback_path == "/"
        assert config.callback_success_page == CALLBACK_SUCCESS_PAGE
        assert config.auth_request_callback_parameter == "redirect"
        assert config.auth_request_callback_value_func is default_callback_value
        assert config.auth_request_copy_parameter == "sessioncopy"
        assert config.auth_request_copy_parameter_value == "true"
        assert config.listen_addr == "127.0.0.1"
        assert config.token_timeout == 300

    def test_url_is_required(self) -> None:
        with pytest.raises(ValidationError):
            AuthTokenConfig()  # type: ignore[call-arg]

    @pytest.mark.parametrize("url", ["", "   "])
    def test_empty_url_rejected(self, url: str) -> None:
        with pytest.raises(ValidationError, match="must not be empty"):
            AuthTokenConfig(auth_request_url=url)

    def test_callback_path_must_be_absolute(self) -> None:
        with pytest.raises(ValidationError, match="callback_path"):
            AuthTokenConfig(auth_request_url="https://a.example.com/", callback_path="cb")

    def test_unknown_field_rejected(self) -> None:
        with pytest.raises(ValidationError):
            AuthTokenConfig(auth_request_url="https://a.example.com/", listen_port=80)  # type: ignore[call-arg]

    def test_assignment_is_validated(self) -> None:
        config = AuthTokenConfig(auth_request_url="https://a.example.com/")

        config.token_timeout = 10
        assert config.token_timeout == 10
        config.token_timeout = None
        assert config.token_timeout is None
        with pytest.raises(ValidationError):
            config.token_timeout = -1

    def test_callable_not_dumped(self) -> None:
        config = AuthTokenConfig(auth_request_url="https://a.example.com/")

        assert "auth_request_callback_value_func" not in config.model_dump()


class TestAuthTokenSettings:
    def test_only_set_fields_dumped(self) -> None:
        settings = AuthTokenSettings(listen_addr="127.0.0.2", token_timeout=None)

        assert settings.model_dump(exclude_unset=True) == {
            "listen_addr": "127.0.0.2",
            "token_timeout": None,
        }

    def test_unknown_key_rejected(self) -> None:
        with pytest.raises(ValidationError):
            AuthTokenSettings.model_validate({"colour": "blue"})

    def test_timeout_must_be_positive(self) -> None:
        with pytest.raises(ValidationError):
            AuthTokenSettings(token_timeout=0)

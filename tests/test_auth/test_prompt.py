"""Tests for the default browser and terminal collaborators."""

from __future__ import annotations

from io import StringIO
from typing import Iterator

import pytest
from rich.console import Console

from cliauthtoken.auth.prompt import ask_multiline, open_browser


def _console_answering(lines: list[str]) -> tuple[Console, StringIO]:
    """A console whose input() replays *lines*, then raises EOFError."""
    buffer = StringIO()
    console = Console(file=buffer, no_color=True, width=200)
    answers: Iterator[str] = iter(lines)

    def fake_input(prompt: str = "", **kwargs: object) -> str:
        try:
            return next(answers)
        except StopIteration:
            raise EOFError from None

    console.input = fake_input  # type: ignore[method-assign]
    return console, buffer


class TestAskMultiline:
    def test_reads_until_empty_line(self) -> None:
        console, _ = _console_answering(["first", "second", "", "ignored"])

        assert ask_multiline("Paste it", console=console) == "first\nsecond"

    def test_reads_until_eof(self) -> None:
        console, _ = _console_answering(["only line"])

        assert ask_multiline("Paste it", console=console) == "only line"

    def test_whitespace_is_preserved(self) -> None:
        console, _ = _console_answering(["  eyJhbGciOi  ", "\tpart2", ""])

        assert ask_multiline("Paste it", console=console) == "  eyJhbGciOi  \n\tpart2"

    def test_nothing_entered(self) -> None:
        console, _ = _console_answering([""])

        assert ask_multiline("Paste it", console=console) == ""

    def test_shows_message(self) -> None:
        console, buffer = _console_answering([""])

        ask_multiline("Please paste the [displayed] token", console=console)

        assert "Please paste the [displayed] token" in buffer.getvalue()


class TestOpenBrowser:
    def test_delegates_to_webbrowser(self, monkeypatch: pytest.MonkeyPatch) -> None:
        opened: list[str] = []

        def fake_open(url: str) -> bool:
            opened.append(url)
            return True

        monkeypatch.setattr("cliauthtoken.auth.prompt.webbrowser.open", fake_open)

        assert open_browser("https://auth.example.com/") is True
        assert opened == ["https://auth.example.com/"]

    def test_reports_failure(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("cliauthtoken.auth.prompt.webbrowser.open", lambda url: False)

        assert open_browser("https://auth.example.com/") is False

"""Tests for shipit.output.console module."""

from __future__ import annotations

import pytest

from shipit.output.console import (
    ConsoleProtocol,
    MockConsole,
    RichConsole,
    Style,
)


class TestStyle:
    def test_str_conversion(self) -> None:
        assert str(Style.SUCCESS) == "success"
        assert str(Style.COMMAND) == "command"


class TestMockConsole:
    """Test MockConsole for testing purposes."""

    def test_print_captures_message(self) -> None:
        console = MockConsole()
        console.print("hello")
        assert console.outputs[0].message == "hello"
        assert console.outputs[0].style == Style.DEFAULT

    def test_prefixes(self) -> None:
        console = MockConsole()
        console.success("done")
        console.error("failed")
        console.warning("careful")
        console.info("syncing")
        assert console.messages == ["OK done", "error: failed", "warning: careful", "info: syncing"]

    def test_command_is_shell_quoted(self) -> None:
        console = MockConsole()
        console.command(["git", "commit", "-m", "Release version 1.2.4"])
        assert console.messages == ["$ git commit -m 'Release version 1.2.4'"]
        assert console.count(Style.COMMAND) == 1

    def test_has_error(self) -> None:
        console = MockConsole()
        console.info("fine")
        assert not console.has_error()
        console.error("broken")
        assert console.has_error()

    def test_find_and_text(self) -> None:
        console = MockConsole()
        console.banner("Release")
        console.newline()
        console.print("Version 1.2.4 is ready")
        assert len(console.find("1.2.4")) == 1
        assert console.text == "Release\n\nVersion 1.2.4 is ready"

    def test_satisfies_protocol(self) -> None:
        console: ConsoleProtocol = MockConsole()
        console.newline()


class TestRichConsole:
    def test_banner_is_boxed(self, capsys: pytest.CaptureFixture[str]) -> None:
        RichConsole().banner("Release")
        lines = capsys.readouterr().out.splitlines()
        assert lines == ["|---------|", "| Release |", "|---------|"]

    def test_markup_in_messages_is_escaped(self, capsys: pytest.CaptureFixture[str]) -> None:
        RichConsole().info("branch [staging]")
        assert "branch [staging]" in capsys.readouterr().out

    def test_command_echo(self, capsys: pytest.CaptureFixture[str]) -> None:
        RichConsole().command(["yarn", "install"])
        assert capsys.readouterr().out.strip() == "$ yarn install"

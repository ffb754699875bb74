"""Operator prompts.

The flow controller asks questions through ``Prompter`` so tests can script
the answers. ``TerminalPrompter`` uses the arrow-key selector on a real
terminal and falls back to line-based typer prompts otherwise (piped stdin,
CI shells, IDE consoles).
"""

from __future__ import annotations

from typing import Protocol, TypeVar

import typer

from shipit.cli.selector import SelectorOption, confirm_yn, is_interactive_terminal, select_one

T = TypeVar("T")


class Prompter(Protocol):
    def select(
        self, *, title: str, options: list[SelectorOption[T]], subtitle: str | None = None
    ) -> T | None:
        """Return the chosen value, or None if the operator cancelled."""
        ...

    def confirm(self, message: str) -> bool: ...


class TerminalPrompter:
    def select(
        self, *, title: str, options: list[SelectorOption[T]], subtitle: str | None = None
    ) -> T | None:
        if is_interactive_terminal():
            result = select_one(title=title, subtitle=subtitle, options=options)
            if result.action == "cancel":
                return None
            return result.value
        return _select_by_number(title=title, options=options)

    def confirm(self, message: str) -> bool:
        if is_interactive_terminal():
            return confirm_yn(prompt=message)
        return typer.confirm(message, default=False)


def _select_by_number(*, title: str, options: list[SelectorOption[T]]) -> T | None:
    if not options:
        raise ValueError("selector requires at least one option")

    typer.echo(title)
    for i, opt in enumerate(options, start=1):
        suffix = f"  ({opt.detail})" if opt.detail else ""
        typer.echo(f"  {i}) {opt.label}{suffix}")

    while True:
        raw = typer.prompt("Choice (empty to cancel)", default="", show_default=False)
        raw = raw.strip()
        if not raw:
            return None
        if raw.isdigit() and 1 <= int(raw) <= len(options):
            return options[int(raw) - 1].value
        typer.echo(f"Enter a number between 1 and {len(options)}.")

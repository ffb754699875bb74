"""Shared helpers for CLI commands."""

from __future__ import annotations

from typing import TYPE_CHECKING, NoReturn, TypeVar

import typer

from shipit.core.result import Err, Result
from shipit.output.console import Style
from shipit.release.errors import ReleaseError

if TYPE_CHECKING:
    from shipit.output.console import ConsoleProtocol


T = TypeVar("T")


def exit_on_error(result: Result[T, ReleaseError], console: ConsoleProtocol) -> T:
    """Return the value of an Ok result, or report the error and exit.

    The exit status is the error's own ``exit_code``, so a failed delegated
    command ends the process with that command's status.
    """
    if isinstance(result, Err):
        error = result.error
        console.error(error.message)
        if error.hint:
            console.print(f"hint: {error.hint}", Style.DIM)
        exit_with_code(error.exit_code)
    return result.value


def exit_with_code(code: int) -> NoReturn:
    raise typer.Exit(code=code)

"""External command execution.

The release flow never calls ``subprocess`` itself. It receives a
``CommandRunner``, a single ``run(argv) -> exit status`` capability, so tests
can substitute a recorder and production can stream tool output straight to
the operator's terminal.

Usage:
    runner = SubprocessRunner(cwd=project_root)
    match run_checked(runner, ["git", "fetch"]):
        case Ok(_):
            ...
        case Err(error):
            print(error)  # "git fetch failed (exit 128)"
"""

from __future__ import annotations

import subprocess
import sys
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from shipit.core.result import Err, Ok, Result

__all__ = [
    "CommandRunner",
    "ProcessError",
    "SubprocessRunner",
    "run_checked",
    "NOT_STARTED_EXIT",
]

# Reported when the executable could not be started at all.
NOT_STARTED_EXIT = 1


class CommandRunner(Protocol):
    def run(self, argv: Sequence[str]) -> int:
        """Run ``argv`` to completion and return its exit status."""
        ...


@dataclass(frozen=True, slots=True)
class ProcessError:
    """A delegated command that exited non-zero.

    Attributes:
        command: The argv that was executed.
        returncode: The exit status of the process.
    """

    command: tuple[str, ...]
    returncode: int

    def __str__(self) -> str:
        cmd_str = " ".join(self.command[:3])
        if len(self.command) > 3:
            cmd_str += " ..."
        return f"{cmd_str} failed (exit {self.returncode})"


class SubprocessRunner:
    """Runs commands synchronously, inheriting stdin/stdout/stderr.

    Output is not captured: the operator sees each tool's own diagnostics.
    There is no timeout; a hung tool blocks the run.
    """

    def __init__(self, cwd: Path, env: dict[str, str] | None = None) -> None:
        self.cwd = cwd
        self.env = env

    def run(self, argv: Sequence[str]) -> int:
        try:
            proc = subprocess.run(
                list(argv),
                cwd=str(self.cwd),
                env=self.env,
                check=False,
            )
        except OSError as e:
            sys.stderr.write(f"{argv[0]}: {e}\n")
            return NOT_STARTED_EXIT
        return proc.returncode


def run_checked(runner: CommandRunner, argv: Sequence[str]) -> Result[None, ProcessError]:
    """Run ``argv`` and turn a non-zero exit into ``Err(ProcessError)``."""
    code = runner.run(argv)
    if code != 0:
        return Err(ProcessError(command=tuple(argv), returncode=code))
    return Ok(None)

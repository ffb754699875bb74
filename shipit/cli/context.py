from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

import typer

from shipit.core.config import Config, load_project_config
from shipit.core.errors import ErrorCode
from shipit.core.result import Err
from shipit.output.console import ConsoleProtocol, RichConsole


@dataclass(frozen=True, slots=True)
class CLIContext:
    root: Path
    config: Config
    console: ConsoleProtocol


def build_context(*, root: Path, config_path: Path | None = None) -> CLIContext:
    try:
        resolved = root.expanduser().resolve()
    except OSError as e:
        typer.echo(f"error: invalid --root: {e}", err=True)
        raise typer.Exit(code=int(ErrorCode.RELEASE_ERROR))

    if not resolved.is_dir():
        typer.echo(f"error: project root '{resolved}' is not a directory", err=True)
        raise typer.Exit(code=int(ErrorCode.RELEASE_ERROR))

    config_result = load_project_config(resolved, path=config_path, environ=os.environ)
    if isinstance(config_result, Err):
        typer.echo(f"error: {config_result.error.message}", err=True)
        raise typer.Exit(code=int(ErrorCode.RELEASE_ERROR))

    return CLIContext(root=resolved, config=config_result.value, console=RichConsole())

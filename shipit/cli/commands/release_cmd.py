from __future__ import annotations

import os
from pathlib import Path

import typer

from shipit.cli.commands._helpers import exit_on_error, exit_with_code
from shipit.cli.context import build_context
from shipit.cli.prompts import TerminalPrompter
from shipit.cli.release_flow import ReleaseFlow
from shipit.core.errors import ErrorCode
from shipit.platform.process import SubprocessRunner
from shipit.release.model import ResumeMode


def release(
    root: Path = typer.Option(Path("."), "--root", help="Project root (holds package.json)."),
    config_path: Path | None = typer.Option(
        None, "--config", help="Config file (default: <root>/release.toml)."
    ),
    resume: bool = typer.Option(
        False,
        "--continue",
        help="Publish an already packaged version without re-packaging or bumping it.",
    ),
) -> None:
    """Run the interactive release."""
    ctx = build_context(root=root, config_path=config_path)

    flow = ReleaseFlow(
        root=ctx.root,
        config=ctx.config,
        console=ctx.console,
        runner=SubprocessRunner(cwd=ctx.root),
        prompter=TerminalPrompter(),
        environ=os.environ,
    )
    mode = ResumeMode.CONTINUE_FROM_PACKAGED if resume else ResumeMode.FRESH

    finished = exit_on_error(flow.run(resume=mode), ctx.console)
    if finished.aborted:
        ctx.console.warning("Release abandoned")
        exit_with_code(int(ErrorCode.OK))

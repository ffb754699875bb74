from __future__ import annotations

from pathlib import Path

import typer

from shipit.cli.commands._helpers import exit_on_error
from shipit.cli.context import build_context
from shipit.release.manifest import read_version
from shipit.release.semver import compute_version_candidates


def versions(
    preview: bool = typer.Option(False, "--preview", help="Show preview release candidates."),
    root: Path = typer.Option(Path("."), "--root", help="Project root (holds package.json)."),
    config_path: Path | None = typer.Option(
        None, "--config", help="Config file (default: <root>/release.toml)."
    ),
) -> None:
    """Show the versions the next release could use. Changes nothing."""
    ctx = build_context(root=root, config_path=config_path)

    current = exit_on_error(read_version(ctx.root / ctx.config.paths.manifest), ctx.console)
    candidates = exit_on_error(
        compute_version_candidates(current, is_preview=preview), ctx.console
    )

    ctx.console.info(f"The current application version is {current}")
    for version in candidates:
        ctx.console.print(f"  {version}")

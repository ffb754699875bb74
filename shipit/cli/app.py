from __future__ import annotations

import typer

from shipit import __version__
from shipit.cli.commands.release_cmd import release
from shipit.cli.commands.versions_cmd import versions


app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    rich_markup_mode="rich",
)


app.command()(release)
app.command()(versions)


def _print_version(value: bool) -> None:
    if value:
        typer.echo(__version__)
        raise typer.Exit(code=0)


@app.callback()
def _main(  # pyright: ignore[reportUnusedFunction]
    version: bool = typer.Option(
        False,
        "--version",
        callback=_print_version,
        is_eager=True,
        help="Show version and exit.",
    ),
) -> None:
    del version


def main() -> None:
    app()

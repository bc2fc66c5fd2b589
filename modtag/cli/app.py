from __future__ import annotations

import os
from pathlib import Path

import typer

from modtag import __version__
from modtag.cli.commands.changed import changed
from modtag.cli.commands.check_results import check_results
from modtag.cli.commands.release_cmd import release
from modtag.cli.commands.validate import validate
from modtag.cli.context import REPO_ROOT_ENV
from modtag.core.errors import ErrorCode


app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    rich_markup_mode="rich",
)


# Commands
app.command()(changed)
app.command()(validate)
app.command()(release)
app.command("check-results")(check_results)


@app.callback()
def _main(  # pyright: ignore[reportUnusedFunction]
    version: bool = typer.Option(False, "--version", help="Show version and exit."),
    repo_root: Path | None = typer.Option(
        None,
        "--repo-root",
        help="Repository checkout (default: $GITHUB_WORKSPACE or the current directory)",
    ),
) -> None:
    if version:
        typer.echo(__version__)
        raise typer.Exit(code=0)

    if repo_root is not None:
        try:
            root = repo_root.expanduser().resolve()
        except OSError as e:
            typer.echo(f"error: invalid --repo-root: {e}", err=True)
            raise typer.Exit(code=int(ErrorCode.USER_ERROR))

        if not root.is_dir():
            typer.echo(f"error: --repo-root '{root}' is not a directory", err=True)
            raise typer.Exit(code=int(ErrorCode.ENV_ERROR))

        os.environ[REPO_ROOT_ENV] = str(root)


def main() -> None:
    app()

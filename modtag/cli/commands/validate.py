from __future__ import annotations

import typer

from modtag.cli.commands._helpers import exit_with_code
from modtag.cli.context import build_context
from modtag.core.errors import ErrorCode
from modtag.services.release.pipeline import validate_module


def validate(
    directories: list[str] = typer.Argument(..., help="Module directories to validate."),
) -> None:
    """Validate VERSION files without contacting the remote."""
    ctx = build_context()

    outcomes = [
        validate_module(
            d.strip().rstrip("/"),
            repo_root=ctx.repo_root,
            modules=ctx.config.modules,
            console=ctx.console,
        )
        for d in directories
    ]
    if not all(o.ok for o in outcomes):
        exit_with_code(int(ErrorCode.USER_ERROR))

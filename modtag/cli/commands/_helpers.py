"""Shared helpers for CLI commands."""

from __future__ import annotations

from typing import TYPE_CHECKING, NoReturn

import typer

from modtag.core.result import Err
from modtag.output.errors import print_release_error, release_error_exit_code
from modtag.services.release.context import RunContext, load_run_context

if TYPE_CHECKING:
    from modtag.cli.context import CLIContext
    from modtag.services.release.errors import ReleaseError


def exit_with_code(code: int) -> NoReturn:
    """Exit with given code. Explicit helper for clarity."""
    raise typer.Exit(code=code)


def exit_release_error(error: ReleaseError, ctx: CLIContext) -> NoReturn:
    print_release_error(error, ctx.console)
    exit_with_code(release_error_exit_code(error))


def run_context_or_exit(ctx: CLIContext) -> RunContext:
    """Load the workflow run context, exiting on an incomplete environment."""
    result = load_run_context(ctx.env, ssh_host=ctx.config.release.ssh_host)
    if isinstance(result, Err):
        exit_release_error(result.error, ctx)
    return result.value

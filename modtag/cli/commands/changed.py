from __future__ import annotations

import json
from pathlib import Path

import typer

from modtag.cli.commands._helpers import exit_release_error, exit_with_code, run_context_or_exit
from modtag.cli.context import build_context
from modtag.core.errors import ErrorCode
from modtag.core.result import Err
from modtag.output.console import Style
from modtag.output.workflow import write_step_outputs
from modtag.services.release.discovery import changed_module_directories


def changed(
    base: str | None = typer.Option(None, "--base", help="Base commit (default: PR base)."),
    head: str | None = typer.Option(None, "--head", help="Head commit (default: PR head)."),
    github_output: bool = typer.Option(
        False,
        "--github-output",
        help="Write module-directories and module-count to $GITHUB_OUTPUT.",
    ),
) -> None:
    """List module directories whose VERSION file changed."""
    ctx = build_context()
    run = run_context_or_exit(ctx)

    directories: list[str] = []
    if run.should_run:
        base = base or run.base_sha
        head = head or run.head_sha
        if not base or not head:
            ctx.console.error("cannot detect changed modules without base and head commits")
            ctx.console.print("hint: pass --base/--head or run on a pull_request event", Style.DIM)
            exit_with_code(int(ErrorCode.USER_ERROR))

        result = changed_module_directories(
            repo_root=ctx.repo_root,
            base=base,
            head=head,
            modules=ctx.config.modules,
        )
        if isinstance(result, Err):
            exit_release_error(result.error, ctx)
        directories = result.value

    for directory in directories:
        ctx.console.print(directory)
    ctx.console.print(f"{len(directories)} module(s) changed", Style.DIM)

    if github_output:
        output_path = ctx.env.get("GITHUB_OUTPUT")
        if not output_path:
            ctx.console.error("GITHUB_OUTPUT is not set")
            exit_with_code(int(ErrorCode.ENV_ERROR))
        write_step_outputs(
            Path(output_path),
            {
                "module-directories": json.dumps(directories),
                "module-count": str(len(directories)),
            },
        )

from __future__ import annotations

import typer

from modtag.cli.commands._helpers import exit_release_error, exit_with_code, run_context_or_exit
from modtag.cli.context import build_context
from modtag.core.errors import ErrorCode
from modtag.core.result import Err
from modtag.output.console import ConsoleProtocol, Style
from modtag.output.errors import release_error_exit_code
from modtag.output.workflow import emit_annotation
from modtag.services.release.gh import ensure_gh_auth, ensure_gh_available
from modtag.services.release.host import GhReleaseHost
from modtag.services.release.pipeline import ReleaseReport, ReleaseService, detect_or_use


def release(
    directories: list[str] | None = typer.Argument(
        None, help="Module directories (default: none unless --changed)."
    ),
    changed: bool = typer.Option(
        False, "--changed", help="Process every module whose VERSION changed in the PR."
    ),
    preview: bool = typer.Option(
        False, "--preview", help="Never create tags or releases, even on a merged PR."
    ),
    max_parallel: int | None = typer.Option(
        None, "--max-parallel", min=1, help="Modules processed concurrently."
    ),
    base: str | None = typer.Option(None, "--base", help="Base commit for --changed."),
    head: str | None = typer.Option(None, "--head", help="Head commit for --changed."),
) -> None:
    """Validate, check and (on merge) tag and release changed modules."""
    ctx = build_context()
    run = run_context_or_exit(ctx)

    gh_ok = ensure_gh_available()
    if isinstance(gh_ok, Err):
        exit_release_error(gh_ok.error, ctx)
    auth = ensure_gh_auth(workspace_root=ctx.repo_root)
    if isinstance(auth, Err):
        exit_release_error(auth.error, ctx)

    host = GhReleaseHost(
        repo_root=ctx.repo_root,
        repository=run.repository,
        remote=ctx.config.release.remote,
        retry_attempts=ctx.config.release.retry_attempts,
    )
    service = ReleaseService(
        repo_root=ctx.repo_root,
        config=ctx.config,
        ctx=run,
        host=host,
        console=ctx.console,
    )

    selected = detect_or_use(service, directories or [], changed=changed, base=base, head=head)
    if isinstance(selected, Err):
        exit_release_error(selected.error, ctx)

    mode = "publish" if run.merged and not preview else "preview"
    ctx.console.print(f"{len(selected.value)} module(s), mode: {mode}", Style.DIM)

    report = service.run(selected.value, preview=preview, max_parallel=max_parallel)
    _finish(report, ctx.console)


def _finish(report: ReleaseReport, console: ConsoleProtocol) -> None:
    console.header("Summary")
    for outcome in report.outcomes:
        tag = outcome.release.tag if outcome.release else "-"
        if outcome.status == "success":
            action = "released" if outcome.published else "ok (preview)"
            console.print(f"{outcome.directory}: {action} [{tag}]", Style.SUCCESS)
        elif outcome.status == "skipped":
            console.print(f"{outcome.directory}: skipped", Style.DIM)
        else:
            console.print(f"{outcome.directory}: {outcome.status} [{tag}]", Style.ERROR)

    verdict = report.verdict
    if isinstance(verdict, Err):
        emit_annotation(console, "error", verdict.error.message)
        first = next((o.error for o in report.failed if o.error is not None), None)
        code = release_error_exit_code(first) if first else int(ErrorCode.USER_ERROR)
        exit_with_code(code)

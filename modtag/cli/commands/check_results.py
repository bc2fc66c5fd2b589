from __future__ import annotations

import json
from pathlib import Path

import typer

from modtag.cli.commands._helpers import exit_with_code
from modtag.core.errors import ErrorCode
from modtag.core.result import Err
from modtag.core.structured import as_str_dict
from modtag.output.console import ConsoleProtocol, RichConsole, Style
from modtag.output.workflow import emit_annotation
from modtag.services.release.aggregate import aggregate_job_results, job_result


def build_console() -> ConsoleProtocol:
    return RichConsole()


def check_results(
    needs: str | None = typer.Option(
        None,
        "--needs",
        envvar="MODTAG_NEEDS",
        help="JSON of the workflow `needs` context, e.g. '${{ toJSON(needs) }}'.",
    ),
    needs_file: Path | None = typer.Option(
        None, "--needs-file", help="Read the `needs` JSON from a file instead."
    ),
) -> None:
    """Fail unless every required job succeeded or was skipped."""
    console = build_console()

    if needs_file is not None:
        try:
            needs = needs_file.read_text(encoding="utf-8")
        except OSError as e:
            console.error(f"failed to read --needs-file: {e}")
            exit_with_code(int(ErrorCode.IO_ERROR))
    if needs is None:
        console.error("missing --needs (or --needs-file)")
        exit_with_code(int(ErrorCode.USER_ERROR))

    try:
        obj: object = json.loads(needs)
    except json.JSONDecodeError as e:
        console.error(f"invalid --needs JSON: {e}")
        exit_with_code(int(ErrorCode.USER_ERROR))

    data = as_str_dict(obj)
    if data is None:
        console.error("--needs must be a JSON object keyed by job id")
        exit_with_code(int(ErrorCode.USER_ERROR))

    for job, value in data.items():
        console.print(f"{job}: {job_result(value)}", Style.DIM)

    verdict = aggregate_job_results(data)
    if isinstance(verdict, Err):
        emit_annotation(console, "error", verdict.error.message)
        exit_with_code(int(ErrorCode.USER_ERROR))

    console.success(f"all {len(data)} required job(s) succeeded or were skipped")

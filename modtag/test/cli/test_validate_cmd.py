from __future__ import annotations

from pathlib import Path

import pytest
import typer

import modtag.cli.commands.validate as validate_cmd
from modtag.core.errors import ErrorCode
from modtag.output.console import MockConsole
from modtag.test._fakes import write_version
from modtag.test.cli._support import cli_context


def test_validate_accepts_valid_files(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    write_version(tmp_path, "helpers/naming", "1.2.3-rc.1+build.5\n")
    ctx = cli_context(tmp_path)
    monkeypatch.setattr(validate_cmd, "build_context", lambda: ctx)

    validate_cmd.validate(directories=["helpers/naming/"])

    assert isinstance(ctx.console, MockConsole)
    assert ctx.console.find("-> tag naming/1.2.3-rc.1+build.5")


def test_validate_reports_every_invalid_file(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    write_version(tmp_path, "helpers/naming", "v1.2")
    write_version(tmp_path, "helpers/labels", "1.0.0")
    ctx = cli_context(tmp_path)
    monkeypatch.setattr(validate_cmd, "build_context", lambda: ctx)

    with pytest.raises(typer.Exit) as exc:
        validate_cmd.validate(directories=["helpers/naming", "helpers/labels", "helpers/gone"])

    assert exc.value.exit_code == int(ErrorCode.USER_ERROR)
    assert isinstance(ctx.console, MockConsole)
    assert ctx.console.find("::error file=helpers/naming/VERSION,line=1,col=1")
    assert ctx.console.find("-> tag labels/1.0.0")

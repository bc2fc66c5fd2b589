from __future__ import annotations

import json
from pathlib import Path

import pytest
import typer

import modtag.cli.commands.changed as changed_cmd
from modtag.core.errors import ErrorCode
from modtag.core.result import Ok
from modtag.output.console import MockConsole
from modtag.test.cli._support import cli_context


def test_changed_writes_step_outputs(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    output = tmp_path / "github_output"
    ctx = cli_context(tmp_path, extra_env={"GITHUB_OUTPUT": str(output)})
    seen: list[tuple[str, str]] = []

    def fake_changed(*, repo_root: Path, base: str, head: str, modules: object):
        del repo_root, modules
        seen.append((base, head))
        return Ok(["helpers/naming", "services/api/gateway"])

    monkeypatch.setattr(changed_cmd, "build_context", lambda: ctx)
    monkeypatch.setattr(changed_cmd, "changed_module_directories", fake_changed)

    changed_cmd.changed(base=None, head=None, github_output=True)

    assert seen == [("b" * 40, "c" * 40)]
    lines = output.read_text(encoding="utf-8").splitlines()
    assert lines == [
        "module-directories=" + json.dumps(["helpers/naming", "services/api/gateway"]),
        "module-count=2",
    ]
    assert isinstance(ctx.console, MockConsole)
    assert ctx.console.find("2 module(s) changed")


def test_changed_closed_unmerged_pr_reports_nothing(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    output = tmp_path / "github_output"
    ctx = cli_context(tmp_path, state="closed", extra_env={"GITHUB_OUTPUT": str(output)})
    monkeypatch.setattr(changed_cmd, "build_context", lambda: ctx)

    changed_cmd.changed(base=None, head=None, github_output=True)

    assert output.read_text(encoding="utf-8") == "module-directories=[]\nmodule-count=0\n"


def test_changed_without_github_output_env(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    ctx = cli_context(tmp_path)
    monkeypatch.setattr(changed_cmd, "build_context", lambda: ctx)
    monkeypatch.setattr(changed_cmd, "changed_module_directories", lambda **_: Ok([]))

    with pytest.raises(typer.Exit) as exc:
        changed_cmd.changed(base="x", head="y", github_output=True)

    assert exc.value.exit_code == int(ErrorCode.ENV_ERROR)

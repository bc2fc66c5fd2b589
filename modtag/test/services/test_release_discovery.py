from __future__ import annotations

from pathlib import Path

import pytest

from modtag.core.config import ModulesConfig
from modtag.core.result import Err, Ok
from modtag.git.repository import GitError
from modtag.services.release import discovery


def test_module_directories_filters_prefixes_and_file_name() -> None:
    paths = [
        "services/api/gateway/VERSION",
        "helpers/naming/VERSION",
        "resources/db/main.tf",
        "docs/guide/VERSION",
        "services/VERSION",
        "services/api/gateway/VERSION",
        "resources/storage/s3/VERSION.bak",
    ]
    assert discovery.module_directories(paths, ModulesConfig()) == [
        "helpers/naming",
        "services/api/gateway",
    ]


def test_module_directories_custom_config() -> None:
    modules = ModulesConfig(prefixes=("modules",), version_file="version.txt")
    paths = ["modules/net/version.txt", "services/x/VERSION"]
    assert discovery.module_directories(paths, modules) == ["modules/net"]


def test_same_base_and_head_is_empty(tmp_path: Path) -> None:
    result = discovery.changed_module_directories(
        repo_root=tmp_path, base="abc", head="abc", modules=ModulesConfig()
    )
    assert result == Ok([])


def test_changed_module_directories_uses_git_diff(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    seen: list[tuple[str, str]] = []

    class FakeRepository:
        def __init__(self, path: Path) -> None:
            assert path == tmp_path

        def changed_files(self, base: str, head: str):  # type: ignore[no-untyped-def]
            seen.append((base, head))
            return Ok(["services/api/gateway/VERSION", "README.md"])

    monkeypatch.setattr(discovery, "Repository", FakeRepository)

    result = discovery.changed_module_directories(
        repo_root=tmp_path, base="b" * 40, head="c" * 40, modules=ModulesConfig()
    )
    assert result == Ok(["services/api/gateway"])
    assert seen == [("b" * 40, "c" * 40)]


def test_changed_module_directories_git_failure(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    class FakeRepository:
        def __init__(self, path: Path) -> None:
            del path

        def changed_files(self, base: str, head: str):  # type: ignore[no-untyped-def]
            return Err(GitError(command="diff", message="bad revision"))

    monkeypatch.setattr(discovery, "Repository", FakeRepository)

    result = discovery.changed_module_directories(
        repo_root=tmp_path, base="b" * 40, head="c" * 40, modules=ModulesConfig()
    )
    assert isinstance(result, Err)
    assert result.error.kind == "invalid_context"
    assert result.error.hint == "bad revision"

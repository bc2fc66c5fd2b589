"""Tests for git/repository.py."""

from __future__ import annotations

import shutil
import subprocess
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from modtag.core.result import Err, Ok
from modtag.git.repository import Repository


def make_completed_process(
    stdout: str = "",
    stderr: str = "",
    returncode: int = 0,
) -> subprocess.CompletedProcess[str]:
    """Create a mock CompletedProcess."""
    return subprocess.CompletedProcess(
        args=["git"],
        returncode=returncode,
        stdout=stdout,
        stderr=stderr,
    )


class TestRepository:
    """Tests for Repository class."""

    @patch("subprocess.run")
    def test_changed_files(self, mock_run: MagicMock, tmp_path: Path) -> None:
        mock_run.return_value = make_completed_process(
            stdout="services/api/gateway/VERSION\n\nREADME.md\n"
        )

        result = Repository(tmp_path).changed_files("base", "head")

        assert result == Ok(["services/api/gateway/VERSION", "README.md"])
        cmd = mock_run.call_args.args[0]
        assert cmd == [
            "git",
            "-C",
            str(tmp_path),
            "diff",
            "--name-only",
            "--no-renames",
            "--diff-filter=ACMRT",
            "base...head",
        ]

    @patch("subprocess.run")
    def test_changed_files_error(self, mock_run: MagicMock, tmp_path: Path) -> None:
        mock_run.return_value = make_completed_process(
            returncode=128, stderr="fatal: bad revision 'base'\n"
        )

        result = Repository(tmp_path).changed_files("base", "head")

        assert isinstance(result, Err)
        assert result.error.command == "diff"
        assert result.error.message == "fatal: bad revision 'base'"
        assert result.error.returncode == 128

    @patch("subprocess.run")
    def test_create_tag_at_target(self, mock_run: MagicMock, tmp_path: Path) -> None:
        mock_run.return_value = make_completed_process()

        result = Repository(tmp_path).create_tag("naming/1.0.0", "a" * 40)

        assert isinstance(result, Ok)
        assert mock_run.call_args.args[0][3:] == ["tag", "naming/1.0.0", "a" * 40]

    @patch("subprocess.run")
    def test_create_tag_failure(self, mock_run: MagicMock, tmp_path: Path) -> None:
        mock_run.return_value = make_completed_process(
            returncode=128, stderr="fatal: tag 'naming/1.0.0' already exists"
        )

        result = Repository(tmp_path).create_tag("naming/1.0.0")

        assert isinstance(result, Err)
        assert "already exists" in result.error.message

    @patch("modtag.platform.process.sleep")
    @patch("subprocess.run")
    def test_push_tag_retries_transient_failure(
        self, mock_run: MagicMock, mock_sleep: MagicMock, tmp_path: Path
    ) -> None:
        mock_run.side_effect = [
            make_completed_process(
                returncode=128, stderr="fatal: the remote end hung up unexpectedly"
            ),
            make_completed_process(),
        ]

        result = Repository(tmp_path).push_tag("origin", "naming/1.0.0", attempts=3)

        assert isinstance(result, Ok)
        assert mock_run.call_count == 2
        assert mock_sleep.call_count == 1
        assert mock_run.call_args.args[0][3:] == ["push", "origin", "tag", "naming/1.0.0"]

    @patch("subprocess.run")
    def test_push_tag_rejected(self, mock_run: MagicMock, tmp_path: Path) -> None:
        mock_run.return_value = make_completed_process(
            returncode=1, stderr="! [rejected] naming/1.0.0 -> naming/1.0.0 (already exists)"
        )

        result = Repository(tmp_path).push_tag("origin", "naming/1.0.0", attempts=3)

        assert isinstance(result, Err)
        assert result.error.command == "push"
        assert mock_run.call_count == 1


# =============================================================================
# Repository Tests - real git
# =============================================================================


def _git(repo: Path, *args: str) -> str:
    proc = subprocess.run(
        [
            "git",
            "-C",
            str(repo),
            "-c",
            "user.name=Test",
            "-c",
            "user.email=test@example.com",
            "-c",
            "commit.gpgsign=false",
            *args,
        ],
        capture_output=True,
        text=True,
        check=True,
    )
    return proc.stdout.strip()


def _commit_version(repo: Path, directory: str, version: str) -> str:
    path = repo / directory / "VERSION"
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(f"{version}\n", encoding="utf-8")
    _git(repo, "add", "-A")
    _git(repo, "commit", "-q", "-m", f"{directory} {version}")
    return _git(repo, "rev-parse", "HEAD")


@pytest.fixture
def diverged_repo(tmp_path: Path) -> tuple[Path, str, str]:
    """main moves on after `feature` branches off; returns (repo, main tip, feature tip)."""
    repo = tmp_path / "repo"
    repo.mkdir()
    _git(repo, "init", "-q", "-b", "main")
    _commit_version(repo, "services/api", "1.0.0")
    _commit_version(repo, "services/other", "1.0.0")

    _git(repo, "checkout", "-q", "-b", "feature")
    head = _commit_version(repo, "services/api", "1.1.0")

    _git(repo, "checkout", "-q", "main")
    base = _commit_version(repo, "services/other", "1.1.0")
    return repo, base, head


@pytest.mark.skipif(shutil.which("git") is None, reason="git not installed")
class TestChangedFilesRealGit:
    def test_changes_on_base_after_branching_are_excluded(
        self, diverged_repo: tuple[Path, str, str]
    ) -> None:
        repo, base, head = diverged_repo

        result = Repository(repo).changed_files(base, head)

        assert result == Ok(["services/api/VERSION"])

    def test_deleted_files_are_not_reported(self, tmp_path: Path) -> None:
        repo = tmp_path / "repo"
        repo.mkdir()
        _git(repo, "init", "-q")
        base = _commit_version(repo, "services/api", "1.0.0")
        (repo / "services/api/VERSION").unlink()
        _git(repo, "add", "-A")
        _git(repo, "commit", "-q", "-m", "remove")
        head = _git(repo, "rev-parse", "HEAD")

        assert Repository(repo).changed_files(base, head) == Ok([])

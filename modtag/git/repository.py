"""Git repository abstraction.

Tags are created and pushed with plain `git` rather than the REST API: the
checkout uses a deploy key that is allowed to bypass repository rulesets,
which the workflow token is not.

Usage:
    repo = Repository(Path("."))

    match repo.changed_files("abc123", "def456"):
        case Ok(paths):
            print(paths)
        case Err(e):
            print(f"Error: {e.message}")
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from modtag.core.result import Err, Ok, Result
from modtag.platform.process import ProcessError, run_with_retry
from modtag.platform.process import run as run_process

_GIT_TIMEOUT_SECONDS = 30.0
_GIT_NETWORK_TIMEOUT_SECONDS = 3 * 60.0
_GIT_RETRY_DELAY_SECONDS = 2.0

__all__ = [
    "GitError",
    "Repository",
]

# Added, copied, modified, renamed, type-changed. Deleted files are ignored.
CHANGED_DIFF_FILTER = "ACMRT"


@dataclass(frozen=True, slots=True)
class GitError:
    """Error from a git operation.

    Attributes:
        command: The git command that failed
        message: Error message
        returncode: Process return code
    """

    command: str
    message: str
    returncode: int = 1

    @classmethod
    def from_process(cls, command: str, error: ProcessError, fallback: str) -> GitError:
        message = error.stderr.strip() or error.stdout.strip() or fallback
        return cls(command=command, message=message, returncode=error.returncode)


class Repository:
    """Git repository abstraction.

    All methods that can fail return Result types.

    Attributes:
        path: Path to the repository root
    """

    def __init__(self, path: Path) -> None:
        self.path = path

    def changed_files(self, base: str, head: str) -> Result[list[str], GitError]:
        """List paths added or modified on `head` since it diverged from `base`.

        Three-dot form: changes that landed on `base` after the merge base
        are not reported.
        """
        result = self._run(
            [
                "diff",
                "--name-only",
                "--no-renames",
                f"--diff-filter={CHANGED_DIFF_FILTER}",
                f"{base}...{head}",
            ]
        )
        match result:
            case Err(e):
                return Err(GitError.from_process("diff", e, "git diff failed"))
            case Ok(stdout):
                return Ok([ln.strip() for ln in stdout.splitlines() if ln.strip()])

    def create_tag(self, tag: str, target: str | None = None) -> Result[None, GitError]:
        """Create a lightweight tag at `target` (HEAD when None)."""
        args = ["tag", tag]
        if target:
            args.append(target)
        result = self._run(args)
        if isinstance(result, Err):
            return Err(GitError.from_process("tag", result.error, f"git tag {tag} failed"))
        return Ok(None)

    def push_tag(self, remote: str, tag: str, *, attempts: int = 1) -> Result[None, GitError]:
        """Push a single tag, retrying transient network failures."""
        result = run_with_retry(
            ["git", "-C", str(self.path), "push", remote, "tag", tag],
            cwd=self.path,
            timeout=_GIT_NETWORK_TIMEOUT_SECONDS,
            attempts=attempts,
            delay=_GIT_RETRY_DELAY_SECONDS,
        )
        if isinstance(result, Err):
            return Err(GitError.from_process("push", result.error, f"git push {tag} failed"))
        return Ok(None)

    def _run(self, args: list[str]) -> Result[str, ProcessError]:
        """Run a git command in this repository."""
        command = args[0] if args else ""
        timeout = (
            _GIT_NETWORK_TIMEOUT_SECONDS
            if command in {"fetch", "pull", "push", "clone"}
            else _GIT_TIMEOUT_SECONDS
        )
        return run_process(["git", "-C", str(self.path), *args], cwd=self.path, timeout=timeout)

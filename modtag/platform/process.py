"""Subprocess execution with Result-based error handling.

All `git` and `gh` invocations go through `run` so that failures come back as
`ProcessError` values the callers can inspect (exit code, stderr text) and
decide whether to retry.

Usage:
    result = run(["gh", "api", "repos/acme/infra/git/ref/tags/x"], cwd=root)
    match result:
        case Ok(stdout):
            print(stdout)
        case Err(error):
            print(f"Failed: {error.stderr}")
"""

from __future__ import annotations

import subprocess
from dataclasses import dataclass
from pathlib import Path
from time import sleep

from modtag.core.result import Err, Ok, Result

__all__ = ["ProcessError", "is_transient", "run", "run_with_retry"]

# Exit code reported when the process never ran or was killed on timeout.
NOT_RUN = -1


@dataclass(frozen=True, slots=True)
class ProcessError:
    """Error from a failed subprocess execution.

    Attributes:
        command: The command that was executed.
        returncode: The exit code of the process (-1 if it never completed).
        stdout: Standard output (may be empty).
        stderr: Standard error (contains error details).
    """

    command: tuple[str, ...]
    returncode: int
    stdout: str
    stderr: str

    @property
    def timed_out(self) -> bool:
        return self.returncode == NOT_RUN and "timed out" in self.stderr

    def __str__(self) -> str:
        cmd_str = " ".join(self.command[:3])
        if len(self.command) > 3:
            cmd_str += " ..."
        return f"{cmd_str} failed (exit {self.returncode})"


def run(
    cmd: list[str],
    cwd: Path,
    env: dict[str, str] | None = None,
    *,
    timeout: float | None = None,
) -> Result[str, ProcessError]:
    """Execute a command and return stdout or error.

    Args:
        cmd: Command and arguments to execute.
        cwd: Working directory for the command.
        env: Environment variables (uses current env if None).
        timeout: Maximum seconds to wait (None for no limit).

    Returns:
        Ok(stdout) on success, Err(ProcessError) on failure.
    """
    try:
        proc = subprocess.run(
            cmd,
            cwd=str(cwd),
            env=env,
            capture_output=True,
            text=True,
            timeout=timeout,
            check=False,
        )
    except subprocess.TimeoutExpired as e:
        partial = e.stdout if isinstance(e.stdout, str) else ""
        return Err(
            ProcessError(
                command=tuple(cmd),
                returncode=NOT_RUN,
                stdout=partial,
                stderr=f"Command timed out after {timeout}s",
            )
        )
    except OSError as e:
        return Err(
            ProcessError(
                command=tuple(cmd),
                returncode=NOT_RUN,
                stdout="",
                stderr=str(e),
            )
        )

    if proc.returncode != 0:
        return Err(
            ProcessError(
                command=tuple(cmd),
                returncode=proc.returncode,
                stdout=proc.stdout,
                stderr=proc.stderr,
            )
        )

    return Ok(proc.stdout)


_TRANSIENT_MARKERS = (
    "timed out",
    "timeout",
    "connection reset",
    "connection refused",
    "temporarily unavailable",
    "service unavailable",
    "bad gateway",
    "gateway timeout",
    "tls handshake timeout",
    "network is unreachable",
    "could not resolve host",
    "remote end hung up unexpectedly",
    "secondary rate limit",
    "http 429",
    "http 500",
    "http 502",
    "http 503",
    "http 504",
)


def is_transient(error: ProcessError) -> bool:
    """True if a failed network-bound command is worth retrying."""
    if error.timed_out:
        return True
    text = f"{error.stderr}\n{error.stdout}".lower()
    return any(marker in text for marker in _TRANSIENT_MARKERS)


def run_with_retry(
    cmd: list[str],
    cwd: Path,
    *,
    timeout: float | None = None,
    attempts: int = 1,
    delay: float = 1.0,
) -> Result[str, ProcessError]:
    """Like `run`, retrying up to `attempts` times while errors are transient.

    Backoff is linear: `delay`, `2 * delay`, ...
    """
    result = run(cmd, cwd=cwd, timeout=timeout)
    for attempt in range(1, max(1, attempts)):
        if isinstance(result, Ok) or not is_transient(result.error):
            break
        sleep(delay * attempt)
        result = run(cmd, cwd=cwd, timeout=timeout)
    return result

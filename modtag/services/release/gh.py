from __future__ import annotations

import json
import shutil
from pathlib import Path
from urllib.parse import quote

from modtag.core.result import Err, Ok, Result
from modtag.core.structured import as_str_dict, get_str
from modtag.platform.process import ProcessError, run_with_retry
from modtag.platform.process import run as run_process
from modtag.services.release.errors import ReleaseError, ReleaseErrorKind
from modtag.services.release.timeouts import GH_RETRY_DELAY_SECONDS, GH_TIMEOUT_SECONDS


def is_not_found(error: ProcessError) -> bool:
    # gh prints e.g. "gh: Not Found (HTTP 404)"
    return "http 404" in error.stderr.lower()


def run_gh(
    cmd: list[str], *, workspace_root: Path, retry_attempts: int
) -> Result[str, ProcessError]:
    return run_with_retry(
        cmd,
        cwd=workspace_root,
        timeout=GH_TIMEOUT_SECONDS,
        attempts=retry_attempts,
        delay=GH_RETRY_DELAY_SECONDS,
    )


def _gh_error(
    kind: ReleaseErrorKind, message: str, error: ProcessError, hint: str | None = None
) -> Err[ReleaseError]:
    return Err(ReleaseError(kind=kind, message=message, hint=error.stderr.strip() or hint))


def ensure_gh_available() -> Result[None, ReleaseError]:
    if shutil.which("gh") is None:
        return Err(
            ReleaseError(
                kind="gh_missing",
                message="gh: missing",
                hint="Install GitHub CLI: https://cli.github.com/",
            )
        )
    return Ok(None)


def ensure_gh_auth(*, workspace_root: Path) -> Result[None, ReleaseError]:
    result = run_process(["gh", "auth", "status"], cwd=workspace_root, timeout=GH_TIMEOUT_SECONDS)
    if isinstance(result, Err):
        return Err(
            ReleaseError(
                kind="gh_auth_required",
                message="gh auth required",
                hint="Set GH_TOKEN in the workflow step, or run: gh auth login",
            )
        )
    return Ok(None)


def tag_ref_endpoint(repo: str, tag: str) -> str:
    # Tags contain slashes; keep them, escape everything else ('+' in build metadata).
    return f"repos/{repo}/git/ref/tags/{quote(tag, safe='/')}"


def tag_exists(
    *,
    workspace_root: Path,
    repo: str,
    tag: str,
    retry_attempts: int,
) -> Result[bool, ReleaseError]:
    """Exact-match reference lookup. A 404 means the tag is free."""
    endpoint = tag_ref_endpoint(repo, tag)
    result = run_gh(
        ["gh", "api", endpoint], workspace_root=workspace_root, retry_attempts=retry_attempts
    )
    if isinstance(result, Err):
        if is_not_found(result.error):
            return Ok(False)
        return _gh_error("lookup_failed", f"failed to look up tag {tag!r}", result.error, endpoint)

    try:
        obj: object = json.loads(result.value)
    except json.JSONDecodeError as e:
        return Err(
            ReleaseError(
                kind="lookup_failed",
                message=f"gh api returned invalid JSON: {e}",
                hint=endpoint,
            )
        )

    data = as_str_dict(obj)
    if data is None:
        # A list means a prefix match on another ref, not this exact tag.
        return Ok(False)
    return Ok(get_str(data, "ref") == f"refs/tags/{tag}")


def create_release(
    *,
    workspace_root: Path,
    repo: str,
    tag: str,
    name: str,
    body: str,
    target: str,
    retry_attempts: int,
) -> Result[str | None, ReleaseError]:
    """Create a release bound to an existing tag. Returns the release URL."""
    cmd = [
        "gh",
        "api",
        "-X",
        "POST",
        f"repos/{repo}/releases",
        "-f",
        f"tag_name={tag}",
        "-f",
        f"name={name}",
        "-f",
        f"body={body}",
    ]
    if target:
        cmd.extend(["-f", f"target_commitish={target}"])

    result = run_gh(cmd, workspace_root=workspace_root, retry_attempts=retry_attempts)
    if isinstance(result, Err):
        return _gh_error("publish_failed", f"failed to create release {tag!r}", result.error)

    try:
        obj: object = json.loads(result.value)
    except json.JSONDecodeError:
        return Ok(None)

    data = as_str_dict(obj)
    return Ok(get_str(data, "html_url") if data is not None else None)

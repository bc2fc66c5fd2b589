"""Run context for one workflow execution.

Everything the pipeline needs to know about the triggering pull request and
the workflow run is captured here once, from the GitHub Actions environment
and the event payload, and then passed explicitly to every module pipeline.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from modtag.core.config import DEFAULT_SSH_HOST
from modtag.core.result import Err, Ok, Result
from modtag.core.structured import StrDict, as_str_dict, get_bool, get_int, get_str, get_table
from modtag.services.release.errors import ReleaseError
from modtag.services.release.model import ModuleRelease

DEFAULT_SERVER_URL = "https://github.com"


@dataclass(frozen=True, slots=True)
class RunContext:
    repository: str  # owner/name
    server_url: str = DEFAULT_SERVER_URL
    workflow: str = ""
    run_id: str = ""
    run_number: str = ""
    sha: str = ""
    pr_number: int | None = None
    pr_state: str | None = None
    merged: bool = False
    base_sha: str | None = None
    head_sha: str | None = None
    ssh_host: str = DEFAULT_SSH_HOST

    @property
    def owner(self) -> str:
        return self.repository.split("/", 1)[0]

    @property
    def repo(self) -> str:
        return self.repository.split("/", 1)[-1]

    @property
    def should_run(self) -> bool:
        """False for a pull request that was closed without being merged."""
        if self.pr_state is None:
            return True
        return self.pr_state == "open" or self.merged

    @property
    def run_url(self) -> str:
        return f"{self.server_url}/{self.repository}/actions/runs/{self.run_id}"

    def source_url(self, release: ModuleRelease) -> str:
        """Module source locator pinned to the release tag."""
        return (
            f"git::ssh://git@{self.ssh_host}/{self.repository}"
            f"//{release.directory}?ref={release.tag}"
        )


def _invalid(message: str, hint: str | None = None) -> Err[ReleaseError]:
    return Err(ReleaseError(kind="invalid_context", message=message, hint=hint))


def read_event_payload(path: Path) -> Result[StrDict, ReleaseError]:
    try:
        obj: object = json.loads(path.read_text(encoding="utf-8"))
    except OSError as e:
        return _invalid(f"failed to read event payload: {e}", hint=str(path))
    except json.JSONDecodeError as e:
        return _invalid(f"invalid JSON in event payload: {e}", hint=str(path))

    data = as_str_dict(obj)
    if data is None:
        return _invalid("event payload must be a JSON object", hint=str(path))
    return Ok(data)


def context_from_event(
    *,
    env: Mapping[str, str],
    event: Mapping[str, object],
    ssh_host: str = DEFAULT_SSH_HOST,
) -> Result[RunContext, ReleaseError]:
    repository = (env.get("GITHUB_REPOSITORY") or "").strip()
    if "/" not in repository:
        return _invalid("GITHUB_REPOSITORY is not set", hint="expected owner/name")

    pr = get_table(event, "pull_request")
    pr_number = get_int(event, "number")
    pr_state: str | None = None
    merged = False
    base_sha: str | None = None
    head_sha: str | None = None
    if pr is not None:
        pr_state = get_str(pr, "state")
        merged = get_bool(pr, "merged") or False
        if pr_number is None:
            pr_number = get_int(pr, "number")
        base = get_table(pr, "base")
        head = get_table(pr, "head")
        base_sha = get_str(base, "sha") if base is not None else None
        head_sha = get_str(head, "sha") if head is not None else None

    return Ok(
        RunContext(
            repository=repository,
            server_url=(env.get("GITHUB_SERVER_URL") or DEFAULT_SERVER_URL).rstrip("/"),
            workflow=env.get("GITHUB_WORKFLOW", ""),
            run_id=env.get("GITHUB_RUN_ID", ""),
            run_number=env.get("GITHUB_RUN_NUMBER", ""),
            sha=env.get("GITHUB_SHA", ""),
            pr_number=pr_number,
            pr_state=pr_state,
            merged=merged,
            base_sha=base_sha,
            head_sha=head_sha,
            ssh_host=ssh_host,
        )
    )


def load_run_context(
    env: Mapping[str, str],
    *,
    ssh_host: str = DEFAULT_SSH_HOST,
) -> Result[RunContext, ReleaseError]:
    """Build the context from `GITHUB_*` variables and `GITHUB_EVENT_PATH`.

    Without an event path the context describes no pull request, which is
    treated as a preview run.
    """
    event: StrDict = {}
    event_path = env.get("GITHUB_EVENT_PATH")
    if event_path:
        payload = read_event_payload(Path(event_path))
        if isinstance(payload, Err):
            return payload
        event = payload.value

    return context_from_event(env=env, event=event, ssh_host=ssh_host)

"""External collaborators of the release pipeline.

`ReleaseHost` is the seam between the pipeline and the version-control host:
the production implementation drives `gh` and `git`, tests use a recording
fake.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from modtag.core.result import Err, Ok, Result
from modtag.git.repository import Repository
from modtag.services.release import gh
from modtag.services.release.errors import ReleaseError

__all__ = ["GhReleaseHost", "ReleaseHost"]


class ReleaseHost(Protocol):
    """Tag namespace and release store of the hosting platform."""

    def tag_exists(self, tag: str) -> Result[bool, ReleaseError]:
        """Ok(True) if found, Ok(False) on a well-defined miss, Err otherwise."""
        ...

    def create_tag(self, tag: str, target: str) -> Result[None, ReleaseError]:
        """Create the tag locally at `target`."""
        ...

    def push_tag(self, tag: str) -> Result[None, ReleaseError]:
        """Publish the tag to the shared remote."""
        ...

    def create_release(
        self, *, tag: str, name: str, body: str, target: str
    ) -> Result[str | None, ReleaseError]:
        """Create a release bound to `tag`; returns its URL when known."""
        ...


@dataclass(frozen=True, slots=True)
class GhReleaseHost:
    """ReleaseHost backed by the GitHub CLI and the local checkout."""

    repo_root: Path
    repository: str  # owner/name
    remote: str = "origin"
    retry_attempts: int = 3

    def tag_exists(self, tag: str) -> Result[bool, ReleaseError]:
        return gh.tag_exists(
            workspace_root=self.repo_root,
            repo=self.repository,
            tag=tag,
            retry_attempts=self.retry_attempts,
        )

    def create_tag(self, tag: str, target: str) -> Result[None, ReleaseError]:
        result = Repository(self.repo_root).create_tag(tag, target or None)
        if isinstance(result, Err):
            return Err(
                ReleaseError(
                    kind="publish_failed",
                    message=f"failed to create git tag {tag!r}",
                    hint=result.error.message,
                )
            )
        return Ok(None)

    def push_tag(self, tag: str) -> Result[None, ReleaseError]:
        result = Repository(self.repo_root).push_tag(
            self.remote, tag, attempts=self.retry_attempts
        )
        if isinstance(result, Err):
            return Err(
                ReleaseError(
                    kind="publish_failed",
                    message=f"failed to push git tag {tag!r} to {self.remote}",
                    hint=result.error.message,
                )
            )
        return Ok(None)

    def create_release(
        self, *, tag: str, name: str, body: str, target: str
    ) -> Result[str | None, ReleaseError]:
        return gh.create_release(
            workspace_root=self.repo_root,
            repo=self.repository,
            tag=tag,
            name=name,
            body=body,
            target=target,
            retry_attempts=self.retry_attempts,
        )

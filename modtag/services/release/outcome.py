from __future__ import annotations

from dataclasses import dataclass

from modtag.services.release.errors import ReleaseError
from modtag.services.release.model import ModuleRelease, UnitStatus


@dataclass(frozen=True, slots=True)
class ModuleOutcome:
    """Terminal state of one module pipeline."""

    directory: str
    status: UnitStatus
    release: ModuleRelease | None = None
    error: ReleaseError | None = None
    body: str | None = None
    published: bool = False
    release_url: str | None = None

    @property
    def ok(self) -> bool:
        return self.status in ("success", "skipped")

    @classmethod
    def failed(
        cls,
        directory: str,
        error: ReleaseError,
        release: ModuleRelease | None = None,
    ) -> ModuleOutcome:
        return cls(directory=directory, status="failure", release=release, error=error)

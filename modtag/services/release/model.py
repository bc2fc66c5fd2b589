from __future__ import annotations

from dataclasses import dataclass
from typing import Literal


ReleaseBump = Literal["major", "minor", "patch"]

# Terminal status of one unit of the fan-out. Mirrors the job results a
# workflow host reports for `needs.<job>.result`.
UnitStatus = Literal["success", "failure", "skipped", "cancelled"]


@dataclass(frozen=True, slots=True)
class ModuleRelease:
    """One changed module, as read from its VERSION file."""

    directory: str  # e.g. services/api/gateway
    type: str  # first path segment
    name: str  # remaining segments, lower-cased
    version: str
    tag: str  # lower-cased f"{name}/{version}"
    filename: str  # f"{directory}/VERSION", used for annotations


@dataclass(frozen=True, slots=True)
class PublishResult:
    tag: str
    body: str
    published: bool
    release_url: str | None = None

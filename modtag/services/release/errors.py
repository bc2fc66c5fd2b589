from __future__ import annotations

from dataclasses import dataclass
from typing import Literal


ReleaseErrorKind = Literal[
    "gh_missing",
    "gh_auth_required",
    "invalid_context",
    "read_failed",
    "invalid_version",
    "duplicate_tag",
    "lookup_failed",
    "publish_failed",
    "partial_publish",
]


@dataclass(frozen=True, slots=True)
class ReleaseError:
    kind: ReleaseErrorKind
    message: str
    hint: str | None = None
    # VERSION file the error should be annotated on, if any.
    file: str | None = None
    title: str | None = None

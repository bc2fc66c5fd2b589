"""Error presentation utilities.

Centralized error formatting and exit code mapping for consistent UX.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from modtag.core.errors import ErrorCode
from modtag.output.console import Style
from modtag.output.workflow import emit_annotation
from modtag.services.release.errors import ReleaseError

if TYPE_CHECKING:
    from modtag.output.console import ConsoleProtocol

__all__ = ["print_release_error", "release_error_exit_code"]


def print_release_error(
    error: ReleaseError,
    console: ConsoleProtocol,
    *,
    annotate: bool = True,
) -> None:
    """Print an error, plus a workflow annotation tied to its VERSION file."""
    console.error(error.message)
    if error.hint:
        console.print(f"hint: {error.hint}", Style.DIM)
    if annotate:
        emit_annotation(console, "error", error.message, file=error.file, title=error.title)


def release_error_exit_code(error: ReleaseError) -> int:
    match error.kind:
        case "gh_missing" | "gh_auth_required" | "invalid_context":
            return int(ErrorCode.ENV_ERROR)
        case "lookup_failed" | "publish_failed" | "partial_publish":
            return int(ErrorCode.NETWORK_ERROR)
        case "read_failed":
            return int(ErrorCode.IO_ERROR)
        case "invalid_version" | "duplicate_tag":
            return int(ErrorCode.USER_ERROR)
    return int(ErrorCode.USER_ERROR)

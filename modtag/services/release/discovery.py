from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

from modtag.core.config import ModulesConfig
from modtag.core.result import Err, Ok, Result
from modtag.git.repository import Repository
from modtag.services.release.errors import ReleaseError


def module_directories(paths: Iterable[str], modules: ModulesConfig) -> list[str]:
    """Map changed file paths to the module directories whose VERSION changed.

    Only `<prefix>/**/<version_file>` paths count; a VERSION file directly
    under a prefix is not a module.
    """
    suffix = f"/{modules.version_file}"
    out: set[str] = set()
    for raw in paths:
        path = raw.strip().strip('"')
        if not path.endswith(suffix):
            continue
        directory = path[: -len(suffix)]
        head, sep, _ = directory.partition("/")
        if not sep or head not in modules.prefixes:
            continue
        out.add(directory)
    return sorted(out)


def changed_module_directories(
    *,
    repo_root: Path,
    base: str,
    head: str,
    modules: ModulesConfig,
) -> Result[list[str], ReleaseError]:
    if base == head:
        return Ok([])

    changed = Repository(repo_root).changed_files(base, head)
    if isinstance(changed, Err):
        return Err(
            ReleaseError(
                kind="invalid_context",
                message=f"failed to diff {base[:8]}..{head[:8]}",
                hint=changed.error.message,
            )
        )
    return Ok(module_directories(changed.value, modules))

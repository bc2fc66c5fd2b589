from __future__ import annotations

from pathlib import Path

from modtag.core.config import DEFAULT_VERSION_FILE
from modtag.core.result import Err, Ok, Result
from modtag.services.release.errors import ReleaseError
from modtag.services.release.model import ModuleRelease
from modtag.services.release.semver import is_semver

INVALID_VERSION_MESSAGE = (
    "A version file must contain exactly one valid semantic version string "
    "as defined at https://semver.org/."
)


def split_module_directory(directory: str) -> tuple[str, str]:
    """Return (type, name) for a module directory.

    A directory with no segment after the type yields an empty name; such
    paths are not rejected here.
    """
    components = directory.strip("/").split("/")
    module_type = components[0]
    module_name = "/".join(components[1:]).lower()
    return (module_type, module_name)


def parse_module_release(
    directory: str,
    contents: str,
    *,
    version_file: str = DEFAULT_VERSION_FILE,
) -> Result[ModuleRelease, ReleaseError]:
    directory = directory.strip().rstrip("/")
    filename = f"{directory}/{version_file}"
    module_type, module_name = split_module_directory(directory)

    # A leading byte-order mark is not whitespace to str.strip().
    version = contents.lstrip("\ufeff").strip()
    if not is_semver(version):
        return Err(
            ReleaseError(
                kind="invalid_version",
                message=INVALID_VERSION_MESSAGE,
                hint=f"found: {version!r}" if version else "the file is empty",
                file=filename,
                title="Invalid VERSION file",
            )
        )

    return Ok(
        ModuleRelease(
            directory=directory,
            type=module_type,
            name=module_name,
            version=version,
            tag=f"{module_name}/{version}".lower(),
            filename=filename,
        )
    )


def read_module_release(
    *,
    repo_root: Path,
    directory: str,
    version_file: str = DEFAULT_VERSION_FILE,
) -> Result[ModuleRelease, ReleaseError]:
    directory = directory.strip().rstrip("/")
    path = repo_root / directory / version_file
    try:
        contents = path.read_text(encoding="utf-8-sig")
    except (OSError, UnicodeDecodeError) as e:
        return Err(
            ReleaseError(
                kind="read_failed",
                message=f"failed to read version file: {e}",
                hint=str(path),
                file=f"{directory}/{version_file}",
                title="Unreadable VERSION file",
            )
        )

    return parse_module_release(directory, contents, version_file=version_file)

from __future__ import annotations

from modtag.core.result import Err, Ok, Result
from modtag.services.release.errors import ReleaseError
from modtag.services.release.host import ReleaseHost
from modtag.services.release.model import ModuleRelease
from modtag.services.release.semver import parse_semver


def _next_version_hint(release: ModuleRelease) -> str | None:
    current = parse_semver(release.version)
    if current is None:
        return None
    return f"for example {current.bump('patch')} or {current.bump('minor')}"


def duplicate_tag_error(release: ModuleRelease) -> ReleaseError:
    return ReleaseError(
        kind="duplicate_tag",
        message=(
            f'Version {release.version} of the {release.type} module "{release.name}" '
            f'cannot be created because the Git tag "{release.tag}" already exists. '
            "Change the contents of the file to a different version if you intend to "
            "create a new Git tag."
        ),
        hint=_next_version_hint(release),
        file=release.filename,
        title="Duplicate Git tag",
    )


def ensure_tag_available(release: ModuleRelease, host: ReleaseHost) -> Result[None, ReleaseError]:
    """Fail with `duplicate_tag` if the release tag already exists.

    This is a plain lookup; nothing stops another run from creating the same
    tag between this check and the publish step.
    """
    found = host.tag_exists(release.tag)
    if isinstance(found, Err):
        error = found.error
        return Err(
            ReleaseError(
                kind="lookup_failed",
                message=error.message,
                hint=error.hint,
                file=release.filename,
                title="Tag lookup failed",
            )
        )

    if found.value:
        return Err(duplicate_tag_error(release))
    return Ok(None)

from __future__ import annotations

from modtag.core.result import Err, Ok, Result
from modtag.services.release.context import RunContext
from modtag.services.release.errors import ReleaseError
from modtag.services.release.host import ReleaseHost
from modtag.services.release.model import ModuleRelease, PublishResult
from modtag.services.release.notes import render_release_body


def _with_file(error: ReleaseError, release: ModuleRelease, title: str) -> ReleaseError:
    return ReleaseError(
        kind=error.kind,
        message=error.message,
        hint=error.hint,
        file=release.filename,
        title=title,
    )


def publish_release(
    release: ModuleRelease,
    *,
    ctx: RunContext,
    host: ReleaseHost,
    merged: bool,
) -> Result[PublishResult, ReleaseError]:
    """Create tag, push it, then create the release; or only render a preview.

    The three publish steps are not transactional. When release creation
    fails after the tag was pushed, the tag stays on the remote and the error
    kind is `partial_publish`.
    """
    body = render_release_body(release, ctx)
    if not merged:
        return Ok(PublishResult(tag=release.tag, body=body, published=False))

    created = host.create_tag(release.tag, ctx.sha)
    if isinstance(created, Err):
        return Err(_with_file(created.error, release, "Tag creation failed"))

    pushed = host.push_tag(release.tag)
    if isinstance(pushed, Err):
        return Err(_with_file(pushed.error, release, "Tag push failed"))

    url = host.create_release(tag=release.tag, name=release.tag, body=body, target=ctx.sha)
    if isinstance(url, Err):
        return Err(
            ReleaseError(
                kind="partial_publish",
                message=(
                    f'The Git tag "{release.tag}" was pushed but the release could not be '
                    f"created: {url.error.message}"
                ),
                hint=url.error.hint
                or "Create the release for the existing tag manually, or delete the tag.",
                file=release.filename,
                title="Release creation failed",
            )
        )

    return Ok(PublishResult(tag=release.tag, body=body, published=True, release_url=url.value))

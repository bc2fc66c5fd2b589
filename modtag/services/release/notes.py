from __future__ import annotations

from modtag.services.release.context import RunContext
from modtag.services.release.model import ModuleRelease


def _provenance(ctx: RunContext) -> str:
    run = f'[run {ctx.run_number} of the "{ctx.workflow}" workflow]({ctx.run_url})'
    if ctx.pr_number is not None:
        return (
            f"This release was generated by {run} "
            f"after pull request #{ctx.pr_number} was merged."
        )
    if ctx.sha:
        return f"This release was generated by {run} for commit {ctx.sha}."
    return f"This release was generated by {run}."


def render_release_body(release: ModuleRelease, ctx: RunContext) -> str:
    """Markdown body of the release. Pure function of its inputs."""
    lines: list[str] = []
    lines.append(
        f"Version `{release.version}` of {release.type} module "
        f"[{release.name}]({release.directory})."
    )
    lines.append("")
    lines.append(
        "To use this version of the module, set the `source` argument of the "
        "module call to the following value."
    )
    lines.append(f"`{ctx.source_url(release)}`.")
    lines.append("")
    lines.append(_provenance(ctx))
    return "\n".join(lines) + "\n"

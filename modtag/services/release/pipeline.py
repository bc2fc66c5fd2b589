from __future__ import annotations

import threading
from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path

from modtag.core.config import Config, ModulesConfig
from modtag.core.result import Err, Ok, Result
from modtag.output.console import BufferedConsole, ConsoleProtocol, Style
from modtag.output.errors import print_release_error
from modtag.output.workflow import emit_annotation, end_group, start_group
from modtag.services.release.aggregate import AggregateFailure, aggregate_outcomes
from modtag.services.release.context import RunContext
from modtag.services.release.discovery import changed_module_directories
from modtag.services.release.errors import ReleaseError
from modtag.services.release.fanout import run_modules
from modtag.services.release.host import ReleaseHost
from modtag.services.release.outcome import ModuleOutcome
from modtag.services.release.publisher import publish_release
from modtag.services.release.tags import ensure_tag_available
from modtag.services.release.version_file import read_module_release


def validate_module(
    directory: str,
    *,
    repo_root: Path,
    modules: ModulesConfig,
    console: ConsoleProtocol,
) -> ModuleOutcome:
    """Parser stage only; no external calls."""
    parsed = read_module_release(
        repo_root=repo_root, directory=directory, version_file=modules.version_file
    )
    if isinstance(parsed, Err):
        print_release_error(parsed.error, console)
        return ModuleOutcome.failed(directory, parsed.error)

    release = parsed.value
    console.success(f"{release.filename}: {release.version} -> tag {release.tag}")
    return ModuleOutcome(directory=directory, status="success", release=release)


def run_module(
    directory: str,
    *,
    repo_root: Path,
    ctx: RunContext,
    host: ReleaseHost,
    console: ConsoleProtocol,
    modules: ModulesConfig,
    preview: bool = False,
) -> ModuleOutcome:
    """Parse, check and publish (or preview) one module."""
    console.print(f'Processing file "{directory}/{modules.version_file}".', Style.DIM)

    parsed = read_module_release(
        repo_root=repo_root, directory=directory, version_file=modules.version_file
    )
    if isinstance(parsed, Err):
        print_release_error(parsed.error, console)
        return ModuleOutcome.failed(directory, parsed.error)

    release = parsed.value
    console.print(f'Parsed version file for {release.type} module "{release.name}".', Style.DIM)
    console.print(f'The "{release.tag}" tag will be used for the new version of the module.')

    available = ensure_tag_available(release, host)
    if isinstance(available, Err):
        print_release_error(available.error, console)
        return ModuleOutcome.failed(directory, available.error, release)

    console.print(f'The "{release.tag}" Git tag does not exist.', Style.DIM)

    merged = ctx.merged and not preview
    published = publish_release(release, ctx=ctx, host=host, merged=merged)
    if isinstance(published, Err):
        print_release_error(published.error, console)
        return ModuleOutcome.failed(directory, published.error, release)

    result = published.value
    if result.published:
        where = f" ({result.release_url})" if result.release_url else ""
        console.success(f'Created Git tag and GitHub release "{release.tag}"{where}')
    else:
        emit_annotation(
            console,
            "notice",
            f'The "{release.tag}" GitHub release and the "{release.tag}" Git tag will not be '
            "created until the pull request has been merged.",
        )
        start_group(console, f"Release body preview: {release.tag}")
        for line in result.body.splitlines():
            console.raw(line)
        end_group(console)

    return ModuleOutcome(
        directory=directory,
        status="success",
        release=release,
        body=result.body,
        published=result.published,
        release_url=result.release_url,
    )


def _no_outcomes() -> tuple[ModuleOutcome, ...]:
    return ()


@dataclass(frozen=True, slots=True)
class ReleaseReport:
    outcomes: tuple[ModuleOutcome, ...] = field(default_factory=_no_outcomes)

    @property
    def verdict(self) -> Result[None, AggregateFailure]:
        return aggregate_outcomes(self.outcomes)

    @property
    def failed(self) -> tuple[ModuleOutcome, ...]:
        return tuple(o for o in self.outcomes if not o.ok)


class ReleaseService:
    """Change detection, per-module fan-out and the final gate for one run."""

    def __init__(
        self,
        *,
        repo_root: Path,
        config: Config,
        ctx: RunContext,
        host: ReleaseHost,
        console: ConsoleProtocol,
    ) -> None:
        self._repo_root = repo_root
        self._config = config
        self._ctx = ctx
        self._host = host
        self._console = console
        self._flush_lock = threading.Lock()

    def changed_directories(
        self, *, base: str | None = None, head: str | None = None
    ) -> Result[list[str], ReleaseError]:
        base = base or self._ctx.base_sha
        head = head or self._ctx.head_sha
        if not base or not head:
            return Err(
                ReleaseError(
                    kind="invalid_context",
                    message="cannot detect changed modules without base and head commits",
                    hint="pass --base/--head or run on a pull_request event",
                )
            )
        return changed_module_directories(
            repo_root=self._repo_root,
            base=base,
            head=head,
            modules=self._config.modules,
        )

    def run(
        self,
        directories: Sequence[str],
        *,
        preview: bool = False,
        max_parallel: int | None = None,
    ) -> ReleaseReport:
        if not self._ctx.should_run:
            self._console.print(
                "The pull request was closed without being merged; nothing to release.",
                Style.DIM,
            )
            return ReleaseReport(
                outcomes=tuple(ModuleOutcome(directory=d, status="skipped") for d in directories)
            )

        if not directories:
            self._console.print("No VERSION files changed.", Style.DIM)
            return ReleaseReport()

        outcomes = run_modules(
            directories,
            lambda d: self._run_buffered(d, preview=preview),
            max_parallel=max_parallel or self._config.release.max_parallel,
        )
        return ReleaseReport(outcomes=tuple(outcomes))

    def _run_buffered(self, directory: str, *, preview: bool) -> ModuleOutcome:
        buffer = BufferedConsole()
        try:
            return run_module(
                directory,
                repo_root=self._repo_root,
                ctx=self._ctx,
                host=self._host,
                console=buffer,
                modules=self._config.modules,
                preview=preview,
            )
        finally:
            with self._flush_lock:
                self._console.header(directory)
                buffer.flush_to(self._console)


def detect_or_use(
    service: ReleaseService,
    directories: Sequence[str],
    *,
    changed: bool,
    base: str | None = None,
    head: str | None = None,
) -> Result[list[str], ReleaseError]:
    """Explicit directories win; otherwise detect from the diff when asked to."""
    if directories or not changed:
        return Ok([d.strip().rstrip("/") for d in directories if d.strip()])
    return service.changed_directories(base=base, head=head)

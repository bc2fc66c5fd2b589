"""Bounded, fail-open fan-out over module directories."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from concurrent.futures import ThreadPoolExecutor

from modtag.services.release.errors import ReleaseError
from modtag.services.release.outcome import ModuleOutcome

ModuleRunner = Callable[[str], ModuleOutcome]


def _run_one(runner: ModuleRunner, directory: str) -> ModuleOutcome:
    # One module crashing must not take its siblings down with it.
    try:
        return runner(directory)
    except Exception as e:  # noqa: BLE001
        return ModuleOutcome.failed(
            directory,
            ReleaseError(
                kind="publish_failed",
                message=f"unexpected error while processing {directory}: {e!r}",
            ),
        )


def run_modules(
    directories: Sequence[str],
    runner: ModuleRunner,
    *,
    max_parallel: int,
) -> list[ModuleOutcome]:
    """Run `runner` for each directory, at most `max_parallel` at a time.

    Results come back in input order. Failures never cancel other modules.
    """
    if not directories:
        return []

    jobs = max(1, min(max_parallel, len(directories)))
    if jobs == 1:
        return [_run_one(runner, d) for d in directories]

    with ThreadPoolExecutor(max_workers=jobs, thread_name_prefix="modtag") as ex:
        return list(ex.map(lambda d: _run_one(runner, d), directories))

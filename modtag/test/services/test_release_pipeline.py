from __future__ import annotations

from pathlib import Path

from modtag.core.config import Config
from modtag.core.result import Err, Ok
from modtag.output.console import MockConsole, Style
from modtag.services.release.context import RunContext
from modtag.services.release.pipeline import ReleaseService, run_module, validate_module
from modtag.test._fakes import FakeReleaseHost, run_context, write_version

MODULES = Config().modules


def test_run_module_preview(tmp_path: Path) -> None:
    write_version(tmp_path, "services/api/gateway", "2.3.0\n")
    host = FakeReleaseHost()
    console = MockConsole()

    outcome = run_module(
        "services/api/gateway",
        repo_root=tmp_path,
        ctx=run_context(),
        host=host,
        console=console,
        modules=MODULES,
    )

    assert outcome.status == "success"
    assert outcome.published is False
    assert outcome.body is not None and "api/gateway" in outcome.body
    assert host.mutations == []
    assert console.find("::notice::")
    assert console.find("::group::Release body preview: api/gateway/2.3.0")


def test_run_module_merged_publishes(tmp_path: Path) -> None:
    write_version(tmp_path, "services/api/gateway", "2.3.0\n")
    host = FakeReleaseHost()

    outcome = run_module(
        "services/api/gateway",
        repo_root=tmp_path,
        ctx=run_context(merged=True, pr_state="closed"),
        host=host,
        console=MockConsole(),
        modules=MODULES,
    )

    assert outcome.status == "success"
    assert outcome.published is True
    assert outcome.release is not None and outcome.release.tag == "api/gateway/2.3.0"
    assert [c[0] for c in host.mutations] == ["create_tag", "push_tag", "create_release"]


def test_run_module_preview_flag_overrides_merge(tmp_path: Path) -> None:
    write_version(tmp_path, "services/api/gateway", "2.3.0\n")
    host = FakeReleaseHost()

    outcome = run_module(
        "services/api/gateway",
        repo_root=tmp_path,
        ctx=run_context(merged=True, pr_state="closed"),
        host=host,
        console=MockConsole(),
        modules=MODULES,
        preview=True,
    )

    assert outcome.status == "success"
    assert host.mutations == []


def test_run_module_invalid_version_is_annotated(tmp_path: Path) -> None:
    write_version(tmp_path, "helpers/naming", "v1.2.3\n")
    host = FakeReleaseHost()
    console = MockConsole()

    outcome = run_module(
        "helpers/naming",
        repo_root=tmp_path,
        ctx=run_context(merged=True, pr_state="closed"),
        host=host,
        console=console,
        modules=MODULES,
    )

    assert outcome.status == "failure"
    assert outcome.error is not None and outcome.error.kind == "invalid_version"
    assert host.calls == []
    annotations = [o for o in console.outputs if o.style == Style.RAW]
    assert annotations[0].message.startswith(
        "::error file=helpers/naming/VERSION,line=1,col=1,title=Invalid VERSION file::"
    )


def test_run_module_duplicate_tag_does_not_mutate(tmp_path: Path) -> None:
    write_version(tmp_path, "services/api/gateway", "2.3.0\n")
    host = FakeReleaseHost(existing_tags={"api/gateway/2.3.0"})

    outcome = run_module(
        "services/api/gateway",
        repo_root=tmp_path,
        ctx=run_context(merged=True, pr_state="closed"),
        host=host,
        console=MockConsole(),
        modules=MODULES,
    )

    assert outcome.status == "failure"
    assert outcome.error is not None and outcome.error.kind == "duplicate_tag"
    assert host.mutations == []


def test_validate_module(tmp_path: Path) -> None:
    write_version(tmp_path, "resources/db", "1.0.0")
    console = MockConsole()
    outcome = validate_module("resources/db", repo_root=tmp_path, modules=MODULES, console=console)
    assert outcome.status == "success"
    assert console.has_success()


def _service(
    tmp_path: Path,
    host: FakeReleaseHost,
    console: MockConsole,
    *,
    merged: bool = False,
    pr_state: str = "open",
) -> ReleaseService:
    return ReleaseService(
        repo_root=tmp_path,
        config=Config(),
        ctx=run_context(merged=merged, pr_state=pr_state),
        host=host,
        console=console,
    )


def test_service_one_invalid_one_valid(tmp_path: Path) -> None:
    write_version(tmp_path, "helpers/broken", "1.2\n")
    write_version(tmp_path, "services/api/gateway", "2.3.0\n")
    host = FakeReleaseHost()
    console = MockConsole()
    service = _service(tmp_path, host, console, merged=True, pr_state="closed")

    report = service.run(["helpers/broken", "services/api/gateway"])

    statuses = {o.directory: o.status for o in report.outcomes}
    assert statuses == {"helpers/broken": "failure", "services/api/gateway": "success"}
    assert [c for c in host.mutations if c[0] == "create_release"] == [
        ("create_release", "api/gateway/2.3.0", "api/gateway/2.3.0", "a" * 40)
    ]
    verdict = report.verdict
    assert isinstance(verdict, Err)
    assert [f.unit for f in verdict.error.failures] == ["helpers/broken"]


def test_service_no_modules_succeeds(tmp_path: Path) -> None:
    console = MockConsole()
    report = _service(tmp_path, FakeReleaseHost(), console).run([])
    assert report.outcomes == ()
    assert isinstance(report.verdict, Ok)


def test_service_closed_unmerged_skips(tmp_path: Path) -> None:
    write_version(tmp_path, "services/api/gateway", "2.3.0\n")
    host = FakeReleaseHost()
    service = _service(tmp_path, host, MockConsole(), merged=False, pr_state="closed")

    report = service.run(["services/api/gateway"])

    assert [o.status for o in report.outcomes] == ["skipped"]
    assert host.calls == []
    assert isinstance(report.verdict, Ok)


def test_service_groups_output_per_module(tmp_path: Path) -> None:
    write_version(tmp_path, "services/a", "1.0.0")
    write_version(tmp_path, "services/b", "1.0.0")
    console = MockConsole()
    service = _service(tmp_path, FakeReleaseHost(), console)

    service.run(["services/a", "services/b"], max_parallel=2)

    blocks: dict[str, list[str]] = {}
    current: str | None = None
    for o in console.outputs:
        if o.style == Style.HEADER:
            current = o.message
            blocks[current] = []
        elif current is not None:
            blocks[current].append(o.message)

    assert set(blocks) == {"services/a", "services/b"}
    for module, lines in blocks.items():
        other = "services/b" if module == "services/a" else "services/a"
        assert any(module in line for line in lines)
        assert not any(other in line for line in lines)


def test_service_requires_base_and_head_for_detection(tmp_path: Path) -> None:
    service = ReleaseService(
        repo_root=tmp_path,
        config=Config(),
        ctx=RunContext(repository="acme/infra"),
        host=FakeReleaseHost(),
        console=MockConsole(),
    )
    result = service.changed_directories()
    assert isinstance(result, Err)
    assert result.error.kind == "invalid_context"

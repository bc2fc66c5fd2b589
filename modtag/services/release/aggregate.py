"""Join step over a dynamically sized set of units.

Branch protection can only require jobs by name, so a matrix of unknown
width cannot be required directly. A single gate that inspects every unit
and fails if any did not succeed can.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass

from modtag.core.result import Err, Ok, Result
from modtag.core.structured import as_str_dict, get_str
from modtag.services.release.outcome import ModuleOutcome

PASSING_RESULTS = frozenset({"success", "skipped"})
UNKNOWN_RESULT = "unknown"


@dataclass(frozen=True, slots=True)
class UnitFailure:
    unit: str
    result: str


@dataclass(frozen=True, slots=True)
class AggregateFailure:
    failures: tuple[UnitFailure, ...]

    @property
    def message(self) -> str:
        names = ", ".join(f'"{f.unit}" ({f.result})' for f in self.failures)
        noun = "job was" if len(self.failures) == 1 else "jobs were"
        return (
            f"The required {noun} not successful: {names}. "
            "Please check the job logs for more details."
        )


def aggregate_results(results: Iterable[tuple[str, str]]) -> Result[None, AggregateFailure]:
    """Succeed iff every (unit, result) pair is `success` or `skipped`."""
    failures = tuple(
        UnitFailure(unit=unit, result=result)
        for unit, result in results
        if result not in PASSING_RESULTS
    )
    if failures:
        return Err(AggregateFailure(failures=failures))
    return Ok(None)


def aggregate_outcomes(outcomes: Iterable[ModuleOutcome]) -> Result[None, AggregateFailure]:
    return aggregate_results((o.directory, o.status) for o in outcomes)


def job_result(entry: object) -> str:
    """The `result` of one `needs` entry, or `unknown` when it has none."""
    data = as_str_dict(entry)
    result = get_str(data, "result") if data is not None else None
    return result or UNKNOWN_RESULT


def aggregate_job_results(needs: Mapping[str, object]) -> Result[None, AggregateFailure]:
    """Aggregate a workflow `needs` context, e.g. `{"build": {"result": "success"}}`.

    An entry without a readable `result` counts as a failure.
    """
    return aggregate_results((job, job_result(value)) for job, value in needs.items())

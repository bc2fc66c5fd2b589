"""Result type for explicit error handling.

Expected failures (an invalid VERSION file, a tag that already exists, a
`gh` call that keeps timing out) are returned as values instead of raised:

    def parse(text: str) -> Result[SemVer, str]:
        version = parse_semver(text)
        if version is None:
            return Err(f"not a semantic version: {text!r}")
        return Ok(version)

    match parse("1.2.3"):
        case Ok(version):
            print(version)
        case Err(error):
            print(f"error: {error}")
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeAlias, TypeVar, Union

T = TypeVar("T")
E = TypeVar("E")


@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    """A successful result holding `value`."""

    value: T

    def __repr__(self) -> str:
        return f"Ok({self.value!r})"


@dataclass(frozen=True, slots=True)
class Err(Generic[E]):
    """A failed result holding `error`."""

    error: E

    def __repr__(self) -> str:
        return f"Err({self.error!r})"


Result: TypeAlias = Union[Ok[T], Err[E]]

"""GitHub Actions workflow commands and step outputs.

Formatting follows the escaping rules of the Actions toolkit: message data
escapes `%`, CR and LF; property values additionally escape `:` and `,`.
"""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Literal
from uuid import uuid4

from modtag.output.console import ConsoleProtocol

__all__ = [
    "AnnotationLevel",
    "annotation",
    "emit_annotation",
    "end_group",
    "escape_data",
    "escape_property",
    "start_group",
    "write_step_outputs",
]

AnnotationLevel = Literal["error", "warning", "notice"]


def escape_data(value: str) -> str:
    return value.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


def escape_property(value: str) -> str:
    return escape_data(value).replace(":", "%3A").replace(",", "%2C")


def annotation(
    level: AnnotationLevel,
    message: str,
    *,
    file: str | None = None,
    line: int | None = None,
    col: int | None = None,
    title: str | None = None,
) -> str:
    """Format one `::<level> k=v,...::message` command."""
    props: list[str] = []
    if file is not None:
        props.append(f"file={escape_property(file)}")
    if line is not None:
        props.append(f"line={line}")
    if col is not None:
        props.append(f"col={col}")
    if title is not None:
        props.append(f"title={escape_property(title)}")

    head = f"::{level}"
    if props:
        head += " " + ",".join(props)
    return f"{head}::{escape_data(message)}"


def emit_annotation(
    console: ConsoleProtocol,
    level: AnnotationLevel,
    message: str,
    *,
    file: str | None = None,
    title: str | None = None,
) -> None:
    # A VERSION file has a single line; pin annotations to its start.
    line = 1 if file is not None else None
    col = 1 if file is not None else None
    console.raw(annotation(level, message, file=file, line=line, col=col, title=title))


def start_group(console: ConsoleProtocol, title: str) -> None:
    console.raw(f"::group::{escape_data(title)}")


def end_group(console: ConsoleProtocol) -> None:
    console.raw("::endgroup::")


def write_step_outputs(path: Path, values: Mapping[str, str]) -> None:
    """Append `key=value` lines to the file named by `GITHUB_OUTPUT`.

    Multi-line values use the heredoc form with a random delimiter.
    """
    with path.open("a", encoding="utf-8") as fh:
        for key, value in values.items():
            if "\n" in value or "\r" in value:
                delimiter = f"ghadelimiter_{uuid4()}"
                fh.write(f"{key}<<{delimiter}\n{value}\n{delimiter}\n")
            else:
                fh.write(f"{key}={value}\n")

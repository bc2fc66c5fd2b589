"""Output abstraction layer."""

from .console import (
    BufferedConsole,
    ConsoleProtocol,
    MockConsole,
    RichConsole,
    Style,
)
from .workflow import (
    annotation,
    emit_annotation,
    write_step_outputs,
)

__all__ = [
    "BufferedConsole",
    "ConsoleProtocol",
    "MockConsole",
    "RichConsole",
    "Style",
    "annotation",
    "emit_annotation",
    "write_step_outputs",
]

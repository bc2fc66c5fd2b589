"""Platform abstraction layer."""

from .process import (
    ProcessError,
    is_transient,
    run,
    run_with_retry,
)

__all__ = [
    # process
    "ProcessError",
    "is_transient",
    "run",
    "run_with_retry",
]

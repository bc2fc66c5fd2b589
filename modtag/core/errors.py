"""Error codes for CLI exit status.

Each command maps its failure to one of these codes. The gate job in the
workflow only looks at zero versus non-zero, but the distinction helps when
reading a failed run.
"""

from enum import IntEnum

__all__ = ["ErrorCode"]


class ErrorCode(IntEnum):
    """Exit codes for CLI commands.

    - 0: Success
    - 1: User error (invalid VERSION file, duplicate tag, failed gate)
    - 2: Environment error (missing gh, bad config, incomplete run context)
    - 4: Network error (tag lookup or publish failed)
    - 5: I/O error (VERSION file unreadable)
    """

    OK = 0
    USER_ERROR = 1
    ENV_ERROR = 2
    NETWORK_ERROR = 4
    IO_ERROR = 5

    def __str__(self) -> str:
        return self.name.lower().replace("_", " ")

    @property
    def is_success(self) -> bool:
        return self == ErrorCode.OK

"""Exit status of a release run."""

from enum import IntEnum

__all__ = ["ErrorCode"]


class ErrorCode(IntEnum):
    # Best-effort warnings (host release, registration) still exit OK.
    OK = 0
    FAILURE = 1

    def __str__(self) -> str:
        return "ok" if self is ErrorCode.OK else "failure"

    @property
    def is_success(self) -> bool:
        return self is ErrorCode.OK

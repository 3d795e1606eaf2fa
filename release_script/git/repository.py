"""Git queries the preflight check needs.

Only questions live here (pending changes, fetch, tracking status). Commands
that change the repository go through the execution gateway instead, so a dry
run can skip them.
"""

from __future__ import annotations

import re
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from release_script.core.result import Err, Ok, Result
from release_script.platform.process import ProcessError
from release_script.platform.process import run as run_process

__all__ = [
    "GitError",
    "GitStatus",
    "Repository",
]

ProcessRunner = Callable[[list[str], Path], Result[str, ProcessError]]

# "## main...origin/main [ahead 1, behind 3]"; upstream and counts optional.
_HEADER = re.compile(r"^##\s*(?P<branch>.*?)(?:\.\.\.\S+)?(?:\s+\[(?P<track>[^\]]*)\])?\s*$")
_COUNT = re.compile(r"(ahead|behind)\s+(\d+)")


@dataclass(frozen=True, slots=True)
class GitError:
    command: str  # git subcommand, e.g. "status"
    message: str
    returncode: int = 1


@dataclass(frozen=True, slots=True)
class GitStatus:
    branch: str
    ahead: int = 0
    behind: int = 0

    @property
    def is_behind(self) -> bool:
        return self.behind > 0


class Repository:
    def __init__(self, path: Path, runner: ProcessRunner | None = None) -> None:
        self.path = path
        self._runner: ProcessRunner = runner or run_process

    def pending_changes(self) -> Result[list[str], GitError]:
        """Paths differing from HEAD, staged or not."""
        match self._query("diff-index", "--name-only", "HEAD", "--"):
            case Ok(stdout):
                return Ok([line.strip() for line in stdout.splitlines() if line.strip()])
            case Err() as failed:
                return failed

    def fetch(self) -> Result[str, GitError]:
        return self._query("fetch").map(str.strip)

    def status(self) -> Result[GitStatus, GitError]:
        return self._query("status", "--porcelain=v1", "-b").map(parse_status)

    def _query(self, subcommand: str, *args: str) -> Result[str, GitError]:
        result = self._runner(["git", "-C", str(self.path), subcommand, *args], self.path)
        if isinstance(result, Err):
            failure = result.error
            return Err(
                GitError(
                    command=subcommand,
                    message=failure.stderr.strip() or f"git {subcommand} failed",
                    returncode=failure.returncode,
                )
            )
        return result


def parse_status(output: str) -> GitStatus:
    """Read branch tracking out of ``git status --porcelain=v1 -b``."""
    lines = [line for line in output.splitlines() if line.strip()]
    header = _HEADER.match(lines[0]) if lines else None
    if header is None:
        return GitStatus(branch="")

    counts = {kind: int(n) for kind, n in _COUNT.findall(header["track"] or "")}
    return GitStatus(
        branch=header["branch"].strip(),
        ahead=counts.get("ahead", 0),
        behind=counts.get("behind", 0),
    )

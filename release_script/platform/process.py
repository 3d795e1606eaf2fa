"""External commands (git, npm, changelog, bower).

A command is a program plus its argument list and never passes through a
shell, so version strings, tags and release notes can hold any character.
Only this module talks to ``subprocess``.

Usage:
    match run(["git", "fetch"], cwd=repo_root):
        case Ok(stdout):
            ...
        case Err(error):
            console.error(str(error))
"""

from __future__ import annotations

import shlex
import subprocess
from dataclasses import dataclass
from pathlib import Path

from release_script.core.result import Err, Ok, Result

__all__ = ["Command", "ProcessError", "run"]


@dataclass(frozen=True, slots=True)
class Command:
    """Program followed by its arguments."""

    argv: tuple[str, ...]

    @classmethod
    def of(cls, *argv: str) -> Command:
        return cls(argv=tuple(argv))

    def __str__(self) -> str:
        # Display only; execution never re-parses this string.
        return shlex.join(self.argv)


@dataclass(frozen=True, slots=True)
class ProcessError:
    """A command that could not start, timed out, or exited non-zero.

    ``returncode`` is -1 when the process never produced an exit status.
    """

    command: tuple[str, ...]
    returncode: int
    stdout: str
    stderr: str

    @property
    def output(self) -> str:
        """Captured stdout then stderr, blank streams left out."""
        return "\n".join(s.rstrip() for s in (self.stdout, self.stderr) if s.strip())

    def __str__(self) -> str:
        shown = " ".join(self.command[:3])
        if len(self.command) > 3:
            shown += " ..."
        return f"{shown} failed (exit {self.returncode})"


def _failed(cmd: list[str], returncode: int, stdout: str, stderr: str) -> Err[ProcessError]:
    return Err(ProcessError(command=tuple(cmd), returncode=returncode, stdout=stdout, stderr=stderr))


def run(
    cmd: list[str],
    cwd: Path,
    env: dict[str, str] | None = None,
    *,
    timeout: float | None = None,
) -> Result[str, ProcessError]:
    """Run ``cmd`` in ``cwd`` with captured text output.

    Returns:
        Ok(stdout) on exit status 0, otherwise Err(ProcessError) carrying
        whatever the process printed.
    """
    try:
        completed = subprocess.run(
            cmd,
            cwd=str(cwd),
            env=env,
            capture_output=True,
            text=True,
            timeout=timeout,
            check=False,
        )
    except subprocess.TimeoutExpired as e:
        partial = e.stdout if isinstance(e.stdout, str) else ""
        return _failed(cmd, -1, partial, f"Command timed out after {timeout}s")
    except OSError as e:
        return _failed(cmd, -1, "", str(e))

    if completed.returncode:
        return _failed(cmd, completed.returncode, completed.stdout, completed.stderr)
    return Ok(completed.stdout)

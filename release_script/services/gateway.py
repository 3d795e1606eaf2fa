"""Single toggle point for dry-run semantics.

Every externally observable mutation of the release (git add/commit/tag/push,
registry publish, manifest writes, scratch cleanup) goes through one of the
``*_safely`` methods. In dry-run mode they report the planned operation and
return without executing; in live mode they execute. Both modes record the
operation in ``planned`` so a dry run's plan can be compared with a live run.

Read-only commands and gates (``git fetch``, tests, builds, changelog text)
use ``run``, which always executes.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Literal

from release_script.core.result import Err, Ok, Result
from release_script.output.console import ConsoleProtocol, Style
from release_script.platform.files import atomic_write_text, remove_path
from release_script.platform.process import Command, ProcessError
from release_script.platform.process import run as run_process
from release_script.release.errors import ReleaseError
from release_script.release.model import ExecutionMode

__all__ = ["ExecutionGateway", "PlannedStep", "ProcessRunner"]

ProcessRunner = Callable[[list[str], Path], Result[str, ProcessError]]


@dataclass(frozen=True, slots=True)
class PlannedStep:
    """A mutating operation, as requested by a stage."""

    action: Literal["run", "remove", "write"]
    argv: tuple[str, ...]
    cwd: Path

    def __str__(self) -> str:
        match self.action:
            case "run":
                return str(Command(self.argv))
            case "remove":
                return str(Command.of("rm", "-rf", *self.argv))
            case "write":
                return f"write {self.argv[0]}"


class ExecutionGateway:
    """Runs commands for the release, honoring the execution mode.

    Attributes:
        mode: LIVE or DRY_RUN, fixed for the lifetime of the gateway.
        planned: Every mutating operation requested so far, in order.
    """

    def __init__(
        self,
        *,
        root: Path,
        mode: ExecutionMode,
        console: ConsoleProtocol,
        verbose: bool = False,
        runner: ProcessRunner | None = None,
    ) -> None:
        self.root = root
        self.mode = mode
        self.planned: list[PlannedStep] = []
        self._console = console
        self._verbose = verbose
        self._runner: ProcessRunner = runner or run_process
        self._cwd = root

    @property
    def cwd(self) -> Path:
        """Directory commands currently run in."""
        return self._cwd

    @property
    def is_dry_run(self) -> bool:
        return self.mode.is_dry_run

    @contextmanager
    def working_directory(self, path: Path) -> Iterator[Path]:
        """Run commands inside ``path`` for the duration of the block.

        The previous directory is restored on exit, including on error.
        """
        previous = self._cwd
        self._cwd = path
        try:
            yield path
        finally:
            self._cwd = previous

    def try_run(self, command: Command) -> Result[str, ProcessError]:
        """Execute ``command`` and hand back the raw process outcome."""
        if self._verbose:
            self._console.print(f"$ {command}", Style.DIM)
        result = self._runner(list(command.argv), self._cwd)
        if self._verbose:
            match result:
                case Ok(stdout) if stdout.strip():
                    self._console.print(stdout.rstrip(), Style.DIM)
                case Err(e) if e.output:
                    self._console.print(e.output, Style.DIM)
                case _:
                    pass
        return result

    def run(self, command: Command) -> Result[str, ReleaseError]:
        """Execute ``command``; a non-zero exit is fatal for the release."""
        result = self.try_run(command)
        if isinstance(result, Err):
            e = result.error
            return Err(
                ReleaseError(
                    kind="command_failed",
                    message=f"{command} failed (exit {e.returncode})",
                    output=e.output or None,
                )
            )
        return Ok(result.value)

    def run_safely(self, command: Command) -> Result[str | None, ReleaseError]:
        """Execute ``command`` in live mode; only report it in dry-run mode.

        Returns:
            Ok(stdout) when executed, Ok(None) when skipped by dry run.
        """
        self.planned.append(PlannedStep(action="run", argv=command.argv, cwd=self._cwd))
        if self.is_dry_run:
            self._console.planned(str(command))
            return Ok(None)
        result = self.run(command)
        if isinstance(result, Err):
            return result
        return Ok(result.value)

    def remove_safely(self, *paths: Path) -> Result[None, ReleaseError]:
        """Delete files or directory trees unless in dry-run mode."""
        for path in paths:
            step = PlannedStep(action="remove", argv=(self._display(path),), cwd=self._cwd)
            self.planned.append(step)
            if self.is_dry_run:
                self._console.planned(str(step))
                continue
            try:
                remove_path(path)
            except OSError as e:
                return Err(
                    ReleaseError(
                        kind="command_failed",
                        message=f"failed to remove {path}: {e}",
                    )
                )
        return Ok(None)

    def write_safely(self, path: Path, content: str) -> Result[None, ReleaseError]:
        """Write ``content`` to ``path`` unless in dry-run mode."""
        step = PlannedStep(action="write", argv=(self._display(path),), cwd=self._cwd)
        self.planned.append(step)
        if self.is_dry_run:
            self._console.planned(str(step))
            return Ok(None)
        try:
            atomic_write_text(path, content)
        except OSError as e:
            return Err(
                ReleaseError(
                    kind="command_failed",
                    message=f"failed to write {path}: {e}",
                )
            )
        return Ok(None)

    def _display(self, path: Path) -> str:
        try:
            return str(path.relative_to(self.root))
        except ValueError:
            return str(path)

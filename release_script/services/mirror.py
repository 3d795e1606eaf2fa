"""Satellite repository mirroring.

One protocol for every secondary repository (distribution repo, docs site):

1. remove the scratch directory if it exists
2. clone the mirror into it
3. delete everything in the clone except ``.git``
4. copy the source directory's contents in
5. commit, tag and push from inside the clone
6. delete the scratch directory

Step 3 makes the mirror reflect exactly the current build output; files from
earlier releases never accumulate. Steps 1-4 only touch the scratch
directory and always run; the publishing steps and the final cleanup honor
dry-run mode.
"""

from __future__ import annotations

from release_script.core.result import Err, Ok, Result
from release_script.output.console import ConsoleProtocol
from release_script.platform.files import clear_directory, copy_tree_contents, remove_path
from release_script.platform.process import Command
from release_script.release.errors import ReleaseError
from release_script.release.model import MirrorTarget
from release_script.services.gateway import ExecutionGateway


class SatelliteMirrorPublisher:
    def __init__(self, *, gateway: ExecutionGateway, console: ConsoleProtocol) -> None:
        self._gateway = gateway
        self._console = console

    def mirror(self, target: MirrorTarget, version_tag: str) -> Result[None, ReleaseError]:
        missing = target.missing_fields()
        if not version_tag.strip():
            missing.append("version_tag")
        if missing:
            return Err(
                ReleaseError(
                    kind="invalid_target",
                    message=f"mirror target is incomplete: missing {', '.join(missing)}",
                )
            )
        conflict = target.scratch_conflict(self._gateway.root)
        if conflict is not None:
            return Err(
                ReleaseError(
                    kind="invalid_target",
                    message=f"unsafe mirror scratch directory {target.scratch_directory}: {conflict}",
                    hint="Point the scratch directory option at a dedicated folder in the project.",
                )
            )
        if not target.source_directory.is_dir():
            return Err(
                ReleaseError(
                    kind="invalid_target",
                    message=f"mirror source directory does not exist: {target.source_directory}",
                    hint="Run the build first, or fix the source directory option.",
                )
            )

        cloned = self._clone(target)
        if isinstance(cloned, Err):
            return cloned

        # Every path past the clone ends in the scratch cleanup.
        outcome = self._fill(target)
        if isinstance(outcome, Ok):
            outcome = self._publish(target, version_tag)
        cleaned = self._gateway.remove_safely(target.scratch_directory)
        if isinstance(outcome, Err):
            return outcome
        return cleaned

    def _clone(self, target: MirrorTarget) -> Result[str, ReleaseError]:
        scratch = target.scratch_directory
        try:
            remove_path(scratch)
        except OSError as e:
            return Err(
                ReleaseError(kind="command_failed", message=f"failed to reset {scratch}: {e}")
            )
        return self._gateway.run(Command.of("git", "clone", target.repository_url, str(scratch)))

    def _fill(self, target: MirrorTarget) -> Result[None, ReleaseError]:
        scratch = target.scratch_directory
        try:
            clear_directory(scratch)
            copy_tree_contents(target.source_directory, scratch)
        except OSError as e:
            return Err(
                ReleaseError(
                    kind="command_failed",
                    message=f"failed to copy {target.source_directory} into {scratch}: {e}",
                )
            )
        return Ok(None)

    def _publish(self, target: MirrorTarget, version_tag: str) -> Result[None, ReleaseError]:
        with self._gateway.working_directory(target.scratch_directory):
            for command in (
                Command.of("git", "add", "-A", "."),
                Command.of("git", "commit", "-m", f"Release {version_tag}"),
                Command.of("git", "tag", "-a", f"--message={version_tag}", version_tag),
                Command.of("git", "push"),
                Command.of("git", "push", "--tags"),
            ):
                result = self._gateway.run_safely(command)
                if isinstance(result, Err):
                    return result
        return Ok(None)

from __future__ import annotations

import shutil
from collections.abc import Callable
from pathlib import Path

from release_script.core.result import Err, Ok, Result
from release_script.output.console import ConsoleProtocol
from release_script.platform.process import Command
from release_script.release.errors import ReleaseError
from release_script.release.model import ReleaseContext
from release_script.services.gateway import ExecutionGateway
from release_script.services.manifest import Manifest

CHANGELOG_TOOLS = frozenset({"rf-changelog", "mt-changelog"})
CHANGELOG_COMMAND = "changelog"

CHANGELOG_FILE = "CHANGELOG.md"
PRERELEASE_CHANGELOG_FILE = "CHANGELOG-alpha.md"


def detect_changelog_capability(
    manifest: Manifest,
    *,
    which: Callable[[str], str | None] = shutil.which,
) -> Result[bool, ReleaseError]:
    """Decide once whether the project generates changelogs from commits.

    The project opts in by depending on one of the changelog tools, or by
    being one of them.
    """
    declared = manifest.name in CHANGELOG_TOOLS or any(
        tool in manifest.dev_dependencies for tool in CHANGELOG_TOOLS
    )
    if not declared:
        return Ok(False)

    if which(CHANGELOG_COMMAND) is None:
        return Err(
            ReleaseError(
                kind="changelog_missing",
                message="a changelog tool is declared in devDependencies but not installed",
                hint="Run: npm install",
            )
        )
    return Ok(True)


class ChangelogStage:
    """Writes the changelog file and collects release notes for the tag."""

    def __init__(
        self,
        *,
        gateway: ExecutionGateway,
        console: ConsoleProtocol,
        repo_root: Path,
        enabled: bool,
    ) -> None:
        self._gateway = gateway
        self._console = console
        self._repo_root = repo_root
        self.enabled = enabled

    def generate(
        self,
        title: str,
        *,
        exclude_pre_releases: bool,
        output: str | None = None,
    ) -> Result[str | None, ReleaseError]:
        """Invoke the generator.

        With ``output`` the changelog is written to that file (a mutation, so
        dry runs skip it). Without it the notes are printed as plain text and
        returned.
        """
        argv = [CHANGELOG_COMMAND, "--title", title]
        if output is not None:
            argv += ["--out", output]
        else:
            argv.append("-s")
        if exclude_pre_releases:
            argv.append("--exclude-pre-releases")

        command = Command(tuple(argv))
        if output is not None:
            return self._gateway.run_safely(command)
        text = self._gateway.run(command)
        if isinstance(text, Err):
            return text
        return Ok(text.value)

    def run(self, context: ReleaseContext) -> Result[None, ReleaseError]:
        if not self.enabled:
            return Ok(None)
        if context.version is None:
            raise AssertionError("changelog stage requires a resolved version")

        tag = context.version.tag
        prerelease = context.config.is_prerelease

        if not prerelease and (self._repo_root / PRERELEASE_CHANGELOG_FILE).exists():
            dropped = self._drop_prerelease_changelog(context)
            if isinstance(dropped, Err):
                return dropped

        output = PRERELEASE_CHANGELOG_FILE if prerelease else CHANGELOG_FILE
        written = self.generate(tag, exclude_pre_releases=not prerelease, output=output)
        if isinstance(written, Err):
            return written
        added = self._gateway.run_safely(Command.of("git", "add", "-A", "--", output))
        if isinstance(added, Err):
            return added
        context.staged.append(output)
        self._console.success(f"generated {output}")

        notes = self.generate(tag, exclude_pre_releases=False)
        if isinstance(notes, Err):
            return notes
        context.add_notes(notes.value or "")
        return Ok(None)

    def _drop_prerelease_changelog(self, context: ReleaseContext) -> Result[None, ReleaseError]:
        removed = self._gateway.remove_safely(self._repo_root / PRERELEASE_CHANGELOG_FILE)
        if isinstance(removed, Err):
            return removed
        # The file may never have been committed; unmatched paths are a no-op.
        unstaged = self._gateway.run_safely(
            Command.of("git", "rm", "-q", "--cached", "--ignore-unmatch", "--", PRERELEASE_CHANGELOG_FILE)
        )
        if isinstance(unstaged, Err):
            return unstaged
        context.staged.append(PRERELEASE_CHANGELOG_FILE)
        self._console.info(f"removed {PRERELEASE_CHANGELOG_FILE}")
        return Ok(None)

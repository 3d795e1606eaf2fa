from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Literal

BumpKind = Literal["major", "minor", "patch"]

STANDARD_BUMPS: tuple[BumpKind, ...] = ("major", "minor", "patch")

# Pre-release identifier stamped on documentation-only releases.
DOCS_PREID = "docs"


class ExecutionMode(Enum):
    LIVE = "live"
    DRY_RUN = "dry-run"

    @property
    def is_dry_run(self) -> bool:
        return self is ExecutionMode.DRY_RUN


@dataclass(frozen=True, slots=True)
class ReleaseConfig:
    """Operator input for one release run.

    ``bump`` is ``major``/``minor``/``patch``, an explicit version string, or
    None when only a pre-release identifier is given.
    """

    bump: str | None = None
    preid: str | None = None
    tag: str | None = None  # registry dist-tag
    dry_run: bool = False
    verbose: bool = False
    only_docs: bool = False
    skip_tests: bool = False
    skip_build: bool = False
    skip_version_bump: bool = False
    notes: str | None = None

    @property
    def mode(self) -> ExecutionMode:
        return ExecutionMode.DRY_RUN if self.dry_run else ExecutionMode.LIVE

    @property
    def is_prerelease(self) -> bool:
        # A blank identifier adds no pre-release segment to the version.
        return bool(self.preid)

    @property
    def is_docs_prerelease(self) -> bool:
        """True for pre-releases other than the synthetic docs-only one."""
        return self.is_prerelease and not self.only_docs


@dataclass(frozen=True, slots=True)
class VersionInfo:
    old: str
    new: str

    @property
    def tag(self) -> str:
        return f"v{self.new}"

    @property
    def changed(self) -> bool:
        return self.old != self.new


@dataclass(frozen=True, slots=True)
class MirrorTarget:
    """A satellite repository that mirrors a directory of build output."""

    repository_url: str
    source_directory: Path
    scratch_directory: Path

    @classmethod
    def from_options(
        cls,
        *,
        repository_url: str | None,
        repo_root: Path,
        source: str,
        scratch: str,
    ) -> MirrorTarget | None:
        # No URL means the target is disabled.
        if not repository_url:
            return None
        return cls(
            repository_url=repository_url,
            source_directory=repo_root / source if source.strip() else Path(),
            scratch_directory=repo_root / scratch if scratch.strip() else Path(),
        )

    def missing_fields(self) -> list[str]:
        missing: list[str] = []
        if not self.repository_url.strip():
            missing.append("repository_url")
        if self.source_directory == Path():
            missing.append("source_directory")
        if self.scratch_directory == Path():
            missing.append("scratch_directory")
        return missing

    def scratch_conflict(self, repo_root: Path) -> str | None:
        """Describe why the scratch directory cannot be wiped, or None.

        The scratch directory is deleted before every clone and copied into,
        so it must not hold the repository or the source, nor sit inside the
        source.
        """
        root = repo_root.resolve()
        scratch = self.scratch_directory.resolve()
        source = self.source_directory.resolve()
        if scratch == root or scratch in root.parents:
            return "it contains the repository"
        if scratch == source or scratch in source.parents:
            return "it contains the source directory"
        if source in scratch.parents:
            return "it is inside the source directory"
        return None


def _empty_paths() -> list[str]:
    return []


@dataclass(slots=True)
class ReleaseContext:
    """Mutable state threaded through one release run.

    Owned by the orchestrator; stages receive it for the duration of a call.
    """

    config: ReleaseConfig
    version: VersionInfo | None = None
    notes: str | None = None
    reverted: bool = False
    staged: list[str] = field(default_factory=_empty_paths)

    @classmethod
    def start(cls, config: ReleaseConfig) -> ReleaseContext:
        notes = config.notes.strip() if config.notes and config.notes.strip() else None
        return cls(config=config, notes=notes)

    def add_notes(self, text: str) -> None:
        text = text.strip()
        if not text:
            return
        self.notes = f"{self.notes}\n\n{text}" if self.notes else text

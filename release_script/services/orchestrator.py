"""Top-level release sequencing.

Preflight, version, manifest, gate, changelog, commit, tag, push, then
publishing: GitHub release (best-effort), npm, distribution mirror, docs
mirror. Each stage returns a Result and the first Err ends the run. Nothing is
rolled back after the push: pushed history is never rewritten.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass
from pathlib import Path

from release_script.core.config import ReleaseOptions
from release_script.core.result import Err, Ok, Result
from release_script.git.repository import Repository
from release_script.output.console import ConsoleProtocol, Style
from release_script.platform.http import HttpClient
from release_script.platform.process import Command
from release_script.release.errors import ReleaseError
from release_script.release.model import (
    MirrorTarget,
    ReleaseConfig,
    ReleaseContext,
    VersionInfo,
)
from release_script.release.resolver import resolve_version_info
from release_script.services.changelog import ChangelogStage
from release_script.services.gate import BuildTestGate
from release_script.services.gateway import ExecutionGateway
from release_script.services.host import HostReleasePublisher
from release_script.services.manifest import MANIFEST_NAME, Manifest, parse_owner_repo
from release_script.services.mirror import SatelliteMirrorPublisher
from release_script.services.preflight import check_preflight
from release_script.services.registry import RegistryPublisher


@dataclass(frozen=True, slots=True)
class MirrorTargets:
    distribution: MirrorTarget | None
    docs: MirrorTarget | None

    @classmethod
    def from_options(cls, options: ReleaseOptions, repo_root: Path) -> MirrorTargets:
        return cls(
            distribution=MirrorTarget.from_options(
                repository_url=options.bower_repo,
                repo_root=repo_root,
                source=options.bower_root,
                scratch=options.tmp_bower_repo,
            ),
            docs=MirrorTarget.from_options(
                repository_url=options.docs_repo,
                repo_root=repo_root,
                source=options.docs_root,
                scratch=options.tmp_docs_repo,
            ),
        )


@dataclass(frozen=True, slots=True)
class ReleaseOutcome:
    version: VersionInfo
    host_release: threading.Thread | None = None


class ReleaseOrchestrator:
    def __init__(
        self,
        *,
        repo_root: Path,
        config: ReleaseConfig,
        options: ReleaseOptions,
        manifest: Manifest,
        console: ConsoleProtocol,
        gateway: ExecutionGateway,
        repository: Repository,
        http_client: HttpClient,
        changelog_enabled: bool,
        github_token: str | None,
    ) -> None:
        self._repo_root = repo_root
        self._config = config
        self._options = options
        self._manifest = manifest
        self._console = console
        self._gateway = gateway
        self._repository = repository
        self._http_client = http_client
        self._changelog_enabled = changelog_enabled
        self._github_token = github_token
        self._targets = MirrorTargets.from_options(options, repo_root)

    def run(self) -> Result[ReleaseOutcome, ReleaseError]:
        config = self._config
        context = ReleaseContext.start(config)
        if config.dry_run:
            self._console.print("DRY RUN", Style.PLANNED)

        ok = check_preflight(repo=self._repository, console=self._console)
        if isinstance(ok, Err):
            return ok

        version = self._resolve_version()
        if isinstance(version, Err):
            return version
        context.version = version.value

        manifest = self._persist_manifest(context)
        if isinstance(manifest, Err):
            return manifest

        gate = BuildTestGate(gateway=self._gateway, console=self._console, manifest=manifest.value)
        ok = gate.run(context)
        if isinstance(ok, Err):
            return ok

        changelog = ChangelogStage(
            gateway=self._gateway,
            console=self._console,
            repo_root=self._repo_root,
            enabled=self._changelog_enabled,
        )
        ok = changelog.run(context)
        if isinstance(ok, Err):
            return ok

        ok = self._commit_tag_push(context)
        if isinstance(ok, Err):
            return ok

        host_release: threading.Thread | None = None
        registry = RegistryPublisher(
            gateway=self._gateway,
            console=self._console,
            manifest=manifest.value,
            host=HostReleasePublisher(client=self._http_client, console=self._console),
            alt_pkg_root=(
                self._repo_root / self._options.alt_pkg_root_folder
                if self._options.alt_pkg_root_folder
                else None
            ),
        )
        mirrors = SatelliteMirrorPublisher(gateway=self._gateway, console=self._console)
        tag = version.value.tag

        if config.only_docs:
            self._console.info("docs-only release, package publishing skipped")
        else:
            host_release = self._publish_host(registry, context)

            dist_tag = config.tag or (config.preid if config.is_prerelease else None)
            ok = registry.publish_to_registry(dist_tag, config.is_prerelease)
            if isinstance(ok, Err):
                return ok

            ok = self._publish_distribution(registry, mirrors, tag)
            if isinstance(ok, Err):
                return ok

        ok = self._publish_docs(manifest.value, mirrors, tag)
        if isinstance(ok, Err):
            return ok

        self._console.success(f"version {tag} released!")
        return Ok(ReleaseOutcome(version=version.value, host_release=host_release))

    def _resolve_version(self) -> Result[VersionInfo, ReleaseError]:
        current = self._manifest.version or ""
        if self._config.skip_version_bump:
            self._console.info(f"version bump skipped, version unchanged: {current}")
            return Ok(VersionInfo(old=current, new=current))

        resolved = resolve_version_info(current, self._config.bump, self._config.preid)
        if isinstance(resolved, Err):
            return resolved
        self._console.info(f"version changed from {resolved.value.old} to {resolved.value.new}")
        return resolved

    def _persist_manifest(self, context: ReleaseContext) -> Result[Manifest, ReleaseError]:
        assert context.version is not None
        if not context.version.changed:
            return Ok(self._manifest)

        bumped = self._manifest.with_version(context.version.new)
        written = self._gateway.write_safely(bumped.path, bumped.render())
        if isinstance(written, Err):
            return written

        staged = self._gateway.run_safely(Command.of("git", "add", MANIFEST_NAME))
        if isinstance(staged, Err):
            return staged
        context.staged.append(MANIFEST_NAME)
        return Ok(bumped)

    def _commit_tag_push(self, context: ReleaseContext) -> Result[None, ReleaseError]:
        assert context.version is not None
        tag = context.version.tag

        if context.staged:
            committed = self._gateway.run_safely(Command.of("git", "commit", "-m", f"Release {tag}"))
            if isinstance(committed, Err):
                return committed
        else:
            self._console.warning("nothing staged, release commit skipped")

        self._console.info(f"tagging: {tag}")
        for command in (
            Command.of("git", "tag", "-a", "-m", context.notes or tag, tag),
            Command.of("git", "push"),
            Command.of("git", "push", "--tags"),
        ):
            result = self._gateway.run_safely(command)
            if isinstance(result, Err):
                return result
        self._console.success(f"tagged: {tag}")
        return Ok(None)

    def _publish_host(
        self, registry: RegistryPublisher, context: ReleaseContext
    ) -> threading.Thread | None:
        assert context.version is not None
        if not self._github_token:
            self._console.info("GITHUB_TOKEN not set, GitHub release skipped")
            return None

        repository_url = self._manifest.repository_url
        if repository_url is None:
            self._console.warning("no repository in package.json, GitHub release skipped")
            return None

        return registry.publish_to_host(
            self._github_token,
            parse_owner_repo(repository_url),
            context.version.tag,
            context.notes,
            self._config.is_prerelease,
        )

    def _publish_distribution(
        self,
        registry: RegistryPublisher,
        mirrors: SatelliteMirrorPublisher,
        tag: str,
    ) -> Result[None, ReleaseError]:
        target = self._targets.distribution
        if target is None:
            self._console.warning("bowerRepo is not set, bower publishing skipped")
            return Ok(None)

        self._console.info("releasing: bower package")
        ok = mirrors.mirror(target, tag)
        if isinstance(ok, Err):
            return ok
        self._console.success("released: bower package")

        if self._options.bower_register:
            registry.register(target.repository_url)
        return Ok(None)

    def _publish_docs(
        self,
        manifest: Manifest,
        mirrors: SatelliteMirrorPublisher,
        tag: str,
    ) -> Result[None, ReleaseError]:
        target = self._targets.docs
        if target is None:
            return Ok(None)
        if manifest.is_private or self._config.is_docs_prerelease:
            self._console.info("pre-release or private package, documentation publishing skipped")
            return Ok(None)

        self._console.info("releasing: documentation")
        ok = mirrors.mirror(target, tag)
        if isinstance(ok, Err):
            return ok
        self._console.success("released: documentation")
        return Ok(None)

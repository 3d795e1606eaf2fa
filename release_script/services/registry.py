from __future__ import annotations

import threading
from pathlib import Path

from release_script.core.result import Err, Ok, Result
from release_script.output.console import ConsoleProtocol
from release_script.platform.process import Command
from release_script.release.errors import ReleaseError
from release_script.services.gateway import ExecutionGateway
from release_script.services.host import HostReleasePublisher, releases_url
from release_script.services.manifest import MANIFEST_NAME, Manifest, render_json


class RegistryPublisher:
    """Publishes the package to npm and announces it on the code host."""

    def __init__(
        self,
        *,
        gateway: ExecutionGateway,
        console: ConsoleProtocol,
        manifest: Manifest,
        host: HostReleasePublisher,
        alt_pkg_root: Path | None = None,
    ) -> None:
        self._gateway = gateway
        self._console = console
        self._manifest = manifest
        self._host = host
        self._alt_pkg_root = alt_pkg_root

    def publish_to_registry(
        self, tag_name: str | None, is_prerelease_tag: bool
    ) -> Result[None, ReleaseError]:
        """Run ``npm publish``, optionally under a dist-tag.

        Args:
            tag_name: npm dist-tag (None for the default ``latest``).
            is_prerelease_tag: Whether the dist-tag comes from a pre-release.
        """
        if self._manifest.is_private:
            self._console.warning("package is private, npm publish skipped")
            return Ok(None)

        argv = ["npm", "publish"]
        if tag_name:
            argv += ["--tag", tag_name]
        command = Command(tuple(argv))

        label = f"npm package ({tag_name})" if is_prerelease_tag and tag_name else "npm package"
        self._console.info(f"releasing: {label}")

        if self._alt_pkg_root is None:
            published = self._gateway.run_safely(command)
        else:
            published = self._publish_from_alt_root(command, self._alt_pkg_root)
        if isinstance(published, Err):
            return published

        self._console.success(f"released: {label}")
        return Ok(None)

    def publish_to_host(
        self,
        token: str,
        owner_repo: str,
        tag_name: str,
        notes: str | None,
        is_prerelease: bool,
    ) -> threading.Thread | None:
        """Create the hosted release page without waiting for it.

        Returns:
            The background thread, or None in dry-run mode.
        """
        if self._gateway.is_dry_run:
            self._console.planned(f"POST {releases_url(owner_repo)} {tag_name}")
            return None

        self._console.info(f"releasing: GitHub release {tag_name}")
        return self._host.publish_in_background(
            token=token,
            owner_repo=owner_repo,
            tag_name=tag_name,
            notes=notes,
            is_prerelease=is_prerelease,
        )

    def register(self, repository_url: str) -> None:
        """Best-effort ``bower register``; failures only warn."""
        name = self._manifest.name
        if name is None:
            self._console.warning("package has no name, bower register skipped")
            return

        result = self._gateway.run_safely(Command.of("bower", "register", name, repository_url))
        if isinstance(result, Err):
            self._console.warning(f"bower register failed: {result.error.message}")
            return
        self._console.success(f"registered {name} in bower")

    def _publish_from_alt_root(
        self, command: Command, alt_root: Path
    ) -> Result[str | None, ReleaseError]:
        written = self._gateway.write_safely(
            alt_root / MANIFEST_NAME, render_json(self._manifest.trimmed())
        )
        if isinstance(written, Err):
            return written

        with self._gateway.working_directory(alt_root):
            return self._gateway.run_safely(command)

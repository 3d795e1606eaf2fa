from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from release_script.cli.helpers import exit_on_error
from release_script.core.config import ReleaseOptions, load_options
from release_script.output.console import ConsoleProtocol, RichConsole
from release_script.services.manifest import Manifest, load_manifest

ROOT_ENV = "RELEASE_SCRIPT_ROOT"


@dataclass(frozen=True, slots=True)
class CLIContext:
    repo_root: Path
    manifest: Manifest
    options: ReleaseOptions
    console: ConsoleProtocol


def repo_root() -> Path:
    env = os.environ.get(ROOT_ENV)
    if env:
        return Path(env).expanduser().resolve()
    return Path.cwd().resolve()


def build_context(root: Path | None = None) -> CLIContext:
    console = RichConsole()
    root = root or repo_root()

    manifest = exit_on_error(load_manifest(root), console)
    options = exit_on_error(load_options(manifest.data), console)

    return CLIContext(
        repo_root=root,
        manifest=manifest,
        options=options,
        console=console,
    )

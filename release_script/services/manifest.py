from __future__ import annotations

import json
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from release_script.core.config import CONFIG_KEY
from release_script.core.result import Err, Ok, Result
from release_script.core.structured import StrDict, as_str_dict, get_str, get_table
from release_script.release.errors import ReleaseError

MANIFEST_NAME = "package.json"

# Keys that only matter while building; dropped from the published manifest.
BUILD_ONLY_KEYS = (
    "scripts",
    "devDependencies",
    "files",
    CONFIG_KEY,
    "babel",
    "eslintConfig",
    "jest",
)

_SSH_URL_RE = re.compile(r"^git@github\.com:(.*)\.git$")
_GIT_HTTPS_URL_RE = re.compile(r"^git\+https://github\.com/(.*)\.git$")


@dataclass(frozen=True, slots=True)
class Manifest:
    """A parsed ``package.json``; key order is preserved on write."""

    path: Path
    data: StrDict

    @property
    def name(self) -> str | None:
        return get_str(self.data, "name")

    @property
    def version(self) -> str | None:
        return get_str(self.data, "version")

    @property
    def is_private(self) -> bool:
        return self.data.get("private") is True

    @property
    def scripts(self) -> StrDict:
        return get_table(self.data, "scripts") or {}

    @property
    def dev_dependencies(self) -> StrDict:
        return get_table(self.data, "devDependencies") or {}

    @property
    def repository_url(self) -> str | None:
        """``repository`` as a string or as ``{"url": ...}``."""
        repo = self.data.get("repository")
        if isinstance(repo, str):
            return repo.strip() or None
        table = as_str_dict(repo)
        if table is None:
            return None
        return get_str(table, "url")

    def has_script(self, name: str) -> bool:
        return isinstance(self.scripts.get(name), str)

    def with_version(self, version: str) -> Manifest:
        data = dict(self.data)
        data["version"] = version
        return Manifest(path=self.path, data=data)

    def trimmed(self) -> StrDict:
        """The manifest without build-only keys, for an alternate package root."""
        return {k: v for k, v in self.data.items() if k not in BUILD_ONLY_KEYS}

    def render(self) -> str:
        return render_json(self.data)


def render_json(data: dict[str, Any]) -> str:
    """Pretty-print a manifest the way npm does: 2-space indent, final newline."""
    return json.dumps(data, indent=2, ensure_ascii=False) + "\n"


def load_manifest(repo_root: Path) -> Result[Manifest, ReleaseError]:
    path = repo_root / MANIFEST_NAME
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        return Err(
            ReleaseError(
                kind="invalid_manifest",
                message=f"failed to read {MANIFEST_NAME}: {e}",
                hint=str(path),
            )
        )

    try:
        obj: object = json.loads(text)
    except json.JSONDecodeError as e:
        return Err(
            ReleaseError(
                kind="invalid_manifest",
                message=f"invalid JSON in {MANIFEST_NAME}: {e}",
                hint=str(path),
            )
        )

    data = as_str_dict(obj)
    if data is None:
        return Err(
            ReleaseError(
                kind="invalid_manifest",
                message=f"invalid JSON root in {MANIFEST_NAME}",
                hint=str(path),
            )
        )

    if get_str(data, "version") is None:
        return Err(
            ReleaseError(
                kind="invalid_manifest",
                message=f"missing version in {MANIFEST_NAME}",
                hint=str(path),
            )
        )

    return Ok(Manifest(path=path, data=data))


def parse_owner_repo(url: str) -> str:
    """Extract ``owner/repo`` from a GitHub repository URL.

    Accepts ``git@github.com:owner/repo.git``,
    ``git+https://github.com/owner/repo.git`` and a bare ``owner/repo``.
    Anything else is returned unchanged.
    """
    for pattern in (_SSH_URL_RE, _GIT_HTTPS_URL_RE):
        m = pattern.match(url)
        if m is not None:
            return m.group(1)
    return url

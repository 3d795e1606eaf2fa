"""Typed release options read from the manifest.

Projects configure the release through a ``release-script`` object in
``package.json``::

    "release-script": {
        "bowerRepo": "git@github.com:org/project-bower.git",
        "docsRepo": "git@github.com:org/project-docs.git",
        "altPkgRootFolder": "lib",
        "defaultDryRun": true
    }

Every key is optional. A missing ``bowerRepo``/``docsRepo`` disables the
matching mirror target.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass

from .result import Err, Ok, Result
from .structured import StrDict, get_bool, get_str, get_table

__all__ = [
    "CONFIG_KEY",
    "ConfigError",
    "ReleaseOptions",
    "load_options",
]

CONFIG_KEY = "release-script"

DEFAULT_BOWER_ROOT = "amd/"
DEFAULT_TMP_BOWER_REPO = "tmp-bower-repo"
DEFAULT_DOCS_ROOT = "docs-built/"
DEFAULT_TMP_DOCS_REPO = "tmp-docs-repo"


@dataclass(frozen=True, slots=True)
class ConfigError:
    """Error when the ``release-script`` options have the wrong shape."""

    message: str
    key: str | None = None


@dataclass(frozen=True, slots=True)
class ReleaseOptions:
    """Project-level release options (paths are relative to the repo root)."""

    bower_repo: str | None = None
    bower_root: str = DEFAULT_BOWER_ROOT
    tmp_bower_repo: str = DEFAULT_TMP_BOWER_REPO
    bower_register: bool = False
    docs_repo: str | None = None
    docs_root: str = DEFAULT_DOCS_ROOT
    tmp_docs_repo: str = DEFAULT_TMP_DOCS_REPO
    alt_pkg_root_folder: str | None = None
    skip_build_step: bool = False
    default_dry_run: bool = False


def load_options(manifest: Mapping[str, object]) -> Result[ReleaseOptions, ConfigError]:
    """Parse the ``release-script`` table of a manifest.

    Args:
        manifest: The parsed ``package.json`` object.

    Returns:
        Ok(ReleaseOptions) with defaults for absent keys, or Err(ConfigError)
        when a key holds a value of the wrong type.
    """
    if CONFIG_KEY not in manifest:
        return Ok(ReleaseOptions())

    table = get_table(manifest, CONFIG_KEY)
    if table is None:
        return Err(ConfigError(message=f"'{CONFIG_KEY}' must be an object", key=CONFIG_KEY))

    flags: dict[str, bool] = {}
    for key in ("bowerRegister", "skipBuildStep", "defaultDryRun"):
        value = get_bool(table, key)
        if value is None:
            return Err(ConfigError(message=f"'{key}' must be true or false", key=key))
        flags[key] = value

    for key in (
        "bowerRepo",
        "bowerRoot",
        "tmpBowerRepo",
        "docsRepo",
        "docsRoot",
        "tmpDocsRepo",
        "altPkgRootFolder",
    ):
        if key in table and not isinstance(table[key], str):
            return Err(ConfigError(message=f"'{key}' must be a string", key=key))

    return Ok(
        ReleaseOptions(
            bower_repo=get_str(table, "bowerRepo"),
            bower_root=_path_or(table, "bowerRoot", DEFAULT_BOWER_ROOT),
            tmp_bower_repo=_path_or(table, "tmpBowerRepo", DEFAULT_TMP_BOWER_REPO),
            bower_register=flags["bowerRegister"],
            docs_repo=get_str(table, "docsRepo"),
            docs_root=_path_or(table, "docsRoot", DEFAULT_DOCS_ROOT),
            tmp_docs_repo=_path_or(table, "tmpDocsRepo", DEFAULT_TMP_DOCS_REPO),
            alt_pkg_root_folder=get_str(table, "altPkgRootFolder"),
            skip_build_step=flags["skipBuildStep"],
            default_dry_run=flags["defaultDryRun"],
        )
    )


def _path_or(table: StrDict, key: str, default: str) -> str:
    return get_str(table, key) or default

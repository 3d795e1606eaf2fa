"""Next-version computation.

``resolve_version`` is pure: it never reads the manifest or touches git, so the
orchestrator calls it exactly once per run and stores the outcome in
``VersionInfo``.
"""

from __future__ import annotations

from typing import cast

from release_script.core.result import Err, Ok, Result
from release_script.release.errors import ReleaseError
from release_script.release.model import STANDARD_BUMPS, BumpKind, VersionInfo
from release_script.release.semver import parse_version

__all__ = ["resolve_version", "resolve_version_info"]


def resolve_version(
    current: str,
    bump: str | None,
    preid: str | None,
) -> Result[str, ReleaseError]:
    """Compute the next version.

    Args:
        current: Version currently declared in the manifest.
        bump: ``major``/``minor``/``patch``, an explicit version, or None.
        preid: Pre-release identifier (e.g. ``beta``), or None.

    Returns:
        Ok(new_version) or Err(ReleaseError) when neither a bump nor a preid is
        given, or when a version does not parse.
    """
    if bump is None and not preid:
        return Err(
            ReleaseError(
                kind="usage",
                message="must specify a version bump or a pre-release identifier",
            )
        )

    if bump is None or bump in STANDARD_BUMPS:
        parsed = parse_version(current)
        if parsed is None:
            return Err(
                ReleaseError(
                    kind="invalid_version",
                    message=f"current version is not a semantic version: {current}",
                    hint="Fix the 'version' field in package.json.",
                )
            )
        base = parsed if bump is None else parsed.bump(cast(BumpKind, bump))
    else:
        explicit = parse_version(bump)
        if explicit is None:
            return Err(
                ReleaseError(
                    kind="invalid_version",
                    message=f"not a version bump or semantic version: {bump}",
                    hint="Use major, minor, patch or MAJOR.MINOR.PATCH.",
                )
            )
        base = explicit

    if preid:
        base = base.pre(preid)

    return Ok(str(base))


def resolve_version_info(
    current: str,
    bump: str | None,
    preid: str | None,
) -> Result[VersionInfo, ReleaseError]:
    result = resolve_version(current, bump, preid)
    if isinstance(result, Err):
        return result
    return Ok(VersionInfo(old=current, new=result.value))

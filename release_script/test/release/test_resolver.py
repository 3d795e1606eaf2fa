from __future__ import annotations

from pathlib import Path

import pytest

from release_script.core.result import Err, Ok
from release_script.release.model import MirrorTarget, ReleaseConfig, ReleaseContext, VersionInfo
from release_script.release.resolver import resolve_version, resolve_version_info
from release_script.release.semver import parse_version


class TestResolveVersion:
    def test_minor_bump(self) -> None:
        result = resolve_version_info("1.2.3", "minor", None)
        assert result == Ok(VersionInfo(old="1.2.3", new="1.3.0"))
        assert result.unwrap().tag == "v1.3.0"

    def test_prerelease_increment_only(self) -> None:
        assert resolve_version("2.0.0-beta.0", None, "beta") == Ok("2.0.0-beta.1")

    def test_bump_with_preid(self) -> None:
        assert resolve_version("1.2.3", "minor", "beta") == Ok("1.3.0-beta.0")

    def test_explicit_version(self) -> None:
        assert resolve_version("1.2.3", "4.0.0", None) == Ok("4.0.0")

    def test_explicit_version_with_preid(self) -> None:
        assert resolve_version("1.2.3", "4.0.0", "rc") == Ok("4.0.0-rc.0")

    def test_requires_bump_or_preid(self) -> None:
        result = resolve_version("1.2.3", None, None)
        assert isinstance(result, Err)
        assert result.error.kind == "usage"

    def test_empty_preid_is_missing(self) -> None:
        result = resolve_version("1.2.3", None, "")
        assert isinstance(result, Err)
        assert result.error.kind == "usage"

    def test_invalid_explicit_version(self) -> None:
        result = resolve_version("1.2.3", "next", None)
        assert isinstance(result, Err)
        assert result.error.kind == "invalid_version"

    def test_invalid_current_version(self) -> None:
        result = resolve_version("banana", "patch", None)
        assert isinstance(result, Err)
        assert result.error.kind == "invalid_version"

    @pytest.mark.parametrize("current", ["0.0.1", "1.2.3", "2.0.0-beta.3", "10.4.0-rc.1"])
    @pytest.mark.parametrize("bump", ["major", "minor", "patch"])
    def test_bump_is_greater_than_current(self, current: str, bump: str) -> None:
        new = parse_version(resolve_version(current, bump, None).unwrap())
        old = parse_version(current)
        assert new is not None and old is not None
        assert new > old
        assert not new.is_prerelease

    @pytest.mark.parametrize("current", ["1.2.3", "1.2.3-beta.0", "1.2.3-beta.7"])
    def test_repeated_prerelease_only_moves_the_counter(self, current: str) -> None:
        first = parse_version(resolve_version(current, None, "beta").unwrap())
        assert first is not None
        second = parse_version(resolve_version(str(first), None, "beta").unwrap())
        assert second is not None

        assert (second.major, second.minor, second.patch) == (first.major, first.minor, first.patch)
        assert second.prerelease[0] == "beta"
        assert second.prerelease[1] == first.prerelease[1] + 1  # type: ignore[operator]


class TestReleaseModel:
    def test_version_info(self) -> None:
        info = VersionInfo(old="1.0.0", new="1.0.0")
        assert info.tag == "v1.0.0"
        assert not info.changed

    def test_docs_release_is_not_a_docs_prerelease(self) -> None:
        docs = ReleaseConfig(preid="docs", only_docs=True)
        beta = ReleaseConfig(bump="minor", preid="beta")

        assert docs.is_prerelease and not docs.is_docs_prerelease
        assert beta.is_prerelease and beta.is_docs_prerelease
        assert not ReleaseConfig(bump="patch").is_prerelease

    def test_empty_preid_is_not_a_prerelease(self) -> None:
        config = ReleaseConfig(bump="patch", preid="")

        assert not config.is_prerelease
        assert not config.is_docs_prerelease
        assert resolve_version("1.2.3", config.bump, config.preid) == Ok("1.2.4")

    def test_context_notes(self) -> None:
        context = ReleaseContext.start(ReleaseConfig(bump="patch", notes="  Fixes a crash. "))
        context.add_notes("")
        context.add_notes("* fix: crash\n")
        assert context.notes == "Fixes a crash.\n\n* fix: crash"

        blank = ReleaseContext.start(ReleaseConfig(bump="patch", notes="   "))
        assert blank.notes is None


class TestMirrorTarget:
    def test_disabled_without_url(self, tmp_path: Path) -> None:
        target = MirrorTarget.from_options(repository_url=None, repo_root=tmp_path, source="amd/", scratch="tmp")
        assert target is None

    def test_blank_directories_are_missing(self, tmp_path: Path) -> None:
        target = MirrorTarget.from_options(repository_url="o/r", repo_root=tmp_path, source=" ", scratch="")
        assert target is not None
        assert target.missing_fields() == ["source_directory", "scratch_directory"]

    def test_dedicated_scratch_directory_is_safe(self, tmp_path: Path) -> None:
        target = MirrorTarget.from_options(
            repository_url="o/r", repo_root=tmp_path, source="amd/", scratch="tmp-bower-repo"
        )
        assert target is not None
        assert target.scratch_conflict(tmp_path) is None

    @pytest.mark.parametrize(
        ("source", "scratch", "reason"),
        [
            ("amd/", ".", "it contains the repository"),
            ("amd/", "..", "it contains the repository"),
            ("amd/", "amd", "it contains the source directory"),
            ("dist/amd", "dist", "it contains the source directory"),
            (".", "tmp-bower-repo", "it is inside the source directory"),
        ],
    )
    def test_scratch_conflicts(self, tmp_path: Path, source: str, scratch: str, reason: str) -> None:
        target = MirrorTarget.from_options(repository_url="o/r", repo_root=tmp_path, source=source, scratch=scratch)
        assert target is not None
        assert target.scratch_conflict(tmp_path) == reason

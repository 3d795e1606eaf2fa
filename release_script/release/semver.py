from __future__ import annotations

import re
from dataclasses import dataclass
from functools import total_ordering

from release_script.release.model import BumpKind

_NUM = r"0|[1-9]\d*"
_PRE_IDENT = r"(?:0|[1-9]\d*|\d*[A-Za-z-][0-9A-Za-z-]*)"
_VERSION_RE = re.compile(
    rf"^v?(?P<major>{_NUM})\.(?P<minor>{_NUM})\.(?P<patch>{_NUM})"
    rf"(?:-(?P<pre>{_PRE_IDENT}(?:\.{_PRE_IDENT})*))?"
    r"(?:\+(?P<build>[0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*))?$",
    re.ASCII,
)

PreIdent = int | str


def _parse_ident(raw: str) -> PreIdent:
    return int(raw) if raw.isdigit() else raw


def _ident_key(ident: PreIdent) -> tuple[int, int, str]:
    # Numeric identifiers sort before alphanumeric ones.
    if isinstance(ident, int):
        return (0, ident, "")
    return (1, 0, ident)


@total_ordering
@dataclass(frozen=True, slots=True)
class SemVer:
    """A semantic version (https://semver.org) with npm increment rules."""

    major: int
    minor: int
    patch: int
    prerelease: tuple[PreIdent, ...] = ()
    build: tuple[str, ...] = ()

    @property
    def is_prerelease(self) -> bool:
        return bool(self.prerelease)

    def bump(self, kind: BumpKind) -> SemVer:
        """Increment one component.

        A pre-release already sitting on the target version is promoted
        instead of incremented, so ``2.0.0-beta.1`` bumped ``major`` is
        ``2.0.0``.
        """
        match kind:
            case "major":
                if self.minor or self.patch or not self.prerelease:
                    return SemVer(self.major + 1, 0, 0)
                return SemVer(self.major, 0, 0)
            case "minor":
                if self.patch or not self.prerelease:
                    return SemVer(self.major, self.minor + 1, 0)
                return SemVer(self.major, self.minor, 0)
            case "patch":
                if not self.prerelease:
                    return SemVer(self.major, self.minor, self.patch + 1)
                return SemVer(self.major, self.minor, self.patch)
            case _:
                raise AssertionError(f"unexpected bump kind: {kind}")

    def pre(self, preid: str) -> SemVer:
        """Apply a pre-release increment with identifier ``preid``.

        ``1.2.3`` becomes ``1.2.3-beta.0``; ``1.2.3-beta.0`` becomes
        ``1.2.3-beta.1``; a different identifier restarts at ``.0``.
        """
        idents = list(self.prerelease)
        if not idents:
            idents = [0]
        else:
            for i in range(len(idents) - 1, -1, -1):
                ident = idents[i]
                if isinstance(ident, int):
                    idents[i] = ident + 1
                    break
            else:
                idents.append(0)

        if idents[0] != preid or len(idents) < 2 or not isinstance(idents[1], int):
            idents = [preid, 0]

        return SemVer(self.major, self.minor, self.patch, tuple(idents))

    def _key(self) -> tuple[int, int, int, int, tuple[tuple[int, int, str], ...]]:
        release_rank = 0 if self.prerelease else 1
        return (
            self.major,
            self.minor,
            self.patch,
            release_rank,
            tuple(_ident_key(i) for i in self.prerelease),
        )

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, SemVer):
            return NotImplemented
        return self._key() < other._key()

    def __str__(self) -> str:
        out = f"{self.major}.{self.minor}.{self.patch}"
        if self.prerelease:
            out += "-" + ".".join(str(i) for i in self.prerelease)
        if self.build:
            out += "+" + ".".join(self.build)
        return out


def parse_version(text: str) -> SemVer | None:
    """Parse ``MAJOR.MINOR.PATCH[-PRE][+BUILD]`` (a leading ``v`` is accepted)."""
    m = _VERSION_RE.match(text.strip())
    if m is None:
        return None
    pre = m.group("pre")
    build = m.group("build")
    return SemVer(
        int(m.group("major")),
        int(m.group("minor")),
        int(m.group("patch")),
        tuple(_parse_ident(p) for p in pre.split(".")) if pre else (),
        tuple(build.split(".")) if build else (),
    )

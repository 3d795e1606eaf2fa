"""Error payload for the release pipeline."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

ReleaseErrorKind = Literal[
    "usage",
    "invalid_version",
    "invalid_manifest",
    "dirty_tree",
    "behind_upstream",
    "command_failed",
    "gate_failed",
    "invalid_target",
    "changelog_missing",
]


@dataclass(frozen=True, slots=True)
class ReleaseError:
    """Why a release stopped.

    The CLI prints ``message`` after ``error:``, then ``hint``, then any
    captured ``output`` verbatim.
    """

    kind: ReleaseErrorKind
    message: str
    hint: str | None = None
    output: str | None = None

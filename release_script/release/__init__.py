"""Release domain.

Pure types and rules, no I/O:
- model: configuration, version info, mirror targets, run context
- semver: semantic version parsing, ordering and increments
- resolver: next-version computation
- errors: the error payload every stage returns
"""

from __future__ import annotations
